"""n8n execution tools."""

from typing import Any

from bridge_tools.adapters.n8n.formatting import items_of

from .base import N8nToolBase


class ExecutionTools(N8nToolBase):
    """List and inspect executions, start workflows.

    Use Cases:
    - "Did my invoice workflow fail last night?"
    - "Run the lead intake form with this data"
    """

    async def list_executions(
        self,
        user_id: str | None = None,
        workflow_id: str | None = None,
        limit: int = 100,
    ) -> str:
        """List executions, optionally for one workflow."""
        config, error = await self._authenticate(user_id)
        if error:
            return error

        params: dict[str, Any] = {"limit": limit}
        if workflow_id:
            params["workflowId"] = workflow_id

        response = await self._call(config, "executions", params=params)
        if not response.success:
            return "Failed to get executions"

        executions = items_of(response.data)
        if not executions:
            return "No executions found"

        result = f"Found {len(executions)} executions:\n\n"
        for execution in executions:
            result += f"• **Execution ID:** {execution.get('id') or 'unknown'}\n"
            result += f"  Workflow ID: {execution.get('workflowId') or 'unknown'}\n"
            result += f"  Status: {execution.get('status') or 'unknown'}\n"
            result += f"  Started: {execution.get('startedAt') or 'unknown'}\n"
            result += f"  Finished: {execution.get('finishedAt') or 'unknown'}\n"
            result += f"  Mode: {execution.get('mode') or 'unknown'}\n\n"

        return result

    async def get_execution(self, user_id: str | None = None, execution_id: str | None = None) -> str:
        """Details of one execution."""
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not execution_id:
            return "Error: Execution ID is required."

        response = await self._call(config, f"executions/{execution_id}")
        if not response.success:
            return f"Failed to get execution: {execution_id}"

        data = response.payload
        entries = data.get("data")
        entry_count = len(entries) if isinstance(entries, (dict, list)) else 0

        result = "**Execution Details:**\n\n"
        result += f"• **Execution ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Workflow ID:** {data.get('workflowId') or 'unknown'}\n"
        result += f"• **Status:** {data.get('status') or 'unknown'}\n"
        result += f"• **Started:** {data.get('startedAt') or 'unknown'}\n"
        result += f"• **Finished:** {data.get('finishedAt') or 'unknown'}\n"
        result += f"• **Mode:** {data.get('mode') or 'unknown'}\n"
        result += f"• **Data:** {entry_count} data entries\n"

        return result

    async def execute_workflow(
        self,
        user_id: str | None = None,
        workflow_id: str | None = None,
        input_data: Any = None,
    ) -> str:
        """Start an active workflow through its trigger.

        Args:
            user_id: User whose n8n credentials are used
            workflow_id: Workflow to start
            input_data: Webhook body, form values (``field-N`` keys) or chat text
        """
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not workflow_id:
            return "Error: Workflow ID is required."

        response = await self._call(config, f"workflows/{workflow_id}")
        if not response.success or not response.payload:
            return (
                f"Error: Failed to retrieve workflow {workflow_id}. "
                "Please check if the workflow ID is correct."
            )

        workflow = response.payload
        if not workflow.get("active"):
            return (
                f'Error: Workflow "{workflow.get("name") or workflow_id}" is not active. '
                "Please activate the workflow first using the activate_n8n_workflow tool."
            )

        return await self.dispatcher.dispatch(config, workflow_id, workflow, input_data)
