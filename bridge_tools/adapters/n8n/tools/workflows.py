"""n8n workflow tools: list, get, create, update, delete, (de)activate."""

from typing import Any

from bridge_obs.logging import get_logger
from bridge_tools.adapters.n8n.exceptions import N8nValidationError
from bridge_tools.adapters.n8n.formatting import flag, items_of, tag_names
from bridge_tools.adapters.n8n.validation import is_valid_node, normalize_node

from .base import N8nToolBase

logger = get_logger(__name__)


class WorkflowTools(N8nToolBase):
    """Workflow CRUD and activation.

    Use Cases:
    - "Show me my n8n workflows"
    - "Create a workflow with a webhook and a Slack node"
    - "Deactivate the nightly sync workflow"
    """

    async def list_workflows(self, user_id: str | None = None, limit: int = 100) -> str:
        """List workflows in the user's n8n instance."""
        config, error = await self._authenticate(user_id)
        if error:
            return error

        response = await self._call(config, "workflows", params={"limit": limit})
        if not response.success:
            return "Failed to get workflows"

        workflows = items_of(response.data)
        if not workflows:
            return "No workflows found"

        result = f"Found {len(workflows)} workflows:\n\n"
        for workflow in workflows:
            result += f"• **{workflow.get('name') or 'No name'}**\n"
            result += f"  ID: {workflow.get('id') or 'unknown'}\n"
            result += f"  Active: {flag(workflow.get('active'))}\n"
            result += f"  Created: {workflow.get('createdAt') or 'unknown'}\n"
            result += f"  Updated: {workflow.get('updatedAt') or 'unknown'}\n"
            result += f"  Tags: {tag_names(workflow.get('tags'))}\n\n"

        return result

    async def get_workflow(self, user_id: str | None = None, workflow_id: str | None = None) -> str:
        """Details of one workflow."""
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not workflow_id:
            return "Error: Workflow ID is required."

        response = await self._call(config, f"workflows/{workflow_id}")
        if not response.success:
            return f"Failed to get workflow: {workflow_id}"

        data = response.payload
        nodes = data.get("nodes")
        connections = data.get("connections")

        result = "**Workflow Details:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Name:** {data.get('name') or 'No name'}\n"
        result += f"• **Active:** {flag(data.get('active'))}\n"
        result += f"• **Created:** {data.get('createdAt') or 'unknown'}\n"
        result += f"• **Updated:** {data.get('updatedAt') or 'unknown'}\n"
        result += f"• **Tags:** {tag_names(data.get('tags'))}\n"
        result += f"• **Nodes:** {len(nodes) if isinstance(nodes, list) else 0} nodes\n"
        result += (
            f"• **Connections:** {len(connections) if isinstance(connections, dict) else 0} connections\n"
        )

        return result

    async def create_workflow(
        self,
        user_id: str | None = None,
        name: str | None = None,
        nodes: list[dict[str, Any]] | None = None,
        connections: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
        static_data: Any = None,
        shared: list[dict[str, Any]] | None = None,
    ) -> str:
        """Create a workflow.

        The body carries exactly what ``POST workflows`` accepts: ``name``,
        ``nodes``, ``connections`` and ``settings``, plus ``staticData`` and
        ``shared`` when given. ``active`` and ``tags`` are read-only there.
        """
        config, error = await self._authenticate(user_id)
        if error:
            return error

        if not isinstance(name, str) or not name.strip():
            return "Error: Workflow name is required and must be a non-empty string."

        if not isinstance(nodes, list) or not nodes:
            return "Error: At least one node is required. Provide an array of workflow nodes."

        invalid = [index for index, node in enumerate(nodes) if not is_valid_node(node)]
        if invalid:
            logger.warning("n8n_invalid_nodes", indexes=invalid)
            return (
                "Error: Invalid node structure. Each node must have: type, name, and position "
                f"[x, y] (with numeric values). Found {len(invalid)} invalid node(s)."
            )

        try:
            normalized_nodes = [normalize_node(node) for node in nodes]
        except N8nValidationError as e:
            return f"Error: Invalid node structure. {e}."

        workflow_data: dict[str, Any] = {
            "name": name.strip(),
            "nodes": normalized_nodes,
            "connections": connections or {},
            "settings": settings or {},
        }
        if static_data is not None:
            workflow_data["staticData"] = static_data
        if isinstance(shared, list) and shared:
            workflow_data["shared"] = shared

        logger.info("n8n_create_workflow", name=workflow_data["name"], node_count=len(normalized_nodes))

        response = await self._call(config, "workflows", json_data=workflow_data, method="POST")
        if not response.success:
            return (
                f"Failed to create workflow: {name}. Please check the workflow structure "
                "and ensure all required fields are provided."
            )

        data = response.payload
        created_nodes = data.get("nodes")
        node_count = len(created_nodes) if isinstance(created_nodes, list) else len(nodes)

        result = "**Created Workflow:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Name:** {data.get('name') or 'No name'}\n"
        result += f"• **Active:** {flag(data.get('active'))}\n"
        result += f"• **Nodes:** {node_count} node(s)\n"
        result += f"• **Created:** {data.get('createdAt') or 'unknown'}\n"
        if data.get("description"):
            result += f"• **Description:** {data['description']}\n"
        if isinstance(data.get("tags"), list) and data["tags"]:
            result += f"• **Tags:** {tag_names(data['tags'])}\n"

        return result

    async def update_workflow(
        self,
        user_id: str | None = None,
        workflow_id: str | None = None,
        name: str | None = None,
        nodes: list[dict[str, Any]] | None = None,
        connections: dict[str, Any] | None = None,
        active: bool | None = None,
    ) -> str:
        """Update the given fields of a workflow."""
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not workflow_id:
            return "Error: Workflow ID is required."

        update_data: dict[str, Any] = {}
        if name is not None:
            update_data["name"] = name
        if nodes is not None:
            update_data["nodes"] = nodes
        if connections is not None:
            update_data["connections"] = connections
        if active is not None:
            update_data["active"] = active

        response = await self._call(config, f"workflows/{workflow_id}", json_data=update_data, method="PUT")
        if not response.success:
            return f"Failed to update workflow: {workflow_id}"

        data = response.payload
        result = "**Updated Workflow:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Name:** {data.get('name') or 'No name'}\n"
        result += f"• **Active:** {flag(data.get('active'))}\n"
        result += f"• **Updated:** {data.get('updatedAt') or 'unknown'}\n"

        return result

    async def delete_workflow(self, user_id: str | None = None, workflow_id: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not workflow_id:
            return "Error: Workflow ID is required."

        response = await self._call(config, f"workflows/{workflow_id}", method="DELETE")
        if not response.success:
            return f"Failed to delete workflow: {workflow_id}"

        return f"Successfully deleted workflow: {workflow_id}"

    async def activate_workflow(self, user_id: str | None = None, workflow_id: str | None = None) -> str:
        return await self._set_active(user_id, workflow_id, "activate")

    async def deactivate_workflow(self, user_id: str | None = None, workflow_id: str | None = None) -> str:
        return await self._set_active(user_id, workflow_id, "deactivate")

    async def _set_active(self, user_id: str | None, workflow_id: str | None, action: str) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not workflow_id:
            return "Error: Workflow ID is required."

        response = await self._call(config, f"workflows/{workflow_id}/{action}", method="POST")
        if not response.success:
            return f"Failed to {action} workflow: {workflow_id}"

        return f"Successfully {action}d workflow: {workflow_id}"
