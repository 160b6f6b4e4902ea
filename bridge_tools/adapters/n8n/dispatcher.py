"""Workflow execution dispatch.

Picks how to start a workflow from its trigger node:

- webhook: call ``{host}/webhook/{path}`` once
- form: run endpoint first, multipart form submission as fallback
- schedule / chat / manual: run endpoint first, ``workflows/{id}/execute``
  as fallback

At most two network attempts are made per execution request.
"""

from typing import Any

from bridge_config.settings import Settings
from bridge_obs.logging import get_logger

from .client import N8nClient, host_url
from .exceptions import N8nFormSubmissionError
from .formatting import flag, json_block, to_json
from .forms import generate_default_form_data, merge_form_data
from .schemas import N8nApiResponse, N8nConfig, Trigger, TriggerType
from .triggers import active_version_trigger, detect_trigger, dig

logger = get_logger(__name__)

SUPPORTED_TRIGGERS = "webhook, form, schedule, chat, manual"
DEFAULT_CHAT_MESSAGE = "Workflow triggered via n8n-bridge"


def wrap_items(data: Any) -> list[Any]:
    """n8n expects item lists; wrap a single item."""
    return data if isinstance(data, list) else [data]


def build_run_payload(
    workflow: dict[str, Any],
    trigger_node: dict[str, Any] | None,
    data: list[Any] | None = None,
    default_trigger_name: str = "Trigger",
) -> dict[str, Any]:
    """Body for ``/rest/workflows/{id}/run`` embedding the full definition."""
    payload: dict[str, Any] = {
        "workflowData": {
            "name": workflow.get("name"),
            "nodes": workflow.get("nodes") or [],
            "connections": workflow.get("connections") or {},
            "settings": workflow.get("settings") or {},
            "active": workflow.get("active"),
            "pinData": workflow.get("pinData") or {},
            "tags": workflow.get("tags") or [],
            "versionId": workflow.get("versionId") or workflow.get("activeVersionId"),
            "meta": workflow.get("meta") or {},
            "id": workflow.get("id"),
        },
        "startNodes": [],
    }
    if trigger_node is not None:
        payload["triggerToStartFrom"] = {"name": trigger_node.get("name") or default_trigger_name}
    if data is not None:
        payload["data"] = data
    return payload


class WorkflowDispatcher:
    """Starts an active workflow through the strategy its trigger needs."""

    def __init__(self, client: N8nClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings or client.settings

    def host_for(self, config: N8nConfig) -> str:
        return host_url(config.api_base_url or self.settings.N8N_API_BASE)

    async def dispatch(
        self,
        config: N8nConfig,
        workflow_id: str,
        workflow: dict[str, Any],
        input_data: Any = None,
    ) -> str:
        """Execute a workflow that is already known to be active.

        Args:
            config: Resolved user configuration
            workflow_id: Workflow ID as requested by the caller
            workflow: Full workflow from ``GET workflows/{id}``
            input_data: Optional caller payload

        Returns:
            Text report (success or error)
        """
        trigger = detect_trigger(workflow)
        name = workflow.get("name") or workflow_id
        host = self.host_for(config)

        logger.info(
            "n8n_execute_dispatch",
            workflow_id=workflow_id,
            trigger_type=trigger.type.value,
            has_path=bool(trigger.path),
        )

        if trigger.type == TriggerType.WEBHOOK:
            if not trigger.path:
                return (
                    f'Error: Workflow "{name}" has a webhook trigger without a path. '
                    "Please set the webhook path in n8n."
                )
            return await self._run_webhook(host, name, trigger, input_data)

        if trigger.type == TriggerType.FORM:
            return await self._run_form(config, host, workflow_id, workflow, trigger, input_data)

        if trigger.type in (TriggerType.SCHEDULE, TriggerType.CHAT, TriggerType.MANUAL):
            return await self._run_direct(config, host, workflow_id, workflow, trigger, input_data)

        return (
            f'Error: Workflow "{name}" has an unsupported trigger type ({trigger.type.value}). '
            f"Supported triggers: {SUPPORTED_TRIGGERS}."
        )

    # ------------------------------------------------------------------
    # webhook
    # ------------------------------------------------------------------

    async def _run_webhook(
        self,
        host: str,
        name: str,
        trigger: Trigger,
        input_data: Any,
    ) -> str:
        webhook_url = f"{host}/webhook/{trigger.path}"
        method = trigger.http_method or "POST"

        if method == "GET":
            body = input_data
        else:
            body = wrap_items(input_data) if input_data is not None else None

        response = await self.client.call_webhook(webhook_url, method, body)
        if not response.success:
            result = f"Error triggering webhook workflow: {response.error_message()}"
            if response.status_code:
                result += f"\n\n**HTTP Status:** {response.status_code}\n"
            return result

        result = "**Webhook Workflow Triggered Successfully:**\n\n"
        result += f"• **Workflow:** {name}\n"
        result += "• **Trigger Type:** Webhook\n"
        result += f"• **Webhook URL:** {webhook_url}\n"
        result += f"• **Method:** {method}\n"
        result += f"• **Status Code:** {response.status_code}\n"
        if response.data:
            result += f"• **Response:** {to_json(response.data)}\n"
        return result

    # ------------------------------------------------------------------
    # form
    # ------------------------------------------------------------------

    async def _run_form(
        self,
        config: N8nConfig,
        host: str,
        workflow_id: str,
        workflow: dict[str, Any],
        trigger: Trigger,
        input_data: Any,
    ) -> str:
        name = workflow.get("name") or workflow_id

        # Form triggers only accept submissions on a published version.
        if not workflow.get("activeVersionId"):
            return (
                f'Error: Workflow "{name}" is active but not published. Form workflows '
                "must be published to accept form submissions. Please publish the workflow in n8n."
            )
        if not trigger.node:
            return (
                f'Error: Workflow "{name}" has a form trigger but the trigger node configuration '
                "could not be found. Please check the workflow configuration in n8n."
            )
        if not trigger.path:
            return (
                f'Error: Workflow "{name}" form trigger is missing a form ID/path. '
                "Please check the form trigger configuration in n8n."
            )

        trigger_node = trigger.node
        if workflow.get("activeVersion") and not dig(trigger_node, "parameters", "fields"):
            trigger_node = active_version_trigger(workflow) or trigger_node

        defaults = generate_default_form_data(trigger_node, workflow)
        form_data, used_defaults = merge_form_data(defaults, input_data)
        form_url = f"{host}/form/{trigger.path}"

        run_response = await self.client.run_workflow(
            host,
            workflow_id,
            config.api_key,
            build_run_payload(workflow, trigger_node, [form_data], "On form submission"),
        )
        if run_response.success and run_response.status_code == 200:
            result = "**Form Workflow Executed Successfully:**\n\n"
            result += f"• **Workflow:** {name}\n"
            result += "• **Trigger Type:** Form\n"
            result += "• **Execution Method:** /rest/workflows/{id}/run endpoint\n"
            result += f"• **Status Code:** {run_response.status_code}\n"
            result += self._form_data_lines(form_data, used_defaults)
            if run_response.data:
                result += f"• **Response:**\n{json_block(run_response.data)}\n"
            return result

        logger.info(
            "n8n_form_run_endpoint_failed",
            workflow_id=workflow_id,
            status=run_response.status_code,
            error=run_response.error,
        )

        try:
            response = await self._submit_form(form_url, form_data, host)
        except N8nFormSubmissionError as e:
            logger.warning(
                "n8n_form_submission_failed",
                workflow_id=workflow_id,
                form_url=form_url,
                status=e.status_code,
            )
            return self._form_error(e, workflow, trigger, form_url, form_data, used_defaults)

        result = "**Form Workflow Triggered Successfully:**\n\n"
        result += f"• **Workflow:** {name}\n"
        result += "• **Trigger Type:** Form\n"
        result += f"• **Form URL:** {form_url}\n"
        result += self._form_data_lines(form_data, used_defaults)
        result += f"• **Status Code:** {response.status_code}\n"
        if response.data:
            result += f"• **Response:** {to_json(response.data)}\n"
        return result

    async def _submit_form(
        self,
        form_url: str,
        form_data: dict[str, Any],
        host: str,
    ) -> N8nApiResponse:
        """Multipart submission.

        Raises:
            N8nFormSubmissionError: Transport failure or status >= 400
        """
        response = await self.client.submit_form(form_url, form_data, origin=host)

        if response.status_code is None:
            raise N8nFormSubmissionError(response.error_message())

        if response.status_code >= 400:
            body = response.payload
            message = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            raise N8nFormSubmissionError(
                f"Form submission returned {response.status_code}: {message}",
                status_code=response.status_code,
                response_data=response.data,
            )

        return response

    @staticmethod
    def _form_data_lines(form_data: dict[str, Any], used_defaults: bool) -> str:
        lines = ""
        if used_defaults:
            lines += "• **Note:** Automatically generated form data based on form fields\n"
        lines += f"• **Form Data Sent:**\n{json_block(form_data)}\n"
        return lines

    @staticmethod
    def _form_error(
        error: N8nFormSubmissionError,
        workflow: dict[str, Any],
        trigger: Trigger,
        form_url: str,
        form_data: dict[str, Any],
        used_defaults: bool,
    ) -> str:
        message = str(error)
        version_id = workflow.get("activeVersionId")

        result = f"Error triggering form workflow: {message}\n\n"
        result += "**Diagnostics:**\n"
        result += f"• Workflow: {workflow.get('name') or workflow.get('id')}\n"
        result += f"• Active: {flag(workflow.get('active'))}\n"
        result += f"• Published: {flag(version_id)}\n"
        result += f"• Version ID: {version_id or 'None (workflow not published)'}\n"
        result += f"• Form ID: {trigger.path or 'None'}\n"
        result += f"• Form URL: {form_url}\n\n"

        if "could not be started" in message or "Workflow Form Error" in message:
            result += "**Possible Solutions:**\n"
            result += "1. Republish the workflow in n8n (even if it's already active)\n"
            result += "2. Check for errors in the workflow nodes\n"
            result += "3. Verify the form trigger is properly configured\n"
            result += "4. Ensure the workflow execution settings allow form submissions\n\n"

        if used_defaults:
            result += f"**Form Data Sent:**\n{json_block(form_data)}\n\n"

        if error.response_data:
            result += f"**Error Details:**\n{json_block(error.response_data)}\n"

        if error.status_code:
            result += f"\n**HTTP Status:** {error.status_code}\n"

        return result

    # ------------------------------------------------------------------
    # schedule / chat / manual
    # ------------------------------------------------------------------

    @staticmethod
    def _run_data(trigger: Trigger, input_data: Any) -> list[Any] | None:
        if input_data is not None:
            if trigger.type == TriggerType.CHAT and isinstance(input_data, str):
                return [{"message": input_data, "chatInput": input_data}]
            return wrap_items(input_data)
        if trigger.type == TriggerType.CHAT:
            return [{"message": DEFAULT_CHAT_MESSAGE, "chatInput": DEFAULT_CHAT_MESSAGE}]
        return None

    async def _run_direct(
        self,
        config: N8nConfig,
        host: str,
        workflow_id: str,
        workflow: dict[str, Any],
        trigger: Trigger,
        input_data: Any,
    ) -> str:
        name = workflow.get("name") or workflow_id
        trigger_label = trigger.type.value

        run_response = await self.client.run_workflow(
            host,
            workflow_id,
            config.api_key,
            build_run_payload(workflow, trigger.node, self._run_data(trigger, input_data)),
        )

        if run_response.success:
            if run_response.status_code != 200:
                return (
                    f"Error: Workflow execution returned status {run_response.status_code}. "
                    f"Response: {to_json(run_response.data)}"
                )
            result = "**Workflow Execution Started:**\n\n"
            result += f"• **Workflow:** {name}\n"
            result += f"• **Trigger Type:** {trigger_label}\n"
            result += "• **Execution Method:** /rest/workflows/{id}/run endpoint\n"
            result += f"• **Status Code:** {run_response.status_code}\n"
            if run_response.data:
                result += f"• **Response:**\n{json_block(run_response.data)}\n"
            return result

        logger.info(
            "n8n_run_endpoint_failed",
            workflow_id=workflow_id,
            status=run_response.status_code,
            error=run_response.error,
        )

        execution_data: dict[str, Any] = {}
        if workflow.get("activeVersionId"):
            execution_data["versionId"] = workflow["activeVersionId"]
        if input_data is not None:
            execution_data["data"] = wrap_items(input_data)

        response = await self.client.request(
            f"workflows/{workflow_id}/execute",
            config.api_key,
            json_data=execution_data,
            method="POST",
            api_base_url=config.api_base_url,
        )
        if not response.success:
            return (
                f"Failed to execute workflow: {workflow_id}. Please ensure the workflow is "
                "active and has a valid version. "
                f"Run endpoint: {run_response.error_message()}. "
                f"Execute endpoint: {response.error_message()}."
            )

        data = response.payload
        result = "**Workflow Execution Started:**\n\n"
        result += f"• **Workflow:** {name}\n"
        result += f"• **Trigger Type:** {trigger_label}\n"
        result += f"• **Execution ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Workflow ID:** {workflow_id}\n"
        result += f"• **Status:** {data.get('status') or 'running'}\n"
        if data.get("startedAt"):
            result += f"• **Started:** {data['startedAt']}\n"
        if data.get("finishedAt"):
            result += f"• **Finished:** {data['finishedAt']}\n"
        return result
