"""n8n validation tools. No network calls for the structural checks."""

from typing import Any

from bridge_tools.adapters.n8n.validation import validate_node_config, validate_workflow_config

from .base import N8nToolBase

VALIDATION_MODES = ("minimal", "full")


class ValidationTools(N8nToolBase):
    """Structural checks for nodes and workflows before creation."""

    async def validate_node(
        self,
        node_type: str | None = None,
        config: dict[str, Any] | None = None,
        mode: str = "minimal",
    ) -> str:
        """Validate a single node configuration.

        Args:
            node_type: e.g. ``n8n-nodes-base.webhook``
            config: Node object (``parameters``, ``name``, ``position`` ...)
            mode: ``minimal`` (required fields) or ``full`` (also layout hints)
        """
        if not node_type:
            return "Error: Node type is required."
        if not isinstance(config, dict):
            return "Error: Node configuration is required and must be an object."
        if mode not in VALIDATION_MODES:
            return f"Error: Validation mode must be one of: {', '.join(VALIDATION_MODES)}."

        return validate_node_config(node_type, config, mode)

    async def validate_workflow(
        self,
        user_id: str | None = None,
        workflow: dict[str, Any] | None = None,
    ) -> str:
        """Validate a workflow definition.

        With a user id the report also states whether that user's n8n
        credentials are configured, so the workflow can be created next.
        """
        if not isinstance(workflow, dict):
            return "Error: Workflow configuration is required and must be an object."

        notes = []
        if user_id:
            config = await self.resolver.resolve(user_id)
            notes.append(
                "**n8n Credentials:** "
                + ("configured" if config and config.api_key else "not configured")
            )

        return validate_workflow_config(workflow, notes)
