"""n8n Operation Catalog.

Describes every toolkit operation as a tool (name, parameters, capabilities,
risk) and registers one ``N8nOperationTool`` per operation in a
``ToolRegistry``. The documentation operation renders from that registry.
"""

from typing import Any

from pydantic import BaseModel

from bridge_obs.logging import get_logger
from bridge_tools.base import ToolMetadata
from bridge_tools.registry import ToolRegistry

from .formatting import is_error_text

logger = get_logger(__name__)


class N8nOperation(BaseModel):
    """One toolkit method exposed as a tool."""

    name: str
    method: str
    description: str
    parameters: list[str] = []
    required: list[str] = []
    capabilities: list[str] = []
    requires_approval: bool = False
    idempotent: bool = True
    risk_level: str = "low"


N8N_OPERATIONS = [
    N8nOperation(
        name="list_n8n_workflows",
        method="list_workflows",
        description="List all workflows in the n8n instance",
        parameters=["user_id", "limit"],
        capabilities=["n8n.workflows.read"],
    ),
    N8nOperation(
        name="get_n8n_workflow",
        method="get_workflow",
        description="Get details of a specific n8n workflow",
        parameters=["user_id", "workflow_id"],
        required=["workflow_id"],
        capabilities=["n8n.workflows.read"],
    ),
    N8nOperation(
        name="create_n8n_workflow",
        method="create_workflow",
        description="Create a new n8n workflow",
        parameters=["user_id", "name", "nodes", "connections", "settings", "static_data", "shared"],
        required=["name", "nodes"],
        capabilities=["n8n.workflows.write"],
        requires_approval=True,
        idempotent=False,
        risk_level="medium",
    ),
    N8nOperation(
        name="update_n8n_workflow",
        method="update_workflow",
        description="Update an existing n8n workflow",
        parameters=["user_id", "workflow_id", "name", "nodes", "connections", "active"],
        required=["workflow_id"],
        capabilities=["n8n.workflows.write"],
        requires_approval=True,
        risk_level="medium",
    ),
    N8nOperation(
        name="delete_n8n_workflow",
        method="delete_workflow",
        description="Delete an n8n workflow",
        parameters=["user_id", "workflow_id"],
        required=["workflow_id"],
        capabilities=["n8n.workflows.write"],
        requires_approval=True,
        risk_level="high",
    ),
    N8nOperation(
        name="activate_n8n_workflow",
        method="activate_workflow",
        description="Activate an n8n workflow",
        parameters=["user_id", "workflow_id"],
        required=["workflow_id"],
        capabilities=["n8n.workflows.write"],
        risk_level="medium",
    ),
    N8nOperation(
        name="deactivate_n8n_workflow",
        method="deactivate_workflow",
        description="Deactivate an n8n workflow",
        parameters=["user_id", "workflow_id"],
        required=["workflow_id"],
        capabilities=["n8n.workflows.write"],
        risk_level="medium",
    ),
    N8nOperation(
        name="list_n8n_executions",
        method="list_executions",
        description="List workflow executions in n8n",
        parameters=["user_id", "workflow_id", "limit"],
        capabilities=["n8n.executions.read"],
    ),
    N8nOperation(
        name="get_n8n_execution",
        method="get_execution",
        description="Get details of a specific n8n execution",
        parameters=["user_id", "execution_id"],
        required=["execution_id"],
        capabilities=["n8n.executions.read"],
    ),
    N8nOperation(
        name="execute_n8n_workflow",
        method="execute_workflow",
        description="Execute an n8n workflow",
        parameters=["user_id", "workflow_id", "input_data"],
        required=["workflow_id"],
        capabilities=["n8n.executions.run"],
        requires_approval=True,
        idempotent=False,
        risk_level="medium",
    ),
    N8nOperation(
        name="list_n8n_credentials",
        method="list_credentials",
        description="List all credentials in n8n",
        parameters=["user_id"],
        capabilities=["n8n.credentials.read"],
    ),
    N8nOperation(
        name="get_n8n_credential",
        method="get_credential",
        description="Get details of a specific n8n credential",
        parameters=["user_id", "credential_id"],
        required=["credential_id"],
        capabilities=["n8n.credentials.read"],
    ),
    N8nOperation(
        name="get_n8n_user_info",
        method="get_user_info",
        description="Get current n8n user information",
        parameters=["user_id"],
        capabilities=["n8n.account.read"],
    ),
    N8nOperation(
        name="list_n8n_webhooks",
        method="list_webhooks",
        description="List all webhooks in n8n",
        parameters=["user_id"],
        capabilities=["n8n.workflows.read"],
    ),
    N8nOperation(
        name="list_n8n_tags",
        method="list_tags",
        description="List all tags in n8n",
        parameters=["user_id"],
        capabilities=["n8n.tags.read"],
    ),
    N8nOperation(
        name="create_n8n_tag",
        method="create_tag",
        description="Create a new tag in n8n",
        parameters=["user_id", "name"],
        required=["name"],
        capabilities=["n8n.tags.write"],
        idempotent=False,
    ),
    N8nOperation(
        name="search_n8n_nodes",
        method="search_nodes",
        description="Search n8n nodes by keyword",
        parameters=["keyword"],
        required=["keyword"],
        capabilities=["n8n.catalog.read"],
    ),
    N8nOperation(
        name="get_n8n_node",
        method="get_node",
        description="Get detailed information about a specific n8n node",
        parameters=["node_type"],
        required=["node_type"],
        capabilities=["n8n.catalog.read"],
    ),
    N8nOperation(
        name="search_n8n_templates",
        method="search_templates",
        description="Find workflow templates by keyword or metadata",
        parameters=["query", "limit"],
        required=["query"],
        capabilities=["n8n.catalog.read"],
    ),
    N8nOperation(
        name="get_n8n_template",
        method="get_template",
        description="Retrieve a specific workflow template",
        parameters=["template_id"],
        required=["template_id"],
        capabilities=["n8n.catalog.read"],
    ),
    N8nOperation(
        name="validate_n8n_node",
        method="validate_node",
        description="Validate parameters/config of a single node",
        parameters=["node_type", "config", "mode"],
        required=["node_type", "config"],
        capabilities=["n8n.validation"],
    ),
    N8nOperation(
        name="validate_n8n_workflow",
        method="validate_workflow",
        description="Validate an entire workflow configuration",
        parameters=["user_id", "workflow"],
        required=["workflow"],
        capabilities=["n8n.validation"],
    ),
    N8nOperation(
        name="get_n8n_tools_documentation",
        method="get_tools_documentation",
        description="Get documentation for the available n8n tools",
        parameters=["tool_name"],
        capabilities=["n8n.catalog.read"],
    ),
]


class N8nOperationTool:
    """Tool wrapper around one toolkit method."""

    def __init__(self, operation: N8nOperation, toolkit: Any):
        """Initialize operation tool.

        Args:
            operation: Catalog entry describing the method
            toolkit: Object exposing ``operation.method`` as a coroutine
        """
        self.operation = operation
        self.toolkit = toolkit

        # Tool interface properties
        self.name = operation.name
        self.description = operation.description
        self.metadata = ToolMetadata(
            requires_approval=operation.requires_approval,
            dry_run_supported=True,
            idempotent=operation.idempotent,
            capabilities=operation.capabilities,
            parameters=operation.parameters,
            required_parameters=operation.required,
            risk_level=operation.risk_level,
        )

    async def execute(self, ctx: dict, input_data: dict[str, Any]) -> dict[str, Any]:
        """Call the toolkit method.

        Args:
            ctx: Execution context (user_id, dry_run)
            input_data: Operation arguments; unknown keys are dropped

        Returns:
            ``{"status": "success" | "error", "text": ...}``
        """
        kwargs = {k: v for k, v in input_data.items() if k in self.operation.parameters}
        # The authenticated actor always wins over a user_id in the arguments
        if "user_id" in self.operation.parameters and ctx.get("user_id"):
            kwargs["user_id"] = ctx["user_id"]

        if ctx.get("dry_run", False):
            return {
                "status": "dry_run",
                "message": f"Would call n8n operation: {self.name}",
                "input": kwargs,
            }

        logger.info("n8n_tool_execute", tool=self.name, arguments=sorted(kwargs))
        try:
            text = await getattr(self.toolkit, self.operation.method)(**kwargs)
        except Exception as e:
            logger.error(
                "n8n_tool_failed",
                tool=self.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return {"status": "error", "text": f"Error: {self.name} failed: {e}"}

        return {"status": "error" if is_error_text(text) else "success", "text": text}


def build_n8n_registry(toolkit: Any, registry: ToolRegistry | None = None) -> ToolRegistry:
    """Register one tool per catalog operation.

    Args:
        toolkit: N8nToolkit instance the tools call into
        registry: Optional registry to extend (creates new if None)

    Returns:
        The registry holding the n8n tools
    """
    registry = registry if registry is not None else ToolRegistry()
    for operation in N8N_OPERATIONS:
        registry.register(N8nOperationTool(operation, toolkit))
    return registry


def _describe_parameter(name: str, metadata: ToolMetadata) -> str:
    return f"{name} ({'required' if name in metadata.required_parameters else 'optional'})"


def render_documentation(registry: ToolRegistry, tool_name: str | None = None) -> str:
    """Markdown help for one tool or an index of all of them."""
    if tool_name:
        tool = registry.get(tool_name)
        if not tool:
            return f'Tool "{tool_name}" not found. Available tools: {", ".join(registry.names())}'

        result = f"**{tool.name}**\n\n"
        result += f"**Description:** {tool.description}\n\n"
        result += "**Parameters:**\n"
        for parameter in tool.metadata.parameters:
            result += f"  • {_describe_parameter(parameter, tool.metadata)}\n"
        return result

    tools = registry.list_tools()
    result = f"**Available n8n Tools ({len(tools)}):**\n\n"
    for tool in tools:
        result += f"• **{tool.name}**\n"
        result += f"  {tool.description}\n\n"
    result += (
        "\nUse get_n8n_tools_documentation with a specific tool name "
        "to get detailed parameter information."
    )
    return result
