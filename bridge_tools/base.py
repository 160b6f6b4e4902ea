"""Tool Interface & Metadata.

Describes each n8n operation the way an assistant runtime sees it.
"""

from typing import Any, Protocol

from pydantic import BaseModel


class ToolMetadata(BaseModel):
    """Tool capability metadata."""

    requires_approval: bool = False
    dry_run_supported: bool = False
    idempotent: bool = False
    capabilities: list[str] = []
    parameters: list[str] = []
    required_parameters: list[str] = []
    risk_level: str = "low"


class Tool(Protocol):
    """Tool interface."""

    name: str
    description: str
    metadata: ToolMetadata

    async def execute(self, ctx: dict, input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute tool action."""
        ...
