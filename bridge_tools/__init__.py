"""n8n-bridge Tool System."""

from bridge_tools.base import Tool, ToolMetadata
from bridge_tools.registry import ToolRegistry

__all__ = ["Tool", "ToolMetadata", "ToolRegistry"]
