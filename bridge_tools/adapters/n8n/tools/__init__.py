"""n8n tool groups."""

from .account import AccountTools
from .base import API_KEY_NOT_FOUND, USER_ID_REQUIRED, N8nToolBase
from .discovery import DiscoveryTools
from .executions import ExecutionTools
from .validation import ValidationTools
from .workflows import WorkflowTools

__all__ = [
    "API_KEY_NOT_FOUND",
    "USER_ID_REQUIRED",
    "N8nToolBase",
    "AccountTools",
    "DiscoveryTools",
    "ExecutionTools",
    "ValidationTools",
    "WorkflowTools",
]
