"""N8N adapter.

Manages workflows, executions, credentials, tags and webhooks of a user's
n8n instance, starts workflows through whatever trigger they declare, and
validates node and workflow configurations.

Usage:
    from bridge_tools.adapters.n8n import N8nToolkit

    toolkit = N8nToolkit.from_settings(store)
    text = await toolkit.execute_workflow(user_id="u-1", workflow_id="42")
"""

from .catalog import N8N_OPERATIONS, N8nOperation, N8nOperationTool, build_n8n_registry
from .client import N8nClient
from .credentials import FernetSecretDecryptor, N8nCredentialResolver, UserRecordStore
from .dispatcher import WorkflowDispatcher
from .exceptions import (
    N8nAdapterError,
    N8nConfigurationError,
    N8nDecryptionError,
    N8nFormSubmissionError,
    N8nValidationError,
)
from .schemas import FormField, N8nApiResponse, N8nConfig, Trigger, TriggerType
from .toolkit import N8nToolkit

__all__ = [
    # Toolkit
    "N8nToolkit",
    # Catalog
    "N8N_OPERATIONS",
    "N8nOperation",
    "N8nOperationTool",
    "build_n8n_registry",
    # Client
    "N8nClient",
    "WorkflowDispatcher",
    # Credentials
    "FernetSecretDecryptor",
    "N8nCredentialResolver",
    "UserRecordStore",
    # Exceptions
    "N8nAdapterError",
    "N8nConfigurationError",
    "N8nDecryptionError",
    "N8nFormSubmissionError",
    "N8nValidationError",
    # Schemas
    "FormField",
    "N8nApiResponse",
    "N8nConfig",
    "Trigger",
    "TriggerType",
]
