"""n8n adapter Pydantic schemas."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# CREDENTIALS
# ============================================================================


class N8nConfig(BaseModel):
    """Decrypted per-user n8n integration settings."""

    api_key: str
    api_base_url: str | None = None


# ============================================================================
# HTTP RESULTS
# ============================================================================


class N8nApiResponse(BaseModel):
    """Outcome of a single HTTP call.

    ``success`` separates a failed call from a successful one with an empty
    body: ``success=True, data=None`` is a valid (empty) answer.
    """

    success: bool
    status_code: int | None = None
    data: Any = None
    error: str | None = None

    @property
    def payload(self) -> dict[str, Any]:
        """Body as a dict, ``{}`` when the body is empty or not an object."""
        return self.data if isinstance(self.data, dict) else {}

    def error_message(self) -> str:
        """Best human-readable reason for a failure."""
        body = self.payload
        return body.get("message") or body.get("error") or self.error or "Unknown error"


# ============================================================================
# TRIGGERS
# ============================================================================


class TriggerType(str, Enum):
    WEBHOOK = "webhook"
    FORM = "form"
    SCHEDULE = "schedule"
    CHAT = "chat"
    MANUAL = "manual"
    UNKNOWN = "unknown"


class Trigger(BaseModel):
    """Trigger derived from a workflow's node list. Never persisted."""

    type: TriggerType = TriggerType.UNKNOWN
    node: dict[str, Any] | None = None
    path: str | None = None
    http_method: str = "POST"


# ============================================================================
# FORMS
# ============================================================================


class FormField(BaseModel):
    """Field declared on a form trigger node."""

    field_label: str = ""
    placeholder: str = ""
    required_field: bool = True
    field_type: str = "text"
    default_value: Any = None
    options: list[Any] = Field(default_factory=list)
    min: Any = None
