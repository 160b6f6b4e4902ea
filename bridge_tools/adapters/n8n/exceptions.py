"""n8n adapter exceptions.

Raised and handled inside the adapter. Public operations turn them into
text, so none of these reach the assistant runtime.
"""

from typing import Any


class N8nAdapterError(Exception):
    """Base exception for n8n adapter."""

    pass


class N8nConfigurationError(N8nAdapterError):
    """User has no usable n8n integration record."""

    pass


class N8nDecryptionError(N8nConfigurationError):
    """Stored API key could not be decrypted."""

    pass


class N8nValidationError(N8nAdapterError):
    """Invalid input parameters (node shape, missing ids)."""

    pass


class N8nFormSubmissionError(N8nAdapterError):
    """Form trigger rejected a submission."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
