"""
n8n-bridge Observability Package.

Provides:
- Structured logging (structlog)
"""

from bridge_obs.logging import get_logger, mask_secret, redact_secrets, setup_logging

__all__ = ["get_logger", "mask_secret", "redact_secrets", "setup_logging"]
