"""
n8n-bridge Configuration Package.

Provides Pydantic Settings loaded from environment variables.
"""

from bridge_config.settings import Settings

__all__ = ["Settings"]
