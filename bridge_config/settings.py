"""
Application Settings (Pydantic Settings).

Loads configuration from environment variables (.env file or system env).

Per-user n8n credentials are not configured here; they come from the user
record store and may override N8N_API_BASE on a per-user basis.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be set through the environment or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ========================================================================
    # N8N REST API
    # ========================================================================
    N8N_API_BASE: str = Field(
        default="https://api.n8n.io/v1",
        description="Default n8n REST API base when the user has no override",
    )
    N8N_PUBLIC_API_BASE: str = Field(
        default="https://api.n8n.io/api/v1",
        description="Unauthenticated catalog used for node and template search",
    )
    N8N_REQUEST_TIMEOUT: int = Field(
        default=30, ge=1, description="HTTP timeout (seconds) applied to every call"
    )
    N8N_SEARCH_RESULT_LIMIT: int = Field(
        default=20, ge=1, description="Maximum node search results rendered"
    )
    N8N_TEMPLATE_LIMIT_MAX: int = Field(
        default=50, ge=1, description="Upper bound for template search limit"
    )

    # ========================================================================
    # CREDENTIAL DECRYPTION
    # ========================================================================
    ENCRYPTION_KEY: str = Field(
        default="",
        description="Fernet key used to decrypt stored n8n API keys",
    )

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # DEPLOYMENT
    # ========================================================================
    ENVIRONMENT: str = Field(
        default="development", pattern="^(development|staging|production)$"
    )
