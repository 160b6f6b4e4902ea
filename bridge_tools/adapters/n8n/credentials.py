"""n8n credential resolution.

User records are owned by an external store. The n8n integration lives
under ``record["mcpdata"]["N8N"]``:

    {"api_key": "<fernet token>", "api_base_url": "https://n8n.acme.io/api/v1"}

Resolution fails closed: any missing piece or decryption error yields
``None`` and callers answer with the configuration instructions.
"""

from typing import Any, Callable, Protocol

from cryptography.fernet import Fernet, InvalidToken

from bridge_obs.logging import get_logger, mask_secret

from .exceptions import N8nConfigurationError, N8nDecryptionError
from .schemas import N8nConfig

logger = get_logger(__name__)

INTEGRATION_KEY = "N8N"


class UserRecordStore(Protocol):
    """Read-only lookup of user records."""

    async def find_by_id(self, user_id: str) -> dict[str, Any] | None:
        ...


class FernetSecretDecryptor:
    """Decrypts API keys stored as Fernet tokens."""

    def __init__(self, key: str):
        """Initialize decryptor.

        An empty key leaves every decryption failing with
        ``N8nConfigurationError``, so resolution fails closed.

        Raises:
            N8nConfigurationError: Key is set but not a valid Fernet key
        """
        self._fernet = None
        if not key:
            return
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            raise N8nConfigurationError("Invalid ENCRYPTION_KEY format") from e

    def __call__(self, token: str) -> str:
        if self._fernet is None:
            raise N8nConfigurationError("ENCRYPTION_KEY is not configured")
        try:
            return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
        except InvalidToken as e:
            raise N8nDecryptionError(
                "Failed to decrypt: invalid token (wrong key or corrupted data)"
            ) from e


class N8nCredentialResolver:
    """Resolves a user's decrypted n8n API key and base URL."""

    def __init__(
        self,
        store: UserRecordStore,
        decrypt: Callable[[str], str],
    ):
        """Initialize resolver.

        Args:
            store: User record store
            decrypt: Function turning the stored secret into the API key
        """
        self.store = store
        self.decrypt = decrypt

    def _integration_record(self, user: dict[str, Any] | None) -> dict[str, Any]:
        if not user:
            raise N8nConfigurationError("User record not found")

        integration = (user.get("mcpdata") or {}).get(INTEGRATION_KEY)
        if not integration:
            raise N8nConfigurationError("n8n integration not configured")

        if not integration.get("api_key"):
            raise N8nConfigurationError("n8n API key not stored")

        return integration

    async def resolve(self, user_id: str) -> N8nConfig | None:
        """Return the user's n8n configuration, or None when unusable."""
        try:
            user = await self.store.find_by_id(user_id)
            integration = self._integration_record(user)
            api_key = self.decrypt(integration["api_key"])
        except N8nConfigurationError as e:
            logger.info("n8n_config_unavailable", user_id=user_id, reason=str(e))
            return None
        except Exception as e:
            logger.error(
                "n8n_config_lookup_failed",
                user_id=user_id,
                error_type=type(e).__name__,
            )
            return None

        if not api_key:
            return None

        logger.debug("n8n_config_resolved", user_id=user_id, api_key=mask_secret(api_key))
        return N8nConfig(
            api_key=api_key,
            api_base_url=integration.get("api_base_url") or None,
        )

    async def get_api_key(self, user_id: str) -> str | None:
        """Decrypted API key only."""
        config = await self.resolve(user_id)
        return config.api_key if config else None
