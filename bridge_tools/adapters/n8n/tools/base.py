"""Shared plumbing for the n8n tool groups."""

from typing import Any

from bridge_config.settings import Settings
from bridge_tools.adapters.n8n.client import N8nClient, build_url
from bridge_tools.adapters.n8n.credentials import N8nCredentialResolver
from bridge_tools.adapters.n8n.dispatcher import WorkflowDispatcher
from bridge_tools.adapters.n8n.schemas import N8nApiResponse, N8nConfig

USER_ID_REQUIRED = "Error: User ID is required. Please provide user authentication."
API_KEY_NOT_FOUND = (
    "Error: n8n API key not found. "
    "Please configure your n8n integration in your profile settings."
)


class N8nToolBase:
    """Credential resolution and request helpers used by every tool group."""

    def __init__(
        self,
        resolver: N8nCredentialResolver,
        client: N8nClient | None = None,
        settings: Settings | None = None,
    ):
        """Initialize tools.

        Args:
            resolver: Resolves per-user n8n credentials
            client: Optional N8nClient instance (creates new if None)
            settings: Optional settings (taken from the client if omitted)
        """
        self.resolver = resolver
        self.settings = settings or (client.settings if client else Settings())
        self.client = client or N8nClient(settings=self.settings)
        self.dispatcher = WorkflowDispatcher(self.client, self.settings)

    async def _authenticate(self, user_id: str | None) -> tuple[N8nConfig | None, str | None]:
        """Resolve credentials.

        Returns:
            (config, None) on success, (None, error text) otherwise
        """
        if not user_id:
            return None, USER_ID_REQUIRED

        config = await self.resolver.resolve(user_id)
        if not config or not config.api_key:
            return None, API_KEY_NOT_FOUND

        return config, None

    async def _call(
        self,
        config: N8nConfig,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        method: str = "GET",
    ) -> N8nApiResponse:
        return await self.client.request(
            endpoint,
            config.api_key,
            params=params,
            json_data=json_data,
            method=method,
            api_base_url=config.api_base_url,
        )

    def _public_url(self, path: str) -> str:
        return build_url(self.settings.N8N_PUBLIC_API_BASE, path)
