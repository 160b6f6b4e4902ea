"""n8n Toolkit.

One object exposing every n8n operation as an async method returning text:

    async with N8nToolkit.from_settings(store) as toolkit:
        print(await toolkit.list_workflows(user_id="u-1"))
        result = await toolkit.registry.get("get_n8n_workflow").execute(
            {"user_id": "u-1"}, {"workflow_id": "42"}
        )
"""

from bridge_config.settings import Settings

from .catalog import build_n8n_registry, render_documentation
from .client import N8nClient
from .credentials import FernetSecretDecryptor, N8nCredentialResolver, UserRecordStore
from .tools import AccountTools, DiscoveryTools, ExecutionTools, ValidationTools, WorkflowTools


class N8nToolkit(WorkflowTools, ExecutionTools, AccountTools, DiscoveryTools, ValidationTools):
    """All n8n operations plus the tool registry describing them."""

    def __init__(
        self,
        resolver: N8nCredentialResolver,
        client: N8nClient | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(resolver, client=client, settings=settings)
        self.registry = build_n8n_registry(self)

    @classmethod
    def from_settings(
        cls,
        store: UserRecordStore,
        settings: Settings | None = None,
        client: N8nClient | None = None,
    ) -> "N8nToolkit":
        """Build a toolkit that decrypts stored keys with ``ENCRYPTION_KEY``.

        With an empty ``ENCRYPTION_KEY`` the toolkit still builds, but every
        user resolves to "not configured".
        """
        settings = settings or Settings()
        resolver = N8nCredentialResolver(store, FernetSecretDecryptor(settings.ENCRYPTION_KEY))
        return cls(resolver, client=client or N8nClient(settings=settings), settings=settings)

    async def get_tools_documentation(self, tool_name: str | None = None) -> str:
        """Help for one tool, or the list of all tools."""
        return render_documentation(self.registry, tool_name)

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
