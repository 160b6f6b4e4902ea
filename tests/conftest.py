"""Pytest fixtures.

The n8n instance is faked with an ``httpx.MockTransport``; every request the
toolkit makes is recorded on ``n8n_api.requests``.
"""

import json

import httpx
import pytest
from cryptography.fernet import Fernet

from bridge_config.settings import Settings
from bridge_tools.adapters.n8n import N8nClient, N8nToolkit

ENCRYPTION_KEY = Fernet.generate_key().decode()
API_BASE = "https://n8n.acme.test/api/v1"
HOST = "https://n8n.acme.test"
PUBLIC_BASE = "https://api.n8n.io/api/v1"
API_KEY = "n8n_test_api_key"


def encrypt(value: str, key: str = ENCRYPTION_KEY) -> str:
    return Fernet(key.encode()).encrypt(value.encode()).decode()


class FakeUserStore:
    """In-memory user record store."""

    def __init__(self, users: dict | None = None):
        self.users = users or {}

    async def find_by_id(self, user_id: str):
        return self.users.get(user_id)


class FakeN8n:
    """Routes ``(method, url without query)`` to canned answers."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, object, Exception | None]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, status: int = 200, body=None, exc: Exception | None = None):
        self.routes[(method, url)] = (status, body, exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url).split("?")[0])
        if key not in self.routes:
            return httpx.Response(404, json={"message": "The requested resource could not be found"})

        status, body, exc = self.routes[key]
        if exc is not None:
            raise exc
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_body(self, index: int = -1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    """Settings pointing at the fake instance."""
    return Settings(
        N8N_API_BASE=API_BASE,
        N8N_PUBLIC_API_BASE=PUBLIC_BASE,
        ENCRYPTION_KEY=ENCRYPTION_KEY,
    )


@pytest.fixture
def user_store():
    """user-1 has n8n configured, user-2 has no integration."""
    return FakeUserStore(
        {
            "user-1": {
                "mcpdata": {"N8N": {"api_key": encrypt(API_KEY), "api_base_url": API_BASE}}
            },
            "user-2": {"mcpdata": {}},
        }
    )


@pytest.fixture
def n8n_api():
    """Fake n8n instance."""
    return FakeN8n()


@pytest.fixture
def n8n_client(settings, n8n_api):
    return N8nClient(settings=settings, transport=n8n_api.transport)


@pytest.fixture
def toolkit(settings, user_store, n8n_client):
    """Toolkit wired to the fake store and the fake instance."""
    return N8nToolkit.from_settings(user_store, settings=settings, client=n8n_client)
