"""Tests for the n8n HTTP client."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from bridge_tools.adapters.n8n import N8nClient
from bridge_tools.adapters.n8n.client import build_url, host_url

API_BASE = "https://n8n.acme.test/api/v1"


class TestUrls:
    """URL joining and host extraction."""

    def test_build_url_trims_one_slash_each_side(self):
        assert build_url("https://x.test/api/v1/", "/workflows") == "https://x.test/api/v1/workflows"
        assert build_url("https://x.test/api/v1", "workflows/1") == "https://x.test/api/v1/workflows/1"

    def test_build_url_trims_only_one_slash(self):
        assert build_url("https://x.test/api/v1//", "workflows") == "https://x.test/api/v1//workflows"

    def test_host_url_drops_path(self):
        assert host_url("https://n8n.acme.test/api/v1") == "https://n8n.acme.test"
        assert host_url("http://localhost:5678/api/v1/") == "http://localhost:5678"


class TestRequest:
    """REST API calls."""

    @pytest.mark.asyncio
    async def test_request_sends_api_key_header(self, n8n_client, n8n_api):
        """n8n authenticates with X-N8N-API-KEY."""
        n8n_api.add("GET", f"{API_BASE}/workflows", body={"data": []})

        result = await n8n_client.request("workflows", "secret-key", params={"limit": 5}, api_base_url=API_BASE)

        assert result.success is True
        assert result.status_code == 200
        assert result.data == {"data": []}

        request = n8n_api.requests[0]
        assert request.headers["X-N8N-API-KEY"] == "secret-key"
        assert "Authorization" not in request.headers
        assert request.url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_request_uses_default_base(self, n8n_client, n8n_api):
        n8n_api.add("GET", f"{API_BASE}/users/me", body={"id": "u"})

        result = await n8n_client.request("/users/me", "k")

        assert result.success is True
        assert str(n8n_api.requests[0].url) == f"{API_BASE}/users/me"

    @pytest.mark.asyncio
    async def test_get_and_delete_send_no_body(self, n8n_client, n8n_api):
        n8n_api.add("DELETE", f"{API_BASE}/workflows/1", body={"id": "1"})

        await n8n_client.request("workflows/1", "k", json_data={"ignored": True}, method="delete")

        assert n8n_api.requests[0].method == "DELETE"
        assert n8n_api.requests[0].content == b""

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, n8n_client, n8n_api):
        n8n_api.add("POST", f"{API_BASE}/tags", body={"id": "t1", "name": "ops"})

        result = await n8n_client.request("tags", "k", json_data={"name": "ops"}, method="POST")

        assert result.payload == {"id": "t1", "name": "ops"}
        assert n8n_api.json_body() == {"name": "ops"}

    @pytest.mark.asyncio
    async def test_http_error_is_reported_not_raised(self, n8n_client, n8n_api):
        """A 500 answer yields success=False with the server message."""
        n8n_api.add("GET", f"{API_BASE}/workflows", status=500, body={"message": "boom"})

        result = await n8n_client.request("workflows", "k")

        assert result.success is False
        assert result.status_code == 500
        assert result.error == "HTTP 500: boom"
        assert result.error_message() == "boom"

    @pytest.mark.asyncio
    async def test_timeout_is_reported_not_raised(self, n8n_client, n8n_api):
        n8n_api.add(
            "GET",
            f"{API_BASE}/workflows",
            exc=httpx.ReadTimeout("timed out", request=httpx.Request("GET", f"{API_BASE}/workflows")),
        )

        result = await n8n_client.request("workflows", "k")

        assert result.success is False
        assert result.status_code is None
        assert result.error == "Request timed out after 30s"

    @pytest.mark.asyncio
    async def test_unsupported_method_is_rejected(self, n8n_client, n8n_api):
        result = await n8n_client.request("workflows", "k", method="TRACE")

        assert result.success is False
        assert "Unsupported HTTP method" in result.error
        assert n8n_api.requests == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported(self):
        """Test request with an unexpected exception."""
        client = N8nClient()

        with patch.object(client.client, "request", new=AsyncMock(side_effect=RuntimeError("kaput"))):
            result = await client.request("workflows", "k")

        assert result.success is False
        assert result.error == "Unexpected error: kaput"

        await client.close()


class TestWebhooksAndForms:
    """Webhook calls and multipart form submissions."""

    @pytest.mark.asyncio
    async def test_get_webhook_sends_body_as_query(self, n8n_client, n8n_api):
        n8n_api.add("GET", "https://n8n.acme.test/webhook/abc", body={"ok": True})

        result = await n8n_client.call_webhook("https://n8n.acme.test/webhook/abc", "get", {"q": "1"})

        assert result.success is True
        assert n8n_api.requests[0].url.params["q"] == "1"

    @pytest.mark.asyncio
    async def test_post_webhook_sends_json(self, n8n_client, n8n_api):
        n8n_api.add("POST", "https://n8n.acme.test/webhook/abc", body={"ok": True})

        await n8n_client.call_webhook("https://n8n.acme.test/webhook/abc", body=[{"a": 1}])

        assert n8n_api.json_body() == [{"a": 1}]

    @pytest.mark.asyncio
    async def test_submit_form_is_multipart(self, n8n_client, n8n_api):
        """Fields go out as multipart/form-data; None values are skipped."""
        form_url = "https://n8n.acme.test/form/form-abc"
        n8n_api.add("POST", form_url, body={"formSubmittedText": "Thanks"})

        result = await n8n_client.submit_form(
            form_url,
            {"field-0": "Jane", "field-1": True, "field-2": ["a"], "field-3": None},
            origin="https://n8n.acme.test",
        )

        assert result.success is True
        request = n8n_api.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert request.headers["Origin"] == "https://n8n.acme.test"
        assert request.headers["Referer"] == form_url
        assert b'name="field-0"' in request.content
        assert b"Jane" in request.content
        assert b"true" in request.content
        assert b'["a"]' in request.content
        assert b'name="field-3"' not in request.content

    @pytest.mark.asyncio
    async def test_submit_form_returns_error_status(self, n8n_client, n8n_api):
        """Form answers >= 400 come back with their status instead of an exception."""
        form_url = "https://n8n.acme.test/form/form-abc"
        n8n_api.add("POST", form_url, status=500, body={"message": "Workflow Form Error"})

        result = await n8n_client.submit_form(form_url, {"field-0": "x"}, origin="https://n8n.acme.test")

        assert result.success is False
        assert result.status_code == 500
        assert result.payload == {"message": "Workflow Form Error"}
