"""N8N HTTP Client.

Every call returns an ``N8nApiResponse``; transport errors, timeouts and
non-2xx answers are logged and reported through ``success=False``.
"""

import json
from typing import Any
from urllib.parse import urlparse

import httpx

from bridge_config.settings import Settings
from bridge_obs.logging import get_logger

from .schemas import N8nApiResponse

logger = get_logger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

# n8n form triggers reject submissions that do not look like a browser.
FORM_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def build_url(base_url: str, endpoint: str) -> str:
    """Join base and endpoint, trimming one trailing and one leading slash."""
    if base_url.endswith("/"):
        base_url = base_url[:-1]
    if endpoint.startswith("/"):
        endpoint = endpoint[1:]
    return f"{base_url}/{endpoint}"


def host_url(api_base_url: str) -> str:
    """Scheme and host of an API base URL, path dropped.

    ``https://n8n.example.com/api/v1`` -> ``https://n8n.example.com``
    """
    parsed = urlparse(api_base_url)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return api_base_url.replace("/api/v1", "").rstrip("/")


class N8nClient:
    """HTTP client for the n8n REST API, webhooks and forms."""

    def __init__(
        self,
        settings: Settings | None = None,
        timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize n8n client.

        Args:
            settings: Application settings (default API base, timeout)
            timeout: Override for the per-call timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings or Settings()
        self.timeout = timeout or self.settings.N8N_REQUEST_TIMEOUT
        self.client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    def _api_headers(self, api_key: str) -> dict[str, str]:
        """n8n authenticates with its own header, not a bearer token."""
        return {
            "X-N8N-API-KEY": api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        files: dict[str, Any] | None = None,
        check_status: bool = True,
        follow_redirects: bool = False,
    ) -> N8nApiResponse:
        """Perform one request and wrap the outcome.

        With ``check_status=False`` any HTTP answer is returned as is and
        ``success`` reflects ``status_code < 400``.
        """
        logger.debug("n8n_request", method=method, url=url)

        try:
            response = await self.client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_data,
                files=files,
                follow_redirects=follow_redirects,
            )
            if check_status:
                response.raise_for_status()

            return N8nApiResponse(
                success=response.status_code < 400,
                status_code=response.status_code,
                data=self._parse_body(response),
            )

        except httpx.HTTPStatusError as e:
            body = self._parse_body(e.response)
            error_msg = body.get("message", e.response.text) if isinstance(body, dict) else e.response.text
            logger.warning(
                "n8n_request_failed",
                method=method,
                url=url,
                status=e.response.status_code,
                response_data=body,
            )
            return N8nApiResponse(
                success=False,
                status_code=e.response.status_code,
                data=body,
                error=f"HTTP {e.response.status_code}: {error_msg}",
            )
        except httpx.TimeoutException:
            logger.warning("n8n_request_timeout", method=method, url=url, timeout=self.timeout)
            return N8nApiResponse(
                success=False,
                error=f"Request timed out after {self.timeout}s",
            )
        except httpx.HTTPError as e:
            logger.warning("n8n_request_error", method=method, url=url, error=str(e))
            return N8nApiResponse(success=False, error=str(e) or type(e).__name__)
        except Exception as e:
            logger.error("n8n_request_unexpected_error", method=method, url=url, error=str(e))
            return N8nApiResponse(success=False, error=f"Unexpected error: {str(e)}")

    async def request(
        self,
        endpoint: str,
        api_key: str,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        method: str = "GET",
        api_base_url: str | None = None,
    ) -> N8nApiResponse:
        """Call an n8n REST API endpoint.

        Args:
            endpoint: Path relative to the API base (``workflows/123``)
            api_key: Decrypted n8n API key
            params: Query parameters
            json_data: JSON body for POST/PUT/PATCH
            method: GET, POST, PUT, DELETE or PATCH
            api_base_url: Per-user base URL override

        Returns:
            N8nApiResponse; never raises
        """
        method = method.upper()
        url = build_url(api_base_url or self.settings.N8N_API_BASE, endpoint)

        if method not in ALLOWED_METHODS:
            logger.error("n8n_unsupported_method", method=method, url=url)
            return N8nApiResponse(success=False, error=f"Unsupported HTTP method: {method}")

        return await self._send(
            method,
            url,
            headers=self._api_headers(api_key),
            params=params,
            json_data=None if method in ("GET", "DELETE") else json_data,
        )

    async def run_workflow(
        self,
        host: str,
        workflow_id: str,
        api_key: str,
        payload: dict[str, Any],
    ) -> N8nApiResponse:
        """POST ``{host}/rest/workflows/{id}/run`` with a full workflow definition."""
        return await self._send(
            "POST",
            f"{host}/rest/workflows/{workflow_id}/run",
            headers=self._api_headers(api_key),
            json_data=payload,
        )

    async def call_webhook(
        self,
        webhook_url: str,
        method: str = "POST",
        body: Any = None,
    ) -> N8nApiResponse:
        """Call a production webhook URL.

        GET sends a dict body as query parameters; other methods send JSON.
        """
        method = method.upper()
        headers = {"Content-Type": "application/json"}

        if method == "GET":
            return await self._send(
                "GET",
                webhook_url,
                headers=headers,
                params=body if isinstance(body, dict) else None,
            )

        return await self._send(method, webhook_url, headers=headers, json_data=body)

    async def submit_form(
        self,
        form_url: str,
        fields: dict[str, Any],
        origin: str,
    ) -> N8nApiResponse:
        """Submit a form trigger as multipart/form-data.

        All status codes are returned so the caller can explain failures.
        Lists and dicts are JSON encoded, ``None`` values are skipped.
        """
        multipart = {}
        for key, value in fields.items():
            if value is None:
                continue
            if isinstance(value, (list, dict)):
                multipart[key] = (None, json.dumps(value))
            elif isinstance(value, bool):
                multipart[key] = (None, "true" if value else "false")
            else:
                multipart[key] = (None, str(value))

        headers = {
            "Accept": "*/*",
            "User-Agent": FORM_USER_AGENT,
            "Origin": origin,
            "Referer": form_url,
        }

        logger.info("n8n_form_submission", form_url=form_url, field_count=len(multipart))

        return await self._send(
            "POST",
            form_url,
            headers=headers,
            files=multipart,
            check_status=False,
            follow_redirects=True,
        )

    async def get_public(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> N8nApiResponse:
        """Unauthenticated GET against the public n8n catalog."""
        return await self._send(
            "GET",
            url,
            headers={"Accept": "application/json"},
            params=params,
        )

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
