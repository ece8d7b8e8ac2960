"""
HTTP client used for every call to an upstream provider
"""

import logging
from typing import Dict, Any, Optional
from urllib.parse import quote
import httpx

from app.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class HTTPClientConfig:
    """Configuration for HTTP client"""

    def __init__(
        self,
        base_url: str = "",
        headers: Dict[str, str] = None,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        max_redirects: int = 10
    ):
        self.base_url = base_url
        self.headers = headers or {}
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.max_redirects = max_redirects


def bearer_headers(api_key: str) -> Dict[str, str]:
    """Auth headers shared by both providers"""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }


def create_async_client(
    config: HTTPClientConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Create an httpx client with the given configuration"""
    return httpx.AsyncClient(
        base_url=config.base_url,
        headers=config.headers,
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        max_redirects=config.max_redirects,
        transport=transport
    )


def encode_path_segment(value: str) -> str:
    return quote(value, safe="")


class UpstreamClient:
    """Thin JSON request/response mapper for one provider's job API.

    Every call is attempted exactly once; failures surface as UpstreamError
    with the provider's error body when it sent one.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        """POST a JSON payload and return the parsed JSON body"""
        return await self._request("POST", path, json=payload)

    async def get_json(self, path: str) -> Any:
        """GET a resource and return the parsed JSON body"""
        return await self._request("GET", path)

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Dict[str, Any] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"HTTP {method} {path} failed: {message}")
            raise UpstreamError(message) from e

        return self._process_response(method, path, response)

    def _process_response(self, method: str, path: str, response: httpx.Response) -> Any:
        """Map a provider response to its JSON body or an UpstreamError"""
        if response.is_error:
            payload = _error_body(response)
            logger.error(
                f"HTTP {method} {path} returned {response.status_code}: {payload}"
            )
            raise UpstreamError(
                f"Request failed with status code {response.status_code}",
                payload=payload,
                upstream_status=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"HTTP {method} {path} returned a non-JSON body")
            raise UpstreamError(f"Invalid JSON from upstream: {e}") from e


def _error_body(response: httpx.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return response.text or None
