import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient

from app.core.config import Settings
from app.main import create_app

class FakeUpstream:
    """Scripted stand-in for the provider APIs and remote file hosts.

    Responses queued for a route are served in order; the last one repeats.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method: str, url: str, status_code: int = 200, json=None, content=None, headers=None):
        self.routes.setdefault((method, url), []).append(
            {"status_code": status_code, "json": json, "content": content, "headers": headers}
        )

    def add_error(self, method: str, url: str, exc: Exception):
        self.routes.setdefault((method, url), []).append(exc)

    def calls(self, method: str, url: str) -> list:
        return [r for r in self.requests if r.method == method and str(r.url) == url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, str(request.url)))
        if not queue:
            return httpx.Response(404, json={"message": f"no route for {request.url}"})

        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        if entry["json"] is not None:
            return httpx.Response(entry["status_code"], json=entry["json"], headers=entry["headers"])
        return httpx.Response(entry["status_code"], content=entry["content"] or b"", headers=entry["headers"])


@pytest.fixture
def settings():
    """Settings with fake credentials and a fast poll interval."""
    return Settings(
        _env_file=None,
        MESHY_API_KEY="test-meshy-key",
        FASHN_API_KEY="test-fashn-key",
        POLL_INTERVAL_SECONDS=0.01,
        MAX_UPLOAD_SIZE_MB=1
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def app(settings, upstream):
    return create_app(settings, transport=httpx.MockTransport(upstream.handler))


@pytest_asyncio.fixture
async def async_client(app):
    """Create an async HTTP client for testing."""
    transport = httpx.ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await app.state.relays.aclose()
