"""
Re-stream a remote file through this server so the browser can save
provider results without a cross-origin fetch.
"""

import logging
import posixpath
import re
from typing import AsyncIterator, Optional
from urllib.parse import quote, unquote, urlsplit

import httpx

from app.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "download"
UNSAFE_HEADER_CHARS = re.compile(r'[\x00-\x1f\x7f\\"]')


def filename_from_url(url: str) -> str:
    """Last path segment of the URL, without query or fragment"""
    path = urlsplit(url).path
    name = unquote(posixpath.basename(path.rstrip("/")))
    return name or DEFAULT_FILENAME


def content_disposition(filename: str) -> str:
    safe = UNSAFE_HEADER_CHARS.sub("_", filename)
    try:
        safe.encode("ascii")
    except UnicodeEncodeError:
        fallback = safe.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
    return f'attachment; filename="{safe}"'


class RemoteFile:
    """An open streaming response from the remote host"""

    def __init__(self, response: httpx.Response, filename: str, chunk_size: int = 8192):
        self.response = response
        self.filename = filename
        self.chunk_size = chunk_size

    @property
    def media_type(self) -> Optional[str]:
        return self.response.headers.get("content-type")

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes(self.chunk_size):
                yield chunk
        finally:
            await self.response.aclose()

    async def aclose(self):
        await self.response.aclose()


class DownloadRelay:
    def __init__(self, client: httpx.AsyncClient, chunk_size: int = 8192):
        self._client = client
        self.chunk_size = chunk_size

    async def open(self, url: str) -> RemoteFile:
        """Start fetching url; raises DownloadError if the fetch fails"""
        try:
            request = self._client.build_request("GET", url)
            response = await self._client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = str(e) or "download failed"
            logger.error(f"download error: {message}")
            raise DownloadError(message) from e

        if response.is_error:
            await response.aclose()
            message = f"Request failed with status code {response.status_code}"
            logger.error(f"download error: {url}: {message}")
            raise DownloadError(message)

        return RemoteFile(response, filename_from_url(url), self.chunk_size)

    async def aclose(self):
        await self._client.aclose()
