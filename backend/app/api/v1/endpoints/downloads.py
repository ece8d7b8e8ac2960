from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.api.deps import get_download_relay
from app.core.exceptions import InvalidRequestError
from app.schemas.relay import ErrorResponse
from app.services.relay import DownloadRelay
from app.services.relay.download import content_disposition

router = APIRouter()


@router.get("/download", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def download_file(
    url: Optional[str] = Query(None),
    relay: DownloadRelay = Depends(get_download_relay)
):
    """Proxy a remote file to the browser as an attachment"""
    if not url:
        raise InvalidRequestError("Missing url query param")

    remote = await relay.open(url)
    return StreamingResponse(
        remote.iter_bytes(),
        media_type=remote.media_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(remote.filename)},
        background=BackgroundTask(remote.aclose)
    )
