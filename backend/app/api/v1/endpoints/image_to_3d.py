"""
API endpoints for Meshy image-to-3D tasks
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_app_settings, get_meshy_relay
from app.api.v1.inbound import read_inbound
from app.api.v1.responses import event_stream_response
from app.core.config import Settings
from app.schemas.relay import ErrorResponse
from app.services.relay import JobRequest, MeshyImageTo3DRelay

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/image-to-3d", responses=ERROR_RESPONSES)
async def create_image_to_3d_task(
    request: Request,
    relay: MeshyImageTo3DRelay = Depends(get_meshy_relay),
    settings: Settings = Depends(get_app_settings)
) -> Any:
    """
    Submit an image-to-3D task.

    Accepts multipart form data with an `image` file, or a JSON/form body
    with `image_url` (public URL or data URI). Any other fields are
    forwarded to Meshy after type coercion.
    """
    inbound = await read_inbound(request, settings.max_upload_bytes)

    parameters = dict(inbound.fields)
    image_url = parameters.pop("image_url", None)
    job = JobRequest(
        image=inbound.files.get("image"),
        image_url=image_url if isinstance(image_url, str) else None,
        parameters=parameters
    )
    return await relay.submit(job)


@router.get("/image-to-3d/{task_id}", responses={500: {"model": ErrorResponse}})
async def get_image_to_3d_task(
    task_id: str,
    relay: MeshyImageTo3DRelay = Depends(get_meshy_relay)
) -> Any:
    """Current status of an image-to-3D task"""
    return await relay.get_status(task_id)


@router.get("/events/{task_id}")
async def stream_image_to_3d_task(
    task_id: str,
    request: Request,
    relay: MeshyImageTo3DRelay = Depends(get_meshy_relay),
    settings: Settings = Depends(get_app_settings)
):
    return event_stream_response(relay, task_id, request, settings)
