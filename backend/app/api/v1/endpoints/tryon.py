"""
API endpoints for FASHN virtual try-on predictions
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_app_settings, get_fashn_relay
from app.api.v1.inbound import read_inbound
from app.api.v1.responses import event_stream_response
from app.core.config import Settings
from app.core.exceptions import InvalidRequestError
from app.schemas.relay import ErrorResponse
from app.services.relay import FashnTryOnRelay, TryOnRequest

router = APIRouter()

MISSING_IMAGES_MESSAGE = "Please upload both person and garment images."


@router.post("/tryon", responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def create_tryon_prediction(
    request: Request,
    relay: FashnTryOnRelay = Depends(get_fashn_relay),
    settings: Settings = Depends(get_app_settings)
) -> Any:
    """
    Start a try-on prediction from multipart `person` and `garment` files.

    Optional fields (category, mode, seed, num_samples, ...) fall back to
    the documented defaults when omitted.
    """
    inbound = await read_inbound(request, settings.max_upload_bytes)

    person = inbound.files.get("person")
    garment = inbound.files.get("garment")
    if person is None or garment is None:
        raise InvalidRequestError(MISSING_IMAGES_MESSAGE)

    return await relay.submit(TryOnRequest(person=person, garment=garment, parameters=inbound.fields))


@router.get("/tryon/{prediction_id}", responses={500: {"model": ErrorResponse}})
async def get_tryon_prediction(
    prediction_id: str,
    relay: FashnTryOnRelay = Depends(get_fashn_relay)
) -> Any:
    """Current status of a try-on prediction"""
    return await relay.get_status(prediction_id)


@router.get("/events/{prediction_id}")
async def stream_tryon_prediction(
    prediction_id: str,
    request: Request,
    relay: FashnTryOnRelay = Depends(get_fashn_relay),
    settings: Settings = Depends(get_app_settings)
):
    return event_stream_response(relay, prediction_id, request, settings)
