from fastapi import Request
from fastapi.responses import StreamingResponse

from app.core.config import Settings
from app.services.relay import BaseTaskRelay, StreamSession
from app.services.relay.streaming import SSE_HEADERS


def event_stream_response(
    relay: BaseTaskRelay,
    task_id: str,
    request: Request,
    settings: Settings
) -> StreamingResponse:
    """Open a status stream for task_id that ends when the browser goes away"""
    session = StreamSession(
        relay,
        task_id,
        interval=settings.POLL_INTERVAL_SECONDS,
        is_disconnected=request.is_disconnected
    )
    return StreamingResponse(
        session.events(),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )
