"""
Server-Sent-Events stream of a provider task's status.

One StreamSession exists per subscribed browser connection. It polls the
provider on a fixed interval, relays every status envelope, and finishes on
the first of: a terminal status, a failed poll, a client disconnect, or an
explicit cancel. A finished session never polls or emits again.
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from app.core.exceptions import UpstreamError
from .base import BaseTaskRelay

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

DisconnectProbe = Callable[[], Awaitable[bool]]


class SessionState(Enum):
    ACTIVE = "active"
    FINISHED = "finished"


def format_sse(data: Any, event: Optional[str] = None) -> str:
    """Frame one SSE message; unnamed when event is None"""
    frame = f"event: {event}\n" if event else ""
    return f"{frame}data: {json.dumps(data)}\n\n"


class StreamSession:
    """Polling lifecycle of a single status subscription"""

    def __init__(
        self,
        relay: BaseTaskRelay,
        task_id: str,
        interval: float = 2.0,
        is_disconnected: Optional[DisconnectProbe] = None
    ):
        self.relay = relay
        self.task_id = task_id
        self.interval = interval
        self.state = SessionState.ACTIVE
        self._is_disconnected = is_disconnected
        self._stopped = asyncio.Event()

    @property
    def finished(self) -> bool:
        return self.state is SessionState.FINISHED

    def cancel(self, reason: str = "cancelled"):
        """Finish the session and wake a pending interval wait"""
        if self.finished:
            return
        self.state = SessionState.FINISHED
        self._stopped.set()
        logger.debug(f"{self.relay.name} stream {self.task_id} finished: {reason}")

    async def events(self) -> AsyncIterator[str]:
        """Yield SSE frames until the session finishes"""
        logger.info(f"{self.relay.name} stream opened for {self.task_id}")
        try:
            while not self.finished:
                if await self._client_gone():
                    self.cancel("client disconnected")
                    break

                try:
                    envelope = await self.relay.get_status(self.task_id)
                except UpstreamError as e:
                    if self.finished:
                        break
                    yield format_sse({"message": e.message}, event="error")
                    self.cancel(f"poll failed: {e.message}")
                    break

                # teardown may have started while the fetch was in flight
                if self.finished:
                    break

                yield format_sse(envelope)
                if self.finished:
                    break
                if self.relay.is_terminal(envelope):
                    yield format_sse(envelope, event="finished")
                    self.cancel(f"terminal status {envelope.get('status')}")
                    break

                await self._wait()
        finally:
            self.cancel("stream closed")

    async def _client_gone(self) -> bool:
        if self._is_disconnected is None:
            return False
        return await self._is_disconnected()

    async def _wait(self):
        try:
            await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
        except asyncio.TimeoutError:
            pass
