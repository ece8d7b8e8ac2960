from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)

class RelayException(Exception):
    """Base exception for the relay application"""
    def __init__(self, message: str, status_code: int = 500, payload: Optional[Any] = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.payload if self.payload is not None else self.message}

class InvalidRequestError(RelayException):
    """Raised when client input is missing or malformed"""
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)

class PayloadTooLargeError(RelayException):
    """Raised when an uploaded file exceeds the configured limit"""
    def __init__(self, message: str = "Uploaded file is too large"):
        super().__init__(message, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)

class UpstreamError(RelayException):
    """Raised when a provider call fails, carrying the provider's error body if any"""
    def __init__(
        self,
        message: str,
        payload: Optional[Any] = None,
        upstream_status: Optional[int] = None
    ):
        self.upstream_status = upstream_status
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, payload)

class DownloadError(RelayException):
    """Raised when a relayed download cannot be fetched"""
    def __init__(self, message: str = "download failed"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing"""

async def relay_exception_handler(request: Request, exc: RelayException):
    """Handle relay exceptions"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.payload or exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body()
    )

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )
