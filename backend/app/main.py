import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.logging import setup_logging
from app.core.exceptions import (
    ConfigurationError, RelayException,
    relay_exception_handler, general_exception_handler
)
from app.services.relay import build_relays
from app.api.v1.api import api_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """Build the relay application.

    Raises ConfigurationError when a provider API key is missing so the
    process never starts serving degraded requests.
    """
    if settings is None:
        settings = get_settings()
    missing = settings.missing_credentials()
    if missing:
        raise ConfigurationError(f"{', '.join(missing)} not set in environment or .env")

    relays = build_relays(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        logger.info(f"Image relay server running on http://localhost:{settings.PORT}")
        yield
        await relays.aclose()

    app = FastAPI(
        title="Generative AI Relay",
        description="Relay for Meshy image-to-3D and FASHN virtual try-on",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.relays = relays

    # Exception handlers
    app.add_exception_handler(RelayException, relay_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


def run():
    """Console entry point: load config, fail fast, serve"""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    try:
        app = create_app(settings)
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
