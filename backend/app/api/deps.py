from fastapi import Request

from app.core.config import Settings
from app.services.relay import (
    DownloadRelay,
    FashnTryOnRelay,
    MeshyImageTo3DRelay,
    RelayRegistry
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_relays(request: Request) -> RelayRegistry:
    return request.app.state.relays


def get_meshy_relay(request: Request) -> MeshyImageTo3DRelay:
    return get_relays(request).meshy


def get_fashn_relay(request: Request) -> FashnTryOnRelay:
    return get_relays(request).fashn


def get_download_relay(request: Request) -> DownloadRelay:
    return get_relays(request).download
