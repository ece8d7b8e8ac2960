"""
Concrete relays for the Meshy image-to-3D and FASHN try-on APIs
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings
from app.core.http_client import (
    HTTPClientConfig,
    UpstreamClient,
    bearer_headers,
    create_async_client
)
from .base import BaseTaskRelay
from .coercion import (
    FieldKind,
    JobRequest,
    TryOnRequest,
    clamp,
    encode_data_uri,
    resolve_image_source
)
from .download import DownloadRelay

logger = logging.getLogger(__name__)


class MeshyImageTo3DRelay(BaseTaskRelay):
    """Meshy image-to-3D provider"""

    name = "meshy"
    submit_path = "/image-to-3d"
    terminal_statuses = frozenset({"SUCCEEDED", "FAILED", "CANCELED"})
    default_mime = "image/png"

    field_table = {
        "should_remesh": FieldKind.BOOLEAN,
        "should_texture": FieldKind.BOOLEAN,
        "enable_pbr": FieldKind.BOOLEAN,
        "is_a_t_pose": FieldKind.BOOLEAN,
        "moderation": FieldKind.BOOLEAN,
        "target_polycount": FieldKind.NUMBER,
    }
    defaults = {
        "should_texture": True,
    }

    def build_payload(self, request: JobRequest) -> Dict[str, Any]:
        image_url = resolve_image_source(request, self.default_mime)
        parameters = {k: v for k, v in request.parameters.items() if k != "image_url"}

        payload = {"image_url": image_url}
        payload.update(self.coerce_parameters(parameters))
        return payload

    def status_path(self, task_id: str) -> str:
        return f"/image-to-3d/{task_id}"


class FashnTryOnRelay(BaseTaskRelay):
    """FASHN virtual try-on provider"""

    name = "fashn"
    submit_path = "/run"
    terminal_statuses = frozenset({"completed", "failed"})
    default_mime = "image/jpeg"
    num_samples_range = (1, 4)

    field_table = {
        "segmentation_free": FieldKind.BOOLEAN,
        "return_base64": FieldKind.BOOLEAN,
        "seed": FieldKind.NUMBER,
        "num_samples": FieldKind.NUMBER,
    }
    defaults = {
        "category": "auto",
        "segmentation_free": True,
        "moderation_level": "permissive",
        "garment_photo_type": "auto",
        "mode": "balanced",
        "seed": 42,
        "num_samples": 1,
        "output_format": "png",
        "return_base64": False,
    }

    def __init__(self, client: UpstreamClient, model_name: str = "tryon-v1.6"):
        super().__init__(client)
        self.model_name = model_name

    def build_payload(self, request: TryOnRequest) -> Dict[str, Any]:
        parameters = {
            k: v for k, v in request.parameters.items()
            if k not in ("model_name", "inputs")
        }

        payload: Dict[str, Any] = {
            "model_name": self.model_name,
            "inputs": {
                "model_image": encode_data_uri(request.person, self.default_mime),
                "garment_image": encode_data_uri(request.garment, self.default_mime),
            },
        }
        payload.update(self.coerce_parameters(parameters))

        lower, upper = self.num_samples_range
        payload["num_samples"] = clamp(payload["num_samples"], lower, upper)
        return payload

    def status_path(self, task_id: str) -> str:
        return f"/status/{task_id}"


@dataclass
class RelayRegistry:
    """Process-wide relays built once from the settings"""
    meshy: MeshyImageTo3DRelay
    fashn: FashnTryOnRelay
    download: DownloadRelay

    async def aclose(self):
        await self.meshy.client.aclose()
        await self.fashn.client.aclose()
        await self.download.aclose()


def build_relays(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> RelayRegistry:
    """Build both provider relays and the download relay"""
    meshy_client = create_async_client(
        HTTPClientConfig(
            base_url=settings.MESHY_BASE_URL,
            headers=bearer_headers(settings.MESHY_API_KEY),
            timeout=settings.UPSTREAM_TIMEOUT
        ),
        transport=transport
    )
    fashn_client = create_async_client(
        HTTPClientConfig(
            base_url=settings.FASHN_BASE_URL,
            headers=bearer_headers(settings.FASHN_API_KEY),
            timeout=settings.UPSTREAM_TIMEOUT
        ),
        transport=transport
    )
    download_client = create_async_client(
        HTTPClientConfig(timeout=settings.DOWNLOAD_TIMEOUT),
        transport=transport
    )

    logger.debug(f"Relays configured for {settings.MESHY_BASE_URL} and {settings.FASHN_BASE_URL}")
    return RelayRegistry(
        meshy=MeshyImageTo3DRelay(UpstreamClient(meshy_client)),
        fashn=FashnTryOnRelay(UpstreamClient(fashn_client), model_name=settings.FASHN_MODEL_NAME),
        download=DownloadRelay(download_client)
    )
