"""
Task Relay Services Package

Submits jobs to the upstream generative AI providers, relays their status
as plain JSON or as a Server-Sent-Events stream, and re-streams result
files to the browser.
"""

from .base import BaseTaskRelay
from .coercion import FieldKind, JobRequest, TryOnRequest, UploadedImage
from .download import DownloadRelay, RemoteFile
from .providers import FashnTryOnRelay, MeshyImageTo3DRelay, RelayRegistry, build_relays
from .streaming import SessionState, StreamSession, format_sse

__all__ = [
    "BaseTaskRelay",
    "FieldKind",
    "JobRequest",
    "TryOnRequest",
    "UploadedImage",
    "DownloadRelay",
    "RemoteFile",
    "FashnTryOnRelay",
    "MeshyImageTo3DRelay",
    "RelayRegistry",
    "build_relays",
    "SessionState",
    "StreamSession",
    "format_sse"
]
