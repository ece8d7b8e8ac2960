"""
Inbound adapter turning a multipart, urlencoded or JSON request body into
plain parameters plus uploaded image bytes
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import Request
from starlette.datastructures import UploadFile

from app.core.exceptions import InvalidRequestError, PayloadTooLargeError
from app.services.relay import UploadedImage

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class InboundForm:
    fields: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, UploadedImage] = field(default_factory=dict)


async def read_inbound(request: Request, max_upload_bytes: int) -> InboundForm:
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        return await _read_form(request, max_upload_bytes)

    body = await request.body()
    if not body.strip():
        return InboundForm()

    try:
        data = json.loads(body)
    except ValueError:
        raise InvalidRequestError("Request body must be JSON or form data")
    if not isinstance(data, dict):
        raise InvalidRequestError("JSON body must be an object")
    return InboundForm(fields=data)


async def _read_form(request: Request, max_upload_bytes: int) -> InboundForm:
    inbound = InboundForm()
    form = await request.form()
    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                content = await _read_upload(name, value, max_upload_bytes)
                # an empty file input still sends a part
                if content:
                    inbound.files[name] = UploadedImage(content, value.content_type)
            else:
                inbound.fields[name] = value
    finally:
        await form.close()

    logger.debug(f"Inbound form: fields={sorted(inbound.fields)} files={sorted(inbound.files)}")
    return inbound


async def _read_upload(name: str, upload: UploadFile, max_upload_bytes: int) -> bytes:
    """Read an uploaded part, never holding more than one byte past the limit"""
    too_large = PayloadTooLargeError(
        f"File '{name}' exceeds the {max_upload_bytes // (1024 * 1024)} MB upload limit"
    )
    if upload.size is not None and upload.size > max_upload_bytes:
        raise too_large

    content = await upload.read(max_upload_bytes + 1)
    if len(content) > max_upload_bytes:
        raise too_large
    return content
