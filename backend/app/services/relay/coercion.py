"""
Translation of loosely-typed inbound parameters into provider payloads.

Form posts deliver every value as a string, JSON posts deliver native
types. Each provider declares a field table (field name -> FieldKind) and
every supplied value is coerced through it; fields missing from the table
pass through untouched so new provider options keep working.
"""

import base64
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from app.core.exceptions import InvalidRequestError

ParameterValue = Union[bool, int, float, str]

MISSING_IMAGE_MESSAGE = "Provide an image file or image_url"


class FieldKind(Enum):
    """How a provider field is coerced"""
    BOOLEAN = "boolean"
    NUMBER = "number"
    PASSTHROUGH = "passthrough"


@dataclass
class UploadedImage:
    """Raw bytes of one uploaded file as handed over by the inbound adapter"""
    content: bytes
    content_type: Optional[str] = None


@dataclass
class JobRequest:
    """A single-image job submission"""
    image: Optional[UploadedImage] = None
    image_url: Optional[str] = None
    parameters: Dict[str, ParameterValue] = field(default_factory=dict)


@dataclass
class TryOnRequest:
    """A person + garment try-on submission"""
    person: UploadedImage
    garment: UploadedImage
    parameters: Dict[str, ParameterValue] = field(default_factory=dict)


def coerce_boolean(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    return default


def coerce_number(name: str, value: Any) -> Union[int, float]:
    if isinstance(value, bool):
        raise InvalidRequestError(f"{name} must be a number")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidRequestError(f"{name} must be a number")
    else:
        raise InvalidRequestError(f"{name} must be a number")

    if isinstance(number, float):
        if not math.isfinite(number):
            raise InvalidRequestError(f"{name} must be a finite number")
        if number.is_integer():
            return int(number)
    return number


def apply_field_table(
    parameters: Mapping[str, Any],
    table: Mapping[str, FieldKind],
    defaults: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Coerce every supplied parameter through the field table, then fill defaults.

    Blank values of defaulted fields count as absent. A boolean field given
    something other than a true/false literal falls back to its default.
    Returns a new dict; unknown fields are copied as-is.
    """
    defaults = defaults or {}
    payload = {}
    for name, value in parameters.items():
        if name in defaults and _blank(value):
            continue
        kind = table.get(name, FieldKind.PASSTHROUGH)
        if kind is FieldKind.BOOLEAN:
            payload[name] = coerce_boolean(value, bool(defaults.get(name, False)))
        elif kind is FieldKind.NUMBER:
            payload[name] = coerce_number(name, value)
        else:
            payload[name] = value

    for name, default in defaults.items():
        payload.setdefault(name, default)
    return payload


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def clamp(value: Union[int, float], lower: Union[int, float], upper: Union[int, float]):
    return min(max(value, lower), upper)


def encode_data_uri(image: UploadedImage, default_mime: str) -> str:
    mime = image.content_type or default_mime
    encoded = base64.b64encode(image.content).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def resolve_image_source(request: JobRequest, default_mime: str) -> str:
    """Inline bytes win over a URL; neither is a client error"""
    if request.image is not None:
        return encode_data_uri(request.image, default_mime)
    if request.image_url:
        return request.image_url
    raise InvalidRequestError(MISSING_IMAGE_MESSAGE)
