# pixel_post/request.py
from __future__ import annotations

"""
Request parsing for the HTTP entry point.

Body: {"image_url": str, "colors"?: int, "pixel_size"?: int, "max_size"?: int}
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .constants import (
    COLORS_MAX,
    COLORS_MIN,
    DEFAULT_COLORS,
    DEFAULT_MAX_SIZE,
    DEFAULT_PIXEL_SIZE,
    MAX_SIZE_MAX,
    MAX_SIZE_MIN,
    PIXEL_SIZE_MAX,
    PIXEL_SIZE_MIN,
)
from .errors import RequestValidationError, UnsupportedContentTypeError


@dataclass(frozen=True)
class PostRequest:
    image_url: str
    colors: int = DEFAULT_COLORS
    pixel_size: int = DEFAULT_PIXEL_SIZE
    max_size: int = DEFAULT_MAX_SIZE


# name -> (lo, hi, default)
INT_FIELDS: Mapping[str, Tuple[int, int, int]] = {
    "colors": (COLORS_MIN, COLORS_MAX, DEFAULT_COLORS),
    "pixel_size": (PIXEL_SIZE_MIN, PIXEL_SIZE_MAX, DEFAULT_PIXEL_SIZE),
    "max_size": (MAX_SIZE_MIN, MAX_SIZE_MAX, DEFAULT_MAX_SIZE),
}


def check_int_range(name: str, value: Any, lo: int, hi: int) -> int:
    """Integer in [lo, hi]; bools and integral floats like 8.0 are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise RequestValidationError(f"{name} must be an integer")
    if not lo <= value <= hi:
        raise RequestValidationError(f"{name} must be between {lo} and {hi}, got {value}")
    return value


def check_content_type(content_type: Optional[str]) -> None:
    if not content_type or not content_type.lower().startswith("application/json"):
        raise UnsupportedContentTypeError(
            f"unsupported Content-Type: expected application/json, got {content_type}"
        )


def parse_body(payload: Any) -> PostRequest:
    """Validate an already-decoded JSON body."""
    if not isinstance(payload, dict):
        raise RequestValidationError("request body must be a JSON object")
    url = payload.get("image_url")
    if not isinstance(url, str) or not url.strip():
        raise RequestValidationError("image_url must be a non-empty string")
    values = {}
    for name, (lo, hi, default) in INT_FIELDS.items():
        if name not in payload:
            values[name] = default
        else:
            values[name] = check_int_range(name, payload[name], lo, hi)
    return PostRequest(image_url=url.strip(), **values)


def parse_request(content_type: Optional[str], body: Optional[str]) -> PostRequest:
    """Content-type check, JSON decode and field validation in one go."""
    check_content_type(content_type)
    if body is None or not body.strip():
        raise RequestValidationError("missing request body")
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise RequestValidationError(f"request body is not valid JSON: {exc.msg}") from exc
    return parse_body(payload)


__all__ = [
    "PostRequest",
    "INT_FIELDS",
    "check_int_range",
    "check_content_type",
    "parse_body",
    "parse_request",
]
