# pixel_post/server.py
from __future__ import annotations

"""
HTTP entry point.

POST /ditherer with a JSON body (see pixel_post.request). Returns the compact
markup as text/html, or a JSON {"error": ...} body:

  415  non-JSON Content-Type
  400  missing/malformed body or bad fields
  502  image URL could not be fetched
  422  image could not be decoded, or nothing fit the byte budget
  500  any other failure while transforming the image

Run locally with:
  flask --app pixel_post.server run
"""

import time
from typing import Any, Mapping, Optional

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .constants import FETCH_TIMEOUT_S, SEARCH_TIMEOUT_S
from .errors import (
    BudgetExhaustedError,
    ImageDecodeError,
    ImageFetchError,
    RequestValidationError,
    UnsupportedContentTypeError,
)
from .image_io import fetch_image
from .pipeline import fit_image
from .request import parse_request
from .utils import (
    error,
    format_bytes_compact,
    format_duration,
    key_value_pairs_to_string,
    log,
    warn,
)


def _error(status: int, message: str) -> Response:
    resp = jsonify({"error": message})
    resp.status_code = status
    return resp


def _unexpected_error(exc: Exception) -> Any:
    if isinstance(exc, HTTPException):
        return exc
    error(f"ditherer failed: {type(exc).__name__}: {exc}")
    return _error(500, f"internal error: {type(exc).__name__}")


def ditherer() -> Response:
    log("Invoked ditherer function")
    t0 = time.perf_counter()
    try:
        req = parse_request(request.content_type, request.get_data(as_text=True))
    except UnsupportedContentTypeError as exc:
        return _error(415, str(exc))
    except RequestValidationError as exc:
        return _error(400, str(exc))

    cfg = current_app.config
    try:
        source = fetch_image(req.image_url, timeout=cfg["FETCH_TIMEOUT"])
    except ImageFetchError as exc:
        warn(str(exc))
        return _error(502, str(exc))
    except ImageDecodeError as exc:
        warn(str(exc))
        return _error(422, str(exc))

    try:
        result = fit_image(
            source,
            colors=req.colors,
            pixel_size=req.pixel_size,
            max_size=req.max_size,
            timeout=cfg["SEARCH_TIMEOUT"],
            debug=cfg["DEBUG_SEARCH"],
        )
    except BudgetExhaustedError as exc:
        warn(str(exc))
        return _error(422, str(exc))

    log(
        "[ditherer] "
        + key_value_pairs_to_string(
            [
                ("Size", f"{result.width}x{result.height}"),
                ("Bytes", format_bytes_compact(result.size)),
                ("Exact", result.exact),
                ("Trials", result.trials),
                ("Total", format_duration(time.perf_counter() - t0)),
            ]
        )
    )
    return Response(result.markup, status=200, content_type="text/html; charset=utf-8")


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """App factory; `config` overrides SEARCH_TIMEOUT, FETCH_TIMEOUT, DEBUG_SEARCH."""
    app = Flask(__name__)
    app.config.update(
        SEARCH_TIMEOUT=SEARCH_TIMEOUT_S,
        FETCH_TIMEOUT=FETCH_TIMEOUT_S,
        DEBUG_SEARCH=False,
    )
    if config:
        app.config.update(config)
    app.add_url_rule("/ditherer", view_func=ditherer, methods=["POST"])
    app.register_error_handler(Exception, _unexpected_error)
    return app


__all__ = ["create_app", "ditherer"]
