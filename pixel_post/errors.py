# pixel_post/errors.py
"""
Exception types raised across the package.

Callers (CLI, HTTP app) translate these into exit codes or status codes.
"""
from __future__ import annotations


class PixelPostError(Exception):
    """Base class for expected failures."""


class RequestValidationError(PixelPostError, ValueError):
    """Malformed request body or out-of-range parameter."""


class UnsupportedContentTypeError(RequestValidationError):
    """Request body is not JSON."""


class ImageFetchError(PixelPostError):
    """Image URL could not be retrieved."""


class ImageDecodeError(PixelPostError):
    """Retrieved bytes are not a readable image."""


class BudgetExhaustedError(PixelPostError):
    """No width produced markup within the byte budget."""

    def __init__(self, budget: int, trials: int) -> None:
        super().__init__(
            f"failed to fit image to budget of {budget:,} bytes after {trials} trial(s)"
        )
        self.budget = budget
        self.trials = trials


__all__ = [
    "PixelPostError",
    "RequestValidationError",
    "UnsupportedContentTypeError",
    "ImageFetchError",
    "ImageDecodeError",
    "BudgetExhaustedError",
]
