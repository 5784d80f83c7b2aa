# pixel_post/__init__.py
"""
pixel_post package.

Purpose:
  Turn an image into dithered, run-length encoded HTML pixel art that fits a
  per-post byte budget. See post_image.py for the CLI and pixel_post.server
  for the HTTP endpoint.

Public API:
  fit_image       : adaptive width search, returns FitResult.
  search_width    : the search loop on its own (any width -> trial task).
  run_search      : same loop, returns the final SearchState (trial count).
  transform_image : resize + palette + error-diffusion dither.
  encode_rle      : per-row maximal runs.
  render_html     : runs -> compact markup.
  core_types      : RasterImage, Run, Verdict, SearchTrial, FitResult.
  errors          : exception types.

Quick start:
  from pixel_post import fit_image
  from pixel_post.image_io import fetch_image
  result = fit_image(fetch_image(url), colors=16, pixel_size=8, max_size=200_000)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import errors
from . import utils

from .core_types import FitResult, RasterImage, Run, SearchTrial, Verdict  # noqa: E402
from .markup import render_html  # noqa: E402
from .pipeline import fit_image  # noqa: E402
from .rle import encode_rle  # noqa: E402
from .search import run_search, search_width  # noqa: E402
from .transform import transform_image  # noqa: E402

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "errors",
    "utils",
    "FitResult",
    "RasterImage",
    "Run",
    "SearchTrial",
    "Verdict",
    "fit_image",
    "run_search",
    "search_width",
    "transform_image",
    "encode_rle",
    "render_html",
]
