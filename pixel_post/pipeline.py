# pixel_post/pipeline.py
from __future__ import annotations

"""
Fit an image into a markup byte budget.

  fit_image(source, colors, pixel_size, max_size, timeout) -> FitResult

Each trial: transform (resize + dither) -> run-length encode -> render + compact
-> measure UTF-8 bytes -> classify against the budget. The adaptive search in
pixel_post.search picks the widths. Transform errors are not caught here;
they abort the whole fit.
"""

import math
import time
from typing import Optional

from .constants import (
    BYTES_PER_PIXEL_ESTIMATE,
    DEFAULT_COLORS,
    DEFAULT_MAX_SIZE,
    DEFAULT_PIXEL_SIZE,
    SEARCH_TIMEOUT_S,
)
from .core_types import (
    FitResult,
    RasterImage,
    Run,
    SearchTask,
    SearchTrial,
    Verdict,
    round_half_up,
    scaled_height,
)
from .errors import BudgetExhaustedError
from .markup import byte_length, render_html
from .rle import encode_rle
from .search import run_search
from .transform import transform_image
from .utils import debug_log


def classify(size: int, budget: int) -> Verdict:
    if size == budget:
        return Verdict.CORRECT
    if size > budget:
        return Verdict.TOO_HIGH
    return Verdict.TOO_LOW


def estimate_start_width(source: RasterImage, max_size: int) -> int:
    """
    First width guess: the pixel count the budget could hold at
    BYTES_PER_PIXEL_ESTIMATE, spread over the source aspect ratio.
    """
    pixels = max_size / BYTES_PER_PIXEL_ESTIMATE
    width = math.sqrt(pixels * source.width / float(source.height))
    return max(1, round_half_up(width))


def render_at_width(
    source: RasterImage, width: int, colors: int, pixel_size: int
) -> str:
    """Compact markup for `source` at one width."""
    return render_html(encode_rle(transform_image(source, width, colors)), pixel_size)


def markup_floor(source: RasterImage, width: int, pixel_size: int) -> int:
    """
    Smallest possible markup size at `width`: every row collapsed to a single
    run. Any real rendering has at least one run per row and fixed-length
    colours, so it is never smaller than this.
    """
    height = scaled_height(source.width, source.height, width)
    rows = [[Run(0, 0, 0, width)]] * height
    return byte_length(render_html(rows, pixel_size))


def make_task(
    source: RasterImage,
    colors: int,
    pixel_size: int,
    max_size: int,
    debug: bool = False,
) -> SearchTask:
    """Width -> SearchTrial closure for run_search()."""

    def task(width: int) -> SearchTrial:
        floor = markup_floor(source, width, pixel_size)
        if floor > max_size:
            # size is a lower bound here, already over budget
            if debug:
                debug_log(f"width {width}: at least {floor} bytes, not rendered")
            return SearchTrial(width, "", floor, Verdict.TOO_HIGH)
        html = render_at_width(source, width, colors, pixel_size)
        size = byte_length(html)
        return SearchTrial(width, html, size, classify(size, max_size))

    return task


def fit_image(
    source: RasterImage,
    colors: int = DEFAULT_COLORS,
    pixel_size: int = DEFAULT_PIXEL_SIZE,
    max_size: int = DEFAULT_MAX_SIZE,
    timeout: float = SEARCH_TIMEOUT_S,
    *,
    start_width: Optional[int] = None,
    debug: bool = False,
) -> FitResult:
    """
    Search for the widest rendering of `source` whose compact markup fits in
    `max_size` bytes. Raises BudgetExhaustedError when nothing fits.
    """
    if start_width is None:
        start_width = estimate_start_width(source, max_size)
    elif start_width < 1:
        raise ValueError(f"start_width must be >= 1, got {start_width}")

    task = make_task(source, colors, pixel_size, max_size, debug=debug)

    t0 = time.perf_counter()
    state = run_search(start_width, task, timeout, debug=debug)
    best = state.result
    elapsed = time.perf_counter() - t0

    if best is None:
        raise BudgetExhaustedError(max_size, state.trials)

    return FitResult(
        markup=best.output,
        width=best.width,
        height=scaled_height(source.width, source.height, best.width),
        size=best.size,
        budget=max_size,
        trials=state.trials,
        elapsed=elapsed,
        exact=best.verdict is Verdict.CORRECT,
    )


__all__ = [
    "classify",
    "estimate_start_width",
    "render_at_width",
    "markup_floor",
    "make_task",
    "fit_image",
]
