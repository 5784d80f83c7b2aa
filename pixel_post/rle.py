# pixel_post/rle.py
from __future__ import annotations

"""
Row-wise run-length encoding of a raster.

Exports:
  encode_row(rgb_row)   -> list[Run]
  encode_rle(image)     -> RLEImage
  expand_rle(rle)       -> uint8 [H,W,3]
  count_runs(rle)       -> int

Runs are maximal: a run is extended while red, green and blue match exactly.
Alpha is ignored.
"""

from typing import List

import numpy as np

from .core_types import RasterImage, RLEImage, Run, U8Image


def encode_row(rgb_row: np.ndarray) -> List[Run]:
    """Encode one (W,3) or (W,4) row into maximal runs, left to right."""
    width = int(rgb_row.shape[0])
    if width == 0:
        return []
    rgb = rgb_row[:, :3]
    # index where a new colour starts
    changed = np.any(rgb[1:] != rgb[:-1], axis=1)
    starts = np.concatenate(([0], np.flatnonzero(changed) + 1))
    counts = np.diff(np.concatenate((starts, [width])))
    runs: List[Run] = []
    for start, count in zip(starts.tolist(), counts.tolist()):
        r, g, b = rgb[start].tolist()
        runs.append(Run(r, g, b, count))
    return runs


def encode_rle(image: RasterImage) -> RLEImage:
    """One list of runs per image row; each row's counts sum to image.width."""
    return [encode_row(image.pixels[y]) for y in range(image.height)]


def expand_rle(rle: RLEImage) -> U8Image:
    """Rebuild the (H,W,3) pixel grid from runs. All rows must cover the same width."""
    if not rle:
        return np.zeros((0, 0, 3), dtype=np.uint8)
    widths = {sum(run.count for run in row) for row in rle}
    if len(widths) != 1:
        raise ValueError(f"rows cover different widths: {sorted(widths)}")
    width = widths.pop()
    out = np.empty((len(rle), width, 3), dtype=np.uint8)
    for y, row in enumerate(rle):
        x = 0
        for run in row:
            out[y, x : x + run.count] = run.rgb
            x += run.count
    return out


def count_runs(rle: RLEImage) -> int:
    return sum(len(row) for row in rle)


__all__ = ["encode_row", "encode_rle", "expand_rle", "count_runs"]
