# pixel_post/palette_data.py
from __future__ import annotations

"""
Palette builders.

Exports:
  BW_PALETTE: uint8 [2,3]  fixed black/white
  build_palette(rgb, colors) -> uint8 [P,3]

Policy by `colors`:
  0   : auto, up to AUTO_PALETTE_COLORS picked by the quantizer
  1   : fixed black/white, independent of the image
  N>=2: N colours derived from the image (fewer only if it has fewer uniques)
"""

import numpy as np
from PIL import Image

from .constants import AUTO_PALETTE_COLORS, BW_PALETTE as _BW_PAIRS
from .core_types import U8Image, U8Palette

BW_PALETTE: U8Palette = np.array(_BW_PAIRS, dtype=np.uint8)


def derive_palette(rgb: U8Image, n_colors: int) -> U8Palette:
    """
    Median-cut palette of at most n_colors from an (H,W,3) image.

    Only palette slots the quantizer actually used are returned, ordered by
    palette index so repeated calls give identical arrays.
    """
    if not 1 <= n_colors <= 256:
        raise ValueError(f"n_colors must be in 1..256, got {n_colors}")
    im = Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8))
    q = im.quantize(
        colors=n_colors,
        method=Image.Quantize.MEDIANCUT,
        dither=Image.Dither.NONE,
    )
    flat = q.getpalette() or []
    used = sorted(idx for _count, idx in (q.getcolors(256) or []))
    pal = np.array(flat, dtype=np.uint8).reshape(-1, 3)
    return np.ascontiguousarray(pal[used])


def build_palette(rgb: U8Image, colors: int) -> U8Palette:
    """Palette for one trial, following the 0 / 1 / N policy."""
    if colors < 0:
        raise ValueError(f"colors must be >= 0, got {colors}")
    if colors == 1:
        return BW_PALETTE.copy()
    if colors == 0:
        return derive_palette(rgb, AUTO_PALETTE_COLORS)
    return derive_palette(rgb, min(int(colors), 256))


__all__ = ["BW_PALETTE", "derive_palette", "build_palette"]
