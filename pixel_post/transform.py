# pixel_post/transform.py
from __future__ import annotations

"""
Resize + quantize step used by every search trial.

transform_image(source, target_width, colors) -> RasterImage
  1. flatten transparency onto BACKGROUND_RGB
  2. resize to (target_width, round(target_width / W * H))
  3. build a palette from the resized pixels (0 = auto, 1 = black/white, N)
  4. error-diffuse onto that palette

The source is never modified. Output is opaque RGBA.
"""

import numpy as np
from PIL import Image

from .constants import BACKGROUND_RGB, RESAMPLE
from .core_types import RasterImage, U8Image, scaled_height
from .dither import dither_to_palette
from .palette_data import build_palette
from .utils import pillow_resample_from_name


def flatten_alpha(image: RasterImage, background=BACKGROUND_RGB) -> U8Image:
    """Composite RGBA over a solid background; returns (H,W,3) uint8."""
    rgb = image.rgb.astype(np.float32)
    a = image.alpha.astype(np.float32)[..., None] / 255.0
    bg = np.asarray(background, dtype=np.float32)
    out = rgb * a + bg * (1.0 - a)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def resize_rgb(rgb: U8Image, dst_w: int, dst_h: int, resample: str = RESAMPLE) -> U8Image:
    H0, W0, _ = rgb.shape
    if (W0, H0) == (dst_w, dst_h):
        return rgb.copy()
    im = Image.fromarray(np.ascontiguousarray(rgb))
    im2 = im.resize((dst_w, dst_h), resample=pillow_resample_from_name(resample))
    return np.array(im2, dtype=np.uint8)


def transform_image(
    source: RasterImage, target_width: int, colors: int, *, resample: str = RESAMPLE
) -> RasterImage:
    """Resized, palette-reduced copy of `source` at `target_width`."""
    if target_width < 1:
        raise ValueError(f"target_width must be >= 1, got {target_width}")
    dst_h = scaled_height(source.width, source.height, target_width)
    rgb = resize_rgb(flatten_alpha(source), target_width, dst_h, resample)
    palette = build_palette(rgb, colors)
    mapped = dither_to_palette(rgb, palette)
    return RasterImage.from_rgb(mapped)


__all__ = ["flatten_alpha", "resize_rgb", "transform_image"]
