# pixel_post/dither.py
from __future__ import annotations

"""
Error-diffusion dithering onto a fixed palette.

- Serpentine scan, Stucki kernel (12 taps, weights /42).
- Nearest palette entry by Rec. 709 weighted squared RGB distance.
- Accumulated error is clamped to 0..255 before the nearest pick, so bright
  and dark areas cannot run away.

Fully deterministic: the same image and palette always give the same output.
"""

from typing import Tuple

import numpy as np

from .constants import BT709_WEIGHTS, KERNEL_STUCKI
from .core_types import U8Image, U8Palette

Kernel = Tuple[Tuple[int, int, float], ...]


def nearest_palette_indices(
    rgb: np.ndarray, palette: U8Palette, weights: Tuple[float, float, float] = BT709_WEIGHTS
) -> np.ndarray:
    """Vectorised nearest palette index for rows of RGB values (no diffusion)."""
    src = rgb.reshape(-1, 3).astype(np.float32)
    pal = palette.astype(np.float32)
    w = np.asarray(weights, dtype=np.float32)
    diff = pal[None, :, :] - src[:, None, :]
    dist2 = np.sum(diff * diff * w, axis=2)
    return np.argmin(dist2, axis=1).astype(np.int32)


def dither_to_palette(
    img_rgb: U8Image,
    palette: U8Palette,
    *,
    kernel: Kernel = KERNEL_STUCKI,
    serpentine: bool = True,
    weights: Tuple[float, float, float] = BT709_WEIGHTS,
) -> U8Image:
    """
    Map every pixel of an (H,W,3) image to a palette colour with error diffusion.
    Returns a new uint8 (H,W,3) array; the input is not modified.
    """
    if palette.ndim != 2 or palette.shape[1] != 3 or palette.shape[0] == 0:
        raise ValueError(f"palette must be a non-empty (P,3) array, got {palette.shape}")
    H, W, _ = img_rgb.shape
    pal_f = palette.astype(np.float32)
    w = np.asarray(weights, dtype=np.float32)

    if palette.shape[0] == 1:
        return np.broadcast_to(palette[0], (H, W, 3)).astype(np.uint8)
    nearest = palette[nearest_palette_indices(img_rgb[..., :3], palette, weights).reshape(H, W)]
    if not kernel:
        # no diffusion: plain nearest mapping
        return nearest
    if np.array_equal(nearest, img_rgb[..., :3]):
        # every pixel is already a palette colour, so no error is ever diffused
        return nearest

    work = img_rgb[..., :3].astype(np.float32)
    idx_out = np.zeros((H, W), dtype=np.int32)

    for y in range(H):
        left_to_right = (not serpentine) or (y % 2) == 0
        xs = range(W) if left_to_right else range(W - 1, -1, -1)
        sign = 1 if left_to_right else -1
        for x in xs:
            value = np.clip(work[y, x], 0.0, 255.0)
            diff = pal_f - value
            j = int(np.argmin((diff * diff) @ w))
            idx_out[y, x] = j

            err = value - pal_f[j]
            if not err.any():
                continue
            for dx, dy, k in kernel:
                nx, ny = x + sign * dx, y + dy
                if 0 <= ny < H and 0 <= nx < W:
                    work[ny, nx] += err * k

    return palette[idx_out]


__all__ = ["nearest_palette_indices", "dither_to_palette"]
