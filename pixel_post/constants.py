# pixel_post/constants.py
"""
Request ranges, defaults and tunables used across the project.

- Request ranges and defaults (COLORS_*, PIXEL_SIZE_*, MAX_SIZE_*)
- Dither kernel and colour distance weights
- Search and fetch tunables
"""
from __future__ import annotations

from typing import List, Tuple

# =========================
# Request ranges / defaults
# =========================
COLORS_MIN: int = 0
COLORS_MAX: int = 128
DEFAULT_COLORS: int = 16

PIXEL_SIZE_MIN: int = 1
PIXEL_SIZE_MAX: int = 32
DEFAULT_PIXEL_SIZE: int = 8

MAX_SIZE_MIN: int = 1024
MAX_SIZE_MAX: int = 200 * 1024
DEFAULT_MAX_SIZE: int = MAX_SIZE_MAX

# ==============
# Palette policy
# ==============
# colors=0 lets the quantizer pick up to this many colours.
AUTO_PALETTE_COLORS: int = 256

BW_PALETTE: List[Tuple[int, int, int]] = [(0, 0, 0), (255, 255, 255)]

# Transparent pixels are flattened onto this colour before quantizing.
BACKGROUND_RGB: Tuple[int, int, int] = (255, 255, 255)

# =================
# Dither (Stucki)
# =================
# (dx, dy, weight) in scan direction; weights sum to 1.
KERNEL_STUCKI: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 8 / 42),
    (2, 0, 4 / 42),
    (-2, 1, 2 / 42),
    (-1, 1, 4 / 42),
    (0, 1, 8 / 42),
    (1, 1, 4 / 42),
    (2, 1, 2 / 42),
    (-2, 2, 1 / 42),
    (-1, 2, 2 / 42),
    (0, 2, 4 / 42),
    (1, 2, 2 / 42),
    (2, 2, 1 / 42),
)

# Rec. 709 luma weights for the palette distance.
BT709_WEIGHTS: Tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

RESAMPLE: str = "bilinear"

# ======
# Search
# ======
SEARCH_TIMEOUT_S: float = 10.0

# Rough compact-markup cost of one pixel, used only for the first width guess.
BYTES_PER_PIXEL_ESTIMATE: float = 45.0

# =====
# Fetch
# =====
FETCH_TIMEOUT_S: float = 15.0
FETCH_MAX_BYTES: int = 25 * 1024 * 1024
USER_AGENT: str = "pixel_post/0.1"
