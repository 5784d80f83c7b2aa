# pixel_post/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import enum
import math
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Rgba = NDArray[np.uint8]  # (H, W, 4)
U8Palette = NDArray[np.uint8]  # (P, 3)

# Value objects


@dataclass(frozen=True)
class RasterImage:
    """RGBA raster in row-major order, stored as a (height, width, 4) uint8 array."""

    width: int
    height: int
    pixels: U8Rgba

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"image must be at least 1x1, got {self.width}x{self.height}")
        arr = self.pixels
        if not isinstance(arr, np.ndarray) or arr.dtype != np.uint8:
            raise TypeError("expected uint8 RGBA pixel array")
        if arr.size != self.width * self.height * 4:
            raise ValueError(
                f"pixel data has {arr.size} samples, expected {self.width * self.height * 4}"
            )
        if arr.shape != (self.height, self.width, 4):
            object.__setattr__(
                self, "pixels", arr.reshape(self.height, self.width, 4)
            )

    @classmethod
    def from_flat(
        cls, width: int, height: int, data: Union[bytes, Sequence[int], np.ndarray]
    ) -> "RasterImage":
        """Build from a flat RGBA sample sequence of length width*height*4."""
        arr = np.array(data, dtype=np.uint8).reshape(-1)
        return cls(width, height, arr)

    @classmethod
    def from_rgb(cls, rgb: np.ndarray) -> "RasterImage":
        """Build an opaque image from a (H, W, 3) uint8 array."""
        if rgb.ndim != 3 or rgb.shape[-1] != 3:
            raise TypeError("expected (H,W,3) RGB array")
        H, W, _ = rgb.shape
        out = np.empty((H, W, 4), dtype=np.uint8)
        out[..., :3] = rgb
        out[..., 3] = 255
        return cls(W, H, out)

    @property
    def rgb(self) -> U8Image:
        return self.pixels[..., :3]

    @property
    def alpha(self) -> NDArray[np.uint8]:
        return self.pixels[..., 3]

    def flat(self) -> bytes:
        return self.pixels.tobytes()


class Run(NamedTuple):
    """`count` contiguous pixels of one exact colour."""

    red: int
    green: int
    blue: int
    count: int

    @property
    def rgb(self) -> RGBTuple:
        return (self.red, self.green, self.blue)


RLERow = List[Run]
RLEImage = List[RLERow]


class Verdict(enum.Enum):
    """Where a trial's output lands relative to the byte budget."""

    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    CORRECT = "correct"


@dataclass(frozen=True)
class SearchTrial:
    """One evaluated width: the markup it produced and how it compares to the budget."""

    width: int
    output: str
    size: int
    verdict: Verdict


@dataclass(frozen=True)
class FitResult:
    """Winning trial plus bookkeeping for reports."""

    markup: str
    width: int
    height: int
    size: int
    budget: int
    trials: int
    elapsed: float
    exact: bool


# Small helpers


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB triple to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def scaled_height(src_width: int, src_height: int, dst_width: int) -> int:
    """Height that keeps the aspect ratio at dst_width; never below 1."""
    return max(1, round_half_up(dst_width / float(src_width) * src_height))


# Callable signatures

SearchTask = Callable[[int], SearchTrial]
Clock = Callable[[], float]

__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "U8Rgba",
    "U8Palette",
    "RLERow",
    "RLEImage",
    # value objects
    "RasterImage",
    "Run",
    "Verdict",
    "SearchTrial",
    "FitResult",
    # helpers
    "rgb_to_hex",
    "round_half_up",
    "scaled_height",
    # callable signatures
    "SearchTask",
    "Clock",
]
