"""Shared fixtures for pixel_post tests."""
import numpy as np
import pytest

from pixel_post.core_types import RasterImage


class FakeClock:
    """Deterministic clock: each call returns the current time, then advances by `tick`."""

    def __init__(self, tick=0.0):
        self.now = 0.0
        self.tick = tick
        self.calls = 0

    def __call__(self):
        self.calls += 1
        t = self.now
        self.now += self.tick
        return t


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def noise_image():
    """32x24 RGBA noise, opaque."""
    rng = np.random.default_rng(7)
    arr = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
    arr[..., 3] = 255
    return RasterImage(32, 24, arr)


@pytest.fixture
def gradient_image():
    """48x16 horizontal grey ramp with a red band, opaque."""
    ramp = np.linspace(0, 255, 48).astype(np.uint8)
    arr = np.zeros((16, 48, 4), dtype=np.uint8)
    arr[..., 0] = ramp
    arr[..., 1] = ramp
    arr[..., 2] = ramp
    arr[4:8, :, :3] = (220, 30, 30)
    arr[..., 3] = 255
    return RasterImage(48, 16, arr)
