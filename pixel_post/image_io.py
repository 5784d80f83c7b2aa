# pixel_post/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Union

import numpy as np
import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import FETCH_MAX_BYTES, FETCH_TIMEOUT_S, USER_AGENT
from .core_types import RasterImage
from .errors import ImageDecodeError, ImageFetchError

"""
Image I/O helpers: fetch bytes from a URL, decode into an RGBA RasterImage,
load local files, and save PNG previews.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGBA"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            pass

    return im.convert("RGBA")


def decode_image(data: bytes) -> RasterImage:
    """Decode encoded image bytes (PNG, JPEG, GIF first frame, ...) into RGBA."""
    if not data:
        raise ImageDecodeError("image data is empty")
    try:
        with Image.open(io.BytesIO(data)) as im0:
            im0.load()
            im = _convert_to_srgb_rgba(im0)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"could not decode image: {exc}") from exc
    arr = np.array(im, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ImageDecodeError(f"decoded image has no pixels: {arr.shape}")
    return RasterImage(arr.shape[1], arr.shape[0], arr)


def fetch_image_bytes(url: str, timeout: float = FETCH_TIMEOUT_S) -> bytes:
    """GET `url` and return the body. Network and HTTP errors raise ImageFetchError."""
    try:
        resp = requests.get(
            url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            stream=True,
        )
        with resp:
            resp.raise_for_status()
            chunks = []
            total = 0
            for chunk in resp.iter_content(chunk_size=64 * 1024):
                total += len(chunk)
                if total > FETCH_MAX_BYTES:
                    raise ImageFetchError(
                        f"image at {url} is larger than {FETCH_MAX_BYTES:,} bytes"
                    )
                chunks.append(chunk)
    except requests.RequestException as exc:
        raise ImageFetchError(f"could not fetch {url}: {exc}") from exc
    return b"".join(chunks)


def fetch_image(url: str, timeout: float = FETCH_TIMEOUT_S) -> RasterImage:
    return decode_image(fetch_image_bytes(url, timeout=timeout))


def is_url(src: Union[str, Path]) -> bool:
    return isinstance(src, str) and src.lower().startswith(("http://", "https://"))


def load_image(path: Path) -> RasterImage:
    """Load a local image file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ImageFetchError(f"could not read {path}: {exc}") from exc
    return decode_image(data)


def save_png(path: Path, image: RasterImage) -> Path:
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    Image.fromarray(np.ascontiguousarray(image.pixels)).save(path)
    return path


__all__ = [
    "decode_image",
    "fetch_image_bytes",
    "fetch_image",
    "is_url",
    "load_image",
    "save_png",
]
