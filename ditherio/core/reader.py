"""Decode image files into 16-bit RGBA arrays."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ditherio.core.color import MAX_CHANNEL, scale_16_to_8, scale_8_to_16

# Pillow modes holding single-channel data wider than 8 bits
_WIDE_GRAY_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


def from_pil(img: Image.Image) -> np.ndarray:
    """Convert a PIL image to a uint16 array of shape (height, width, 4).

    8-bit channels are widened with ``v * 257``; 16-bit grayscale keeps its
    full precision and becomes opaque gray.
    """
    if img.mode in _WIDE_GRAY_MODES:
        gray = np.clip(np.array(img, dtype=np.int64), 0, MAX_CHANNEL).astype(np.uint16)
        alpha = np.full(gray.shape, MAX_CHANNEL, dtype=np.uint16)
        return np.stack([gray, gray, gray, alpha], axis=-1)

    rgba = np.array(img.convert("RGBA"), dtype=np.uint16)
    return scale_8_to_16(rgba)


def to_pil(image: np.ndarray, with_alpha: bool = True) -> Image.Image:
    """Convert a 16-bit RGBA array back to an 8-bit PIL image."""
    arr = np.asarray(image, dtype=np.uint32)
    narrowed = scale_16_to_8(arr).astype(np.uint8)
    if with_alpha:
        return Image.fromarray(narrowed)
    return Image.fromarray(np.ascontiguousarray(narrowed[..., :3]))


def load_image(path: str | Path) -> np.ndarray:
    """Read an image file as a 16-bit RGBA array.

    EXIF orientation is applied, so the array is upright as displayed.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: if the file cannot be decoded as an image.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with Image.open(path) as img:
            img.load()
            upright = ImageOps.exif_transpose(img)
            return from_pil(upright)
    except UnidentifiedImageError as e:
        raise ValueError(f"Cannot decode image {path}: {e}") from e
