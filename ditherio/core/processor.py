"""Image processing pipeline.

Optional resize -> dither with the configured kernel and palette.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from ditherio.core.dither import dither
from ditherio.core.kernels import KernelName, get_kernel
from ditherio.core.palette import FixedPalette, Palette, PaletteName, get_palette
from ditherio.core.reader import from_pil, to_pil


@dataclass(frozen=True)
class Settings:
    """Processing settings that affect output."""

    kernel: KernelName = KernelName.BURKES
    palette: PaletteName = PaletteName.MONOCHROME
    colors: tuple[str, ...] = ()  # custom hex palette, overrides `palette`
    width: int | None = None
    height: int | None = None
    preserve_alpha: bool = False


def resolve_palette(settings: Settings) -> Palette:
    """Build the palette strategy described by ``settings``.

    Custom ``colors`` carry their own alpha, so they cannot be combined with
    ``preserve_alpha``.
    """
    if settings.colors:
        if settings.preserve_alpha:
            raise ValueError("--preserve-alpha only applies to the mono palette, not --colors")
        return FixedPalette.from_hex("custom", settings.colors)
    return get_palette(settings.palette, preserve_alpha=settings.preserve_alpha)


def target_size(
    img_width: int,
    img_height: int,
    width: int | None,
    height: int | None,
) -> tuple[int, int]:
    """Resolve the output size, preserving aspect ratio when one side is omitted."""
    if width is None and height is None:
        return img_width, img_height
    if width is not None and height is not None:
        return width, height
    if img_width == 0 or img_height == 0:
        return img_width, img_height
    if width is not None:
        return width, max(1, round(img_height * width / img_width))
    return max(1, round(img_width * height / img_height)), height


def _resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    img = to_pil(image).resize((width, height), Image.Resampling.LANCZOS)
    return from_pil(img)


def process_image(image: np.ndarray, settings: Settings) -> np.ndarray:
    """Resize (if requested) and dither a 16-bit RGBA image."""
    h, w = image.shape[:2]
    out_w, out_h = target_size(w, h, settings.width, settings.height)
    if (out_w, out_h) != (w, h):
        if out_w <= 0 or out_h <= 0:
            raise ValueError(f"Invalid output size: {out_w}x{out_h}")
        image = _resize(image, out_w, out_h)

    return dither(image, get_kernel(settings.kernel), resolve_palette(settings))
