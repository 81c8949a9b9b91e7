"""ditherio: error diffusion dithering onto fixed palettes."""

from ditherio.core.dither import dither
from ditherio.core.kernels import BURKES, FLOYD_STEINBERG, DiffusionKernel, get_kernel
from ditherio.core.palette import (
    PLAN9,
    WEB_SAFE,
    FixedPalette,
    MonochromePalette,
    Palette,
    get_palette,
)

__version__ = "0.1.0"

__all__ = [
    "BURKES",
    "FLOYD_STEINBERG",
    "PLAN9",
    "WEB_SAFE",
    "DiffusionKernel",
    "FixedPalette",
    "MonochromePalette",
    "Palette",
    "dither",
    "get_kernel",
    "get_palette",
]
