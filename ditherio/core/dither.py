"""Error diffusion dithering engine."""

from __future__ import annotations

import numpy as np

from ditherio.core.color import MAX_CHANNEL, Color, color_diff
from ditherio.core.kernels import DiffusionKernel
from ditherio.core.palette import Palette


def dither(image: np.ndarray, kernel: DiffusionKernel, palette: Palette) -> np.ndarray:
    """Dither a 16-bit RGBA image with the given kernel and palette.

    Args:
        image: array of shape (height, width, 4) with channel values in
               [0, 65535]. It is never modified.
        kernel: error diffusion kernel applied after every pixel.
        palette: strategy choosing each pixel's replacement color.

    Returns:
        New uint16 array with the same shape as ``image``.
    """
    src = np.asarray(image)
    if src.ndim != 3 or src.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {src.shape}")

    height, width = src.shape[:2]
    # tolist() copies, so the caller's buffer is never aliased
    values = np.clip(src, 0, MAX_CHANNEL).astype(np.int64).tolist()
    grid = [[Color(*px) for px in row] for row in values]

    for y in range(height):
        row = grid[y]
        for x in range(width):
            old = row[x]
            new = palette.convert(old)
            row[x] = new
            kernel.apply(grid, x, y, color_diff(old, new))

    return np.array(grid, dtype=np.uint16).reshape(height, width, 4)
