"""Encode dithered 16-bit RGBA arrays to image files.

Output is written to a temporary file next to the destination and renamed
into place once encoding succeeds, so a failed save never leaves a partial
file behind.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

import numpy as np

from ditherio.core.reader import to_pil

# extension -> (Pillow format, supports alpha)
FORMATS: dict[str, tuple[str, bool]] = {
    ".png": ("PNG", True),
    ".gif": ("GIF", True),
    ".bmp": ("BMP", False),
    ".tif": ("TIFF", True),
    ".tiff": ("TIFF", True),
    ".webp": ("WEBP", True),
    ".jpg": ("JPEG", False),
    ".jpeg": ("JPEG", False),
}


def detect_format(path: Path) -> tuple[str, bool]:
    """Return (Pillow format name, alpha support) for an output path."""
    suffix = path.suffix.lower()
    if suffix not in FORMATS:
        raise ValueError(f"Unsupported output format: {suffix}")
    return FORMATS[suffix]


def save_image(image: np.ndarray, output_path: str | Path) -> None:
    """Save a 16-bit RGBA array, choosing the format from the extension.

    Raises:
        ValueError: for an unsupported extension.
        OSError: if the destination cannot be written.
    """
    output_path = Path(output_path)
    fmt, has_alpha = detect_format(output_path)
    img = to_pil(image, with_alpha=has_alpha)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{output_path.stem}.", suffix=output_path.suffix, dir=output_path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            img.save(fh, format=fmt)
        # mkstemp creates 0600 files
        os.chmod(tmp_path, _target_mode(output_path))
        os.replace(tmp_path, output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _target_mode(output_path: Path) -> int:
    """Mode for the saved file: keep an existing file's mode, else honor the umask."""
    try:
        return stat.S_IMODE(output_path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
