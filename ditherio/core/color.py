"""16-bit RGBA color arithmetic shared by palettes, kernels and the engine."""

from __future__ import annotations

from typing import NamedTuple

MAX_CHANNEL = 0xFFFF


class Color(NamedTuple):
    """Non-premultiplied RGBA color, each channel in [0, MAX_CHANNEL]."""

    r: int
    g: int
    b: int
    a: int = MAX_CHANNEL


class ErrorVector(NamedTuple):
    """Signed per-channel difference between a pixel before and after quantization."""

    r: int
    g: int
    b: int
    a: int


BLACK = Color(0, 0, 0, MAX_CHANNEL)
WHITE = Color(MAX_CHANNEL, MAX_CHANNEL, MAX_CHANNEL, MAX_CHANNEL)


def clamp(value: int, lo: int, hi: int) -> int:
    if value > hi:
        return hi
    if value < lo:
        return lo
    return value


def make_color(r: int, g: int, b: int, a: int) -> Color:
    """Build a Color, saturating every channel into [0, MAX_CHANNEL]."""
    return Color(
        clamp(r, 0, MAX_CHANNEL),
        clamp(g, 0, MAX_CHANNEL),
        clamp(b, 0, MAX_CHANNEL),
        clamp(a, 0, MAX_CHANNEL),
    )


def color_diff(original: Color, quantized: Color) -> ErrorVector:
    """Return original - quantized per channel.

    Python ints are unbounded, so weighted accumulation downstream
    cannot overflow.
    """
    return ErrorVector(
        original[0] - quantized[0],
        original[1] - quantized[1],
        original[2] - quantized[2],
        original[3] - quantized[3],
    )


def scale_8_to_16(value: int) -> int:
    """Widen an 8-bit channel to 16 bits (0xFF -> 0xFFFF).

    Works on ints and numpy arrays alike.
    """
    return value * 257


def scale_16_to_8(value: int) -> int:
    """Narrow a 16-bit channel to 8 bits, rounding to nearest.

    Works on ints and numpy arrays; arrays must be wide enough to hold
    ``value + 128`` without overflow.
    """
    return (value + 128) // 257


def parse_hex(text: str) -> Color:
    """Parse ``#rgb``, ``#rrggbb`` or ``#rrggbbaa`` into a 16-bit Color.

    The leading ``#`` is optional.
    """
    raw = text.strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) not in (6, 8):
        raise ValueError(f"Invalid hex color: {text!r}")
    try:
        channels = [int(raw[i : i + 2], 16) for i in range(0, len(raw), 2)]
    except ValueError:
        raise ValueError(f"Invalid hex color: {text!r}") from None
    if len(channels) == 3:
        channels.append(0xFF)
    return Color(*(scale_8_to_16(c) for c in channels))
