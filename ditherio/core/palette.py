"""Palette strategies: map any color to the nearest representable color.

Strategies are stateless and idempotent on their own outputs, so they can be
called in any order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Sequence

import numpy as np

from ditherio.core.color import (
    BLACK,
    MAX_CHANNEL,
    WHITE,
    Color,
    parse_hex,
    scale_8_to_16,
)


class PaletteName(str, Enum):
    MONOCHROME = "mono"
    WEB_SAFE = "websafe"
    PLAN9 = "plan9"
    GRAY4 = "gray4"
    CGA = "cga"


class Palette(ABC):
    """A pure color -> color quantizer."""

    name: str
    colors: tuple[Color, ...]

    @abstractmethod
    def convert(self, color: Color) -> Color:
        """Return the palette color that replaces ``color``."""

    def __call__(self, color: Color) -> Color:
        return self.convert(color)

    def __len__(self) -> int:
        return len(self.colors)


class MonochromePalette(Palette):
    """Threshold the unweighted RGB mean to pure black or pure white.

    By default the result is fully opaque. With ``preserve_alpha`` the input
    alpha is carried through unchanged.
    """

    THRESHOLD = MAX_CHANNEL >> 1

    def __init__(self, preserve_alpha: bool = False) -> None:
        self.name = PaletteName.MONOCHROME.value
        self.preserve_alpha = preserve_alpha
        self.colors = (BLACK, WHITE)

    def convert(self, color: Color) -> Color:
        r, g, b, a = color
        gray = (r + g + b) // 3
        out = BLACK if gray < self.THRESHOLD else WHITE
        if self.preserve_alpha:
            return out._replace(a=a)
        return out

    def __repr__(self) -> str:
        return f"MonochromePalette(preserve_alpha={self.preserve_alpha})"


class FixedPalette(Palette):
    """Nearest-color lookup in a fixed table.

    Distance is squared Euclidean over all four 16-bit channels. On ties the
    entry that appears first in the table wins.
    """

    def __init__(self, name: str, colors: Iterable[Color]) -> None:
        self.name = name
        self.colors = tuple(Color(*c) for c in colors)
        if not self.colors:
            raise ValueError(f"Palette {name!r} has no colors")
        self._table = np.array(self.colors, dtype=np.int64)

    @classmethod
    def from_hex(cls, name: str, hex_colors: Sequence[str]) -> FixedPalette:
        return cls(name, [parse_hex(h) for h in hex_colors])

    def convert(self, color: Color) -> Color:
        diff = self._table - np.array(color, dtype=np.int64)
        dist = (diff * diff).sum(axis=1)
        # argmin returns the first minimum, which gives table-order tie breaking
        return self.colors[int(np.argmin(dist))]

    def __repr__(self) -> str:
        return f"FixedPalette({self.name!r}, {len(self.colors)} colors)"


def _rgb8(r: int, g: int, b: int) -> Color:
    return Color(scale_8_to_16(r), scale_8_to_16(g), scale_8_to_16(b), MAX_CHANNEL)


def _web_safe_colors() -> list[Color]:
    """216 colors, each channel one of 0x00, 0x33, ... 0xFF, red outermost."""
    steps = [0x33 * i for i in range(6)]
    return [_rgb8(r, g, b) for r in steps for g in steps for b in steps]


def _plan9_colors() -> list[Color]:
    """The 256-entry Plan 9 color map (4x4x4 cube crossed with 4 intensities)."""
    colors: list[Color | None] = [None] * 256
    i = 0
    for r in range(4):
        for v in range(4):
            j = v - r
            for g in range(4):
                for b in range(4):
                    den = max(r, g, b)
                    if den == 0:
                        rgb = (0x11 * v, 0x11 * v, 0x11 * v)
                    else:
                        num = 17 * (4 * den + v)
                        rgb = (r * num // den, g * num // den, b * num // den)
                    colors[i + (j & 0x0F)] = _rgb8(*rgb)
                    j += 1
            i += 16
    return colors  # type: ignore[return-value]


_CGA_HEX = [
    "000000", "0000AA", "00AA00", "00AAAA",
    "AA0000", "AA00AA", "AA5500", "AAAAAA",
    "555555", "5555FF", "55FF55", "55FFFF",
    "FF5555", "FF55FF", "FFFF55", "FFFFFF",
]

WEB_SAFE = FixedPalette(PaletteName.WEB_SAFE.value, _web_safe_colors())
PLAN9 = FixedPalette(PaletteName.PLAN9.value, _plan9_colors())
GRAY4 = FixedPalette(
    PaletteName.GRAY4.value, [_rgb8(v, v, v) for v in (0x00, 0x55, 0xAA, 0xFF)]
)
CGA = FixedPalette.from_hex(PaletteName.CGA.value, _CGA_HEX)

PALETTES: dict[PaletteName, Palette] = {
    PaletteName.MONOCHROME: MonochromePalette(),
    PaletteName.WEB_SAFE: WEB_SAFE,
    PaletteName.PLAN9: PLAN9,
    PaletteName.GRAY4: GRAY4,
    PaletteName.CGA: CGA,
}


def get_palette(name: PaletteName | str, preserve_alpha: bool = False) -> Palette:
    """Look up a built-in palette by enum member or its string value."""
    key = PaletteName(name)
    if key == PaletteName.MONOCHROME:
        return MonochromePalette(preserve_alpha=preserve_alpha)
    return PALETTES[key]
