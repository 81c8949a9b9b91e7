"""Error-diffusion kernels.

A kernel is a table of (dx, dy, weight) entries plus a normalization shift.
Each neighbor receives ``(error * weight) >> shift`` per channel. Offsets must
point at pixels not yet visited in raster order (left-to-right,
top-to-bottom), otherwise error would leak into finalized pixels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ditherio.core.color import Color, ErrorVector, make_color

# Row-major working grid: buffer[y][x] is a Color.
Grid = list[list[Color]]


class KernelName(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    BURKES = "burkes"
    SIERRA = "sierra"
    SIERRA_LITE = "sierra-lite"
    SIERRA_TWO_ROW = "sierra-2"
    ATKINSON = "atkinson"


@dataclass(frozen=True)
class KernelEntry:
    dx: int
    dy: int
    weight: int


@dataclass(frozen=True)
class DiffusionKernel:
    name: str
    shift: int
    entries: tuple[KernelEntry, ...]

    def __post_init__(self) -> None:
        if self.shift < 0:
            raise ValueError(f"Kernel {self.name!r}: shift must be >= 0")
        for entry in self.entries:
            if entry.dy < 0 or (entry.dy == 0 and entry.dx <= 0):
                raise ValueError(
                    f"Kernel {self.name!r}: offset ({entry.dx}, {entry.dy}) "
                    "points at an already visited pixel"
                )

    @property
    def denominator(self) -> int:
        return 1 << self.shift

    @property
    def total_weight(self) -> int:
        return sum(entry.weight for entry in self.entries)

    def apply(self, buffer: Grid, x: int, y: int, error: ErrorVector) -> None:
        """Spread ``error`` from pixel (x, y) onto its unvisited neighbors.

        Entries falling outside the grid are skipped and their share of the
        error is dropped.
        """
        height = len(buffer)
        width = len(buffer[0]) if height else 0
        er, eg, eb, ea = error
        shift = self.shift

        for entry in self.entries:
            nx = x + entry.dx
            ny = y + entry.dy
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            w = entry.weight
            r, g, b, a = buffer[ny][nx]
            buffer[ny][nx] = make_color(
                r + ((er * w) >> shift),
                g + ((eg * w) >> shift),
                b + ((eb * w) >> shift),
                a + ((ea * w) >> shift),
            )


def _kernel(name: KernelName, shift: int, table: list[tuple[int, int, int]]) -> DiffusionKernel:
    return DiffusionKernel(
        name=name.value,
        shift=shift,
        entries=tuple(KernelEntry(dx, dy, w) for dx, dy, w in table),
    )


FLOYD_STEINBERG = _kernel(
    KernelName.FLOYD_STEINBERG,
    4,
    [
        (1, 0, 7),
        (-1, 1, 3), (0, 1, 5), (1, 1, 1),
    ],
)

# Canonical Burkes table, /32.
BURKES = _kernel(
    KernelName.BURKES,
    5,
    [
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
    ],
)

SIERRA = _kernel(
    KernelName.SIERRA,
    5,
    [
        (1, 0, 5), (2, 0, 3),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
        (-1, 2, 2), (0, 2, 3), (1, 2, 2),
    ],
)

SIERRA_LITE = _kernel(
    KernelName.SIERRA_LITE,
    2,
    [
        (1, 0, 2),
        (-1, 1, 1), (0, 1, 1),
    ],
)

SIERRA_TWO_ROW = _kernel(
    KernelName.SIERRA_TWO_ROW,
    4,
    [
        (1, 0, 4), (2, 0, 3),
        (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
    ],
)

# Diffuses 6/8 of the error; the remaining 2/8 is dropped.
ATKINSON = _kernel(
    KernelName.ATKINSON,
    3,
    [
        (1, 0, 1), (2, 0, 1),
        (-1, 1, 1), (0, 1, 1), (1, 1, 1),
        (0, 2, 1),
    ],
)

KERNELS: dict[KernelName, DiffusionKernel] = {
    KernelName.FLOYD_STEINBERG: FLOYD_STEINBERG,
    KernelName.BURKES: BURKES,
    KernelName.SIERRA: SIERRA,
    KernelName.SIERRA_LITE: SIERRA_LITE,
    KernelName.SIERRA_TWO_ROW: SIERRA_TWO_ROW,
    KernelName.ATKINSON: ATKINSON,
}


def get_kernel(name: KernelName | str) -> DiffusionKernel:
    """Look up a built-in kernel by enum member or its string value."""
    return KERNELS[KernelName(name)]
