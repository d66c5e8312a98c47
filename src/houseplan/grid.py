# src/houseplan/grid.py
"""Dense cell grid addressed in world coordinates.

World (0, 0) sits at the array center, so rooms may grow in every direction
from the root. Cell types are stored as small integer codes and colors as an
RGB array, which keeps region checks to a single numpy slice.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from houseplan.models import CellType

_CODES: dict[CellType, int] = {
    CellType.EMPTY: 0,
    CellType.INTERIOR: 1,
    CellType.WALL: 2,
    CellType.DOOR: 3,
}
_TYPES: list[CellType] = sorted(_CODES, key=_CODES.get)

ASCII_GLYPHS: dict[CellType, str] = {
    CellType.EMPTY: " ",
    CellType.INTERIOR: ".",
    CellType.WALL: "#",
    CellType.DOOR: "+",
}


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


def rgb_to_hex(rgb) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def cell_code(cell_type: CellType) -> int:
    return _CODES[cell_type]


@dataclass(frozen=True)
class GridCell:
    type: CellType
    color: str


class GridStore:
    """Fixed-size cell map with world-to-array offset."""

    def __init__(self, width: int, height: int, empty_color: str = "#ffffff") -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.empty_color = empty_color
        self.offset_x = width // 2
        self.offset_y = height // 2
        self.types = np.zeros((height, width), dtype=np.uint8)
        self.colors = np.empty((height, width, 3), dtype=np.uint8)
        self.colors[:, :] = hex_to_rgb(empty_color)

    # ------------------------------------------------------------------ #
    # Cell access
    # ------------------------------------------------------------------ #

    def _to_array(self, x: int, y: int) -> tuple[int, int]:
        return x + self.offset_x, y + self.offset_y

    def is_inside(self, x: int, y: int) -> bool:
        ax, ay = self._to_array(x, y)
        return 0 <= ax < self.width and 0 <= ay < self.height

    def get_cell(self, x: int, y: int) -> Optional[GridCell]:
        if not self.is_inside(x, y):
            return None
        ax, ay = self._to_array(x, y)
        return GridCell(
            type=_TYPES[self.types[ay, ax]],
            color=rgb_to_hex(self.colors[ay, ax]),
        )

    def get_type(self, x: int, y: int) -> Optional[CellType]:
        if not self.is_inside(x, y):
            return None
        ax, ay = self._to_array(x, y)
        return _TYPES[self.types[ay, ax]]

    def set_cell(self, x: int, y: int, cell: GridCell) -> None:
        if not self.is_inside(x, y):
            return
        ax, ay = self._to_array(x, y)
        self.types[ay, ax] = _CODES[cell.type]
        self.colors[ay, ax] = hex_to_rgb(cell.color)

    def clear_cell(self, x: int, y: int) -> None:
        self.set_cell(x, y, GridCell(CellType.EMPTY, self.empty_color))

    # ------------------------------------------------------------------ #
    # Region queries
    # ------------------------------------------------------------------ #

    def region(self, min_x: int, min_y: int, max_x: int, max_y: int) -> np.ndarray:
        """Type codes of the in-bounds part of an inclusive world rectangle."""
        ax0, ay0 = self._to_array(min_x, min_y)
        ax1, ay1 = self._to_array(max_x, max_y)
        ax0, ay0 = max(ax0, 0), max(ay0, 0)
        ax1, ay1 = min(ax1, self.width - 1), min(ay1, self.height - 1)
        if ax0 > ax1 or ay0 > ay1:
            return np.zeros((0, 0), dtype=np.uint8)
        return self.types[ay0:ay1 + 1, ax0:ax1 + 1]

    def contains_rect(self, min_x: int, min_y: int, max_x: int, max_y: int) -> bool:
        return self.is_inside(min_x, min_y) and self.is_inside(max_x, max_y)

    def count(self, cell_type: CellType) -> int:
        return int(np.count_nonzero(self.types == _CODES[cell_type]))

    def cells_of_type(self, cell_type: CellType) -> list[tuple[int, int]]:
        """World coordinates of every cell with the given type."""
        ays, axs = np.nonzero(self.types == _CODES[cell_type])
        return [
            (int(ax) - self.offset_x, int(ay) - self.offset_y)
            for ay, ax in zip(ays, axs)
        ]

    # ------------------------------------------------------------------ #
    # Whole-grid operations
    # ------------------------------------------------------------------ #

    def reset(self) -> None:
        self.types.fill(0)
        self.colors[:, :] = hex_to_rgb(self.empty_color)

    def copy(self) -> GridStore:
        clone = GridStore(self.width, self.height, self.empty_color)
        clone.types = self.types.copy()
        clone.colors = self.colors.copy()
        return clone

    def to_ascii(self) -> str:
        """Render cell types as text, north (highest y) on top."""
        glyphs = np.array([ASCII_GLYPHS[t] for t in _TYPES])
        rows = glyphs[self.types[::-1]]
        return "\n".join("".join(row) for row in rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridStore):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.types, other.types)
            and np.array_equal(self.colors, other.colors)
        )

    __hash__ = None  # type: ignore[assignment]
