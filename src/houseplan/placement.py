# src/houseplan/placement.py
"""Grid-level placement primitives: collision checks, stamping, wall baking."""
from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from houseplan.geometry import (
    Cell,
    RoomShape,
    expanded_bounds,
    interior_bounds,
    interior_cells,
)
from houseplan.grid import GridCell, GridStore, cell_code
from houseplan.models import CellType

_EMPTY = cell_code(CellType.EMPTY)
_INTERIOR = cell_code(CellType.INTERIOR)

_NEIGHBOR_STEPS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def can_place_room(
    grid: GridStore, room: RoomShape, origin: Cell, door: Optional[Cell] = None
) -> bool:
    """Check if ``room`` fits at ``origin`` without touching another interior.

    The room's perimeter may overlap other perimeters and doors, but never an
    interior; its own interior must be in bounds and entirely empty; the
    connecting door, when given, must be in bounds and not an interior cell.
    """
    if np.any(grid.region(*expanded_bounds(room, origin)) == _INTERIOR):
        return False

    bounds = interior_bounds(room, origin)
    if not grid.contains_rect(*bounds):
        return False
    if np.any(grid.region(*bounds) != _EMPTY):
        return False

    if door is not None:
        door_type = grid.get_type(*door)
        if door_type is None or door_type == CellType.INTERIOR:
            return False

    return True


def place_room(
    grid: GridStore,
    room: RoomShape,
    origin: Cell,
    color: str,
    door: Optional[Cell] = None,
    door_color: str = "#f59e0b",
) -> None:
    """Stamp a room's interior (and its connecting door) into the grid."""
    interior = GridCell(CellType.INTERIOR, color)
    for x, y in interior_cells(room, origin):
        grid.set_cell(x, y, interior)
    if door is not None:
        grid.set_cell(door[0], door[1], GridCell(CellType.DOOR, door_color))


def mark_door_sockets(grid: GridStore, doors: Iterable[Cell], color: str) -> None:
    """Show open sockets as door cells wherever the grid is still empty."""
    marker = GridCell(CellType.DOOR, color)
    for x, y in doors:
        if grid.get_type(x, y) == CellType.EMPTY:
            grid.set_cell(x, y, marker)


def remove_unused_door_sockets(grid: GridStore, confirmed: Iterable[Cell]) -> int:
    """Clear every door cell that is not a confirmed connection.

    Returns the number of cells cleared.
    """
    keep = set(confirmed)
    removed = 0
    for x, y in grid.cells_of_type(CellType.DOOR):
        if (x, y) not in keep:
            grid.clear_cell(x, y)
            removed += 1
    return removed


def bake_walls(
    grid: GridStore, rooms: Iterable[tuple[RoomShape, Cell]], wall_color: str = "#4b5563"
) -> None:
    """Wall every empty 4-neighbour of every interior cell of the given rooms.

    Diagonal corners outside a room are left alone. Only ``empty`` cells are
    converted, so interiors and doors survive and running it again changes
    nothing.
    """
    wall = GridCell(CellType.WALL, wall_color)
    for room, origin in rooms:
        for x, y in interior_cells(room, origin):
            for dx, dy in _NEIGHBOR_STEPS:
                if grid.get_type(x + dx, y + dy) == CellType.EMPTY:
                    grid.set_cell(x + dx, y + dy, wall)
