# src/houseplan/geometry.py
from __future__ import annotations

from typing import Iterator, Protocol

from shapely.geometry import Polygon, box as shapely_box

from houseplan.models import DoorSocket, Edge

Cell = tuple[int, int]


class RoomShape(Protocol):
    width: int
    height: int


def door_position(room: RoomShape, origin: Cell, socket: DoorSocket) -> Cell:
    """Return the world cell just outside ``room`` where ``socket`` opens."""
    ox, oy = origin
    if socket.edge == Edge.NORTH:
        return ox + socket.offset, oy + room.height
    if socket.edge == Edge.SOUTH:
        return ox + socket.offset, oy - 1
    if socket.edge == Edge.EAST:
        return ox + room.width, oy + socket.offset
    return ox - 1, oy + socket.offset


def origin_from_door(room: RoomShape, socket: DoorSocket, door: Cell) -> Cell:
    """Inverse of :func:`door_position`: the origin that puts ``socket`` on ``door``."""
    dx, dy = door
    if socket.edge == Edge.NORTH:
        return dx - socket.offset, dy - room.height
    if socket.edge == Edge.SOUTH:
        return dx - socket.offset, dy + 1
    if socket.edge == Edge.EAST:
        return dx - room.width, dy - socket.offset
    return dx + 1, dy - socket.offset


def interior_bounds(room: RoomShape, origin: Cell) -> tuple[int, int, int, int]:
    """Inclusive (min_x, min_y, max_x, max_y) of the room interior."""
    ox, oy = origin
    return ox, oy, ox + room.width - 1, oy + room.height - 1


def expanded_bounds(room: RoomShape, origin: Cell) -> tuple[int, int, int, int]:
    """Interior bounds grown by the 1-cell perimeter."""
    min_x, min_y, max_x, max_y = interior_bounds(room, origin)
    return min_x - 1, min_y - 1, max_x + 1, max_y + 1


def interior_cells(room: RoomShape, origin: Cell) -> Iterator[Cell]:
    min_x, min_y, max_x, max_y = interior_bounds(room, origin)
    for x in range(min_x, max_x + 1):
        for y in range(min_y, max_y + 1):
            yield x, y


def room_footprint(room: RoomShape, origin: Cell) -> Polygon:
    """Interior rectangle as a polygon in cell units."""
    ox, oy = origin
    return shapely_box(ox, oy, ox + room.width, oy + room.height)


def footprints_overlap(p1: Polygon, p2: Polygon) -> bool:
    """Check if two footprints overlap (sharing an edge is NOT overlap)."""
    if not p1.intersects(p2):
        return False
    return p1.intersection(p2).area > 1e-6
