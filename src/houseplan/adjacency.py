# src/houseplan/adjacency.py
"""Door compatibility rules between room types and socket edges."""
from __future__ import annotations

from typing import Iterable

from houseplan.models import Edge, RoomType


def can_connect(type_a: RoomType, type_b: RoomType) -> bool:
    """Check if a door between the two types is allowed from both sides."""
    return type_a.allows(type_b.type_id) and type_b.allows(type_a.type_id)


def edges_meet(source: Edge, target: Edge) -> bool:
    """Sockets join flush only on opposite edges (N-S, E-W)."""
    return source.opposite == target


def reachable_neighbor_types(room_types: Iterable[RoomType]) -> set[str]:
    """Union of the neighbor types the given rooms declare."""
    reachable: set[str] = set()
    for room_type in room_types:
        reachable.update(room_type.allowed_neighbor_type_ids or ())
    return reachable
