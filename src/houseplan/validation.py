# src/houseplan/validation.py
"""Checks for generated layouts.

Each check returns a list of human readable issues; an empty list means the
layout passed. ``validate_layout`` runs all of them.
"""
from __future__ import annotations

from collections import deque
from typing import Mapping, Optional

from houseplan.geometry import door_position, footprints_overlap, room_footprint
from houseplan.models import DoorSocket, Edge, PlacedLayout


def check_overlaps(layout: PlacedLayout) -> list[str]:
    issues: list[str] = []
    footprints = [
        (room.room_id, room_footprint(room, (room.origin.x, room.origin.y)))
        for room in layout.rooms
    ]
    for i, (id_a, poly_a) in enumerate(footprints):
        for id_b, poly_b in footprints[i + 1:]:
            if footprints_overlap(poly_a, poly_b):
                issues.append(f"Rooms {id_a} and {id_b} overlap")
    return issues


def check_connectivity(layout: PlacedLayout) -> list[str]:
    """BFS from the first (root) room over confirmed connections."""
    if not layout.rooms:
        return ["Layout has no rooms"]

    adj: dict[str, set[str]] = {room.room_id: set() for room in layout.rooms}
    issues: list[str] = []
    for conn in layout.connections:
        if conn.source_room_id not in adj or conn.target_room_id not in adj:
            issues.append(
                f"Connection {conn.source_room_id}->{conn.target_room_id} references an unknown room"
            )
            continue
        adj[conn.source_room_id].add(conn.target_room_id)
        adj[conn.target_room_id].add(conn.source_room_id)

    root = layout.rooms[0].room_id
    visited = {root}
    queue = deque([root])
    while queue:
        current = queue.popleft()
        for neighbor in adj[current]:
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    for room in layout.rooms:
        if room.room_id not in visited:
            issues.append(f"Room {room.room_id} is not reachable from {root}")
    return issues


def check_counts(layout: PlacedLayout, required_counts: Mapping[str, int]) -> list[str]:
    issues: list[str] = []
    actual = layout.type_counts()
    for type_id in sorted(set(actual) | set(required_counts)):
        want = required_counts.get(type_id, 0)
        got = actual.get(type_id, 0)
        if want != got:
            issues.append(f"Expected {want} {type_id} room(s), found {got}")
    return issues


def check_socket_edges(layout: PlacedLayout) -> list[str]:
    """Every connection must join opposite edges at a cell both sockets point to."""
    issues: list[str] = []
    rooms = {room.room_id: room for room in layout.rooms}
    for conn in layout.connections:
        label = f"{conn.source_room_id}->{conn.target_room_id}"
        if conn.source_edge.opposite != conn.target_edge:
            issues.append(
                f"Connection {label} joins {conn.source_edge.value} to {conn.target_edge.value}"
            )
            continue
        source = rooms.get(conn.source_room_id)
        target = rooms.get(conn.target_room_id)
        if source is None or target is None:
            continue
        door = (conn.door.x, conn.door.y)
        # Door cell must sit directly outside both rooms on the connecting edges.
        for room, edge in ((source, conn.source_edge), (target, conn.target_edge)):
            origin = (room.origin.x, room.origin.y)
            offset = _offset_along(room, origin, edge, door)
            if offset is None or door_position(room, origin, DoorSocket(edge=edge, offset=offset)) != door:
                issues.append(f"Door of {label} is not on the {edge.value} edge of {room.room_id}")
    return issues


def _offset_along(room, origin, edge, door) -> Optional[int]:
    if edge in (Edge.NORTH, Edge.SOUTH):
        offset = door[0] - origin[0]
        limit = room.width
    else:
        offset = door[1] - origin[1]
        limit = room.height
    return offset if 0 <= offset < limit else None


def validate_layout(
    layout: PlacedLayout, required_counts: Optional[Mapping[str, int]] = None
) -> list[str]:
    issues = check_overlaps(layout) + check_connectivity(layout) + check_socket_edges(layout)
    if required_counts is not None:
        issues += check_counts(layout, {t: c for t, c in required_counts.items() if c > 0})
    return issues
