import pytest

from houseplan.models import ConnectionRecord, Edge, LayoutMeta, PlacedLayout, PlacedRoom, Point
from houseplan.validation import (
    check_connectivity,
    check_counts,
    check_overlaps,
    check_socket_edges,
    validate_layout,
)


def room(room_id, x, y, w=4, h=3):
    return PlacedRoom(
        room_id=room_id, type_id=room_id.split("-")[0],
        origin=Point(x=x, y=y), width=w, height=h, color="#bfdbfe",
    )


def connect(src, src_edge, dst, dst_edge, door):
    return ConnectionRecord(
        source_room_id=src, source_edge=src_edge, source_socket=0,
        target_room_id=dst, target_edge=dst_edge, target_socket=0,
        door=Point(x=door[0], y=door[1]),
    )


def layout(rooms, connections):
    return PlacedLayout(
        meta=LayoutMeta(seed=1, attempts=1, grid_width=40, grid_height=30),
        rooms=rooms, connections=connections,
    )


@pytest.fixture
def good_layout():
    # Hall at origin, Room east of it sharing the wall column x=4
    return layout(
        [room("Hall-1", 0, 0), room("Room-2", 5, 0)],
        [connect("Hall-1", Edge.EAST, "Room-2", Edge.WEST, (4, 1))],
    )


def test_good_layout_passes(good_layout):
    assert validate_layout(good_layout, {"Hall": 1, "Room": 1}) == []


def test_overlap_detected():
    bad = layout([room("Hall-1", 0, 0), room("Room-2", 2, 1)], [])
    issues = check_overlaps(bad)
    assert len(issues) == 1
    assert "Hall-1" in issues[0] and "Room-2" in issues[0]


def test_touching_rooms_do_not_overlap():
    assert check_overlaps(layout([room("Hall-1", 0, 0), room("Room-2", 4, 0)], [])) == []


def test_disconnected_room_detected(good_layout):
    lonely = layout(good_layout.rooms + [room("Room-3", 20, 20)], good_layout.connections)
    issues = check_connectivity(lonely)
    assert issues == ["Room Room-3 is not reachable from Hall-1"]


def test_chain_is_connected():
    chain = layout(
        [room("Hall-1", 0, 0), room("Room-2", 5, 0), room("Room-3", 10, 0)],
        [
            connect("Hall-1", Edge.EAST, "Room-2", Edge.WEST, (4, 1)),
            connect("Room-2", Edge.EAST, "Room-3", Edge.WEST, (9, 1)),
        ],
    )
    assert check_connectivity(chain) == []


def test_unknown_room_in_connection():
    bad = layout([room("Hall-1", 0, 0)], [connect("Hall-1", Edge.EAST, "Ghost-9", Edge.WEST, (4, 1))])
    assert any("unknown room" in i for i in check_connectivity(bad))


def test_empty_layout_is_not_connected():
    assert check_connectivity(layout([], [])) == ["Layout has no rooms"]


def test_counts_must_match_exactly(good_layout):
    assert check_counts(good_layout, {"Hall": 1, "Room": 1}) == []
    assert check_counts(good_layout, {"Hall": 1, "Room": 2}) == ["Expected 2 Room room(s), found 1"]
    assert check_counts(good_layout, {"Hall": 1}) == ["Expected 0 Room room(s), found 1"]


def test_zero_counts_ignored_by_validate_layout(good_layout):
    assert validate_layout(good_layout, {"Hall": 1, "Room": 1, "Garage": 0}) == []


def test_same_edges_rejected():
    bad = layout(
        [room("Hall-1", 0, 0), room("Room-2", 5, 0)],
        [connect("Hall-1", Edge.EAST, "Room-2", Edge.EAST, (4, 1))],
    )
    assert check_socket_edges(bad) == ["Connection Hall-1->Room-2 joins E to E"]


def test_door_off_the_edge_rejected():
    # Opposite edges, but the rooms are too far apart to share the door cell
    bad = layout(
        [room("Hall-1", 0, 0), room("Room-2", 8, 0)],
        [connect("Hall-1", Edge.EAST, "Room-2", Edge.WEST, (4, 1))],
    )
    assert check_socket_edges(bad) == ["Door of Hall-1->Room-2 is not on the W edge of Room-2"]
