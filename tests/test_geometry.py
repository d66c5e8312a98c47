import pytest
from shapely.geometry import Polygon

from houseplan.geometry import (
    door_position,
    expanded_bounds,
    footprints_overlap,
    interior_bounds,
    interior_cells,
    origin_from_door,
    room_footprint,
)
from houseplan.models import DoorSocket, Edge, RoomPrefab

ROOM = RoomPrefab(
    type_id="TestRoom", width=4, height=3,
    door_sockets=[
        DoorSocket(edge=Edge.NORTH, offset=1),
        DoorSocket(edge=Edge.SOUTH, offset=1),
        DoorSocket(edge=Edge.EAST, offset=1),
        DoorSocket(edge=Edge.WEST, offset=1),
    ],
)


def test_door_positions_sit_outside_each_edge():
    north, south, east, west = ROOM.door_sockets
    assert door_position(ROOM, (0, 0), north) == (1, 3)
    assert door_position(ROOM, (0, 0), south) == (1, -1)
    assert door_position(ROOM, (0, 0), east) == (4, 1)
    assert door_position(ROOM, (0, 0), west) == (-1, 1)


def test_door_position_follows_origin():
    north = ROOM.door_sockets[0]
    assert door_position(ROOM, (10, -5), north) == (11, -2)


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_origin_from_door_inverts_door_position(index):
    socket = ROOM.door_sockets[index]
    origin = (7, -3)
    door = door_position(ROOM, origin, socket)
    assert origin_from_door(ROOM, socket, door) == origin


def test_east_door_lines_up_west_socket():
    east, west = ROOM.door_sockets[2], ROOM.door_sockets[3]
    door = door_position(ROOM, (0, 0), east)
    origin = origin_from_door(ROOM, west, door)
    # One shared wall column between the two interiors
    assert origin == (5, 0)


def test_interior_cells():
    cells = list(interior_cells(ROOM, (2, 1)))
    assert len(cells) == 12
    assert (2, 1) in cells
    assert (5, 3) in cells
    assert (6, 1) not in cells


def test_bounds():
    assert interior_bounds(ROOM, (0, 0)) == (0, 0, 3, 2)
    assert expanded_bounds(ROOM, (0, 0)) == (-1, -1, 4, 3)


def test_room_footprint():
    poly = room_footprint(ROOM, (1, 2))
    assert isinstance(poly, Polygon)
    assert poly.bounds == (1.0, 2.0, 5.0, 5.0)
    assert poly.area == 12


def test_footprints_overlap():
    a = room_footprint(ROOM, (0, 0))
    assert footprints_overlap(a, room_footprint(ROOM, (2, 1))) is True
    assert footprints_overlap(a, room_footprint(ROOM, (10, 10))) is False


def test_touching_footprints_do_not_overlap():
    a = room_footprint(ROOM, (0, 0))
    assert footprints_overlap(a, room_footprint(ROOM, (4, 0))) is False
