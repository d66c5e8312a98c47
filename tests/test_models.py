import pytest
from pydantic import ValidationError

from houseplan.models import (
    ConnectionRecord, DoorSocket, Edge, LayoutMeta, PlacedLayout, PlacedRoom,
    Point, RoomPrefab, RoomType,
)


def test_edge_opposites():
    assert Edge.NORTH.opposite == Edge.SOUTH
    assert Edge.SOUTH.opposite == Edge.NORTH
    assert Edge.EAST.opposite == Edge.WEST
    assert Edge.WEST.opposite == Edge.EAST


def test_door_socket_from_letter():
    s = DoorSocket(edge="N", offset=1)
    assert s.edge == Edge.NORTH
    assert s.offset == 1


def test_door_socket_negative_offset_rejected():
    with pytest.raises(ValidationError):
        DoorSocket(edge="E", offset=-1)


def test_room_type_from_catalog_document():
    t = RoomType.model_validate({
        "typeID": "Kitchen",
        "color": "#FDE68A",
        "allowedNeighborTypeIDs": ["Hall"],
        "order": 2,
    })
    assert t.type_id == "Kitchen"
    assert t.color == "#fde68a"
    assert t.allows("Hall")
    assert not t.allows("Bedroom")
    assert t.order == 2


def test_room_type_without_neighbor_list():
    t = RoomType.model_validate({"typeID": "Attic"})
    assert t.allowed_neighbor_type_ids is None
    assert not t.allows("Hall")


def test_room_type_invalid_color_rejected():
    with pytest.raises(ValidationError):
        RoomType(type_id="Hall", color="blue", allowed_neighbor_type_ids=[])


def test_prefab_from_pool_document():
    p = RoomPrefab.model_validate({
        "typeID": "Room", "width": 4, "height": 3,
        "doorSockets": [{"edge": "N", "offset": 1}, {"edge": "W", "offset": 2}],
    })
    assert p.width == 4
    assert [s.edge for s in p.door_sockets] == [Edge.NORTH, Edge.WEST]


def test_prefab_socket_off_edge_rejected():
    with pytest.raises(ValidationError):
        RoomPrefab(type_id="Room", width=3, height=3,
                   door_sockets=[DoorSocket(edge=Edge.NORTH, offset=3)])
    with pytest.raises(ValidationError):
        RoomPrefab(type_id="Room", width=5, height=2,
                   door_sockets=[DoorSocket(edge=Edge.EAST, offset=2)])


def test_prefab_zero_size_rejected():
    with pytest.raises(ValidationError):
        RoomPrefab(type_id="Room", width=0, height=3)


def test_layout_roundtrip_json():
    layout = PlacedLayout(
        meta=LayoutMeta(seed=7, attempts=1, grid_width=40, grid_height=30),
        rooms=[
            PlacedRoom(room_id="Hall-1", type_id="Hall", origin=Point(x=0, y=0),
                       width=3, height=3, color="#e2e8f0"),
            PlacedRoom(room_id="Room-2", type_id="Room", origin=Point(x=4, y=0),
                       width=4, height=3, color="#bfdbfe"),
        ],
        connections=[
            ConnectionRecord(
                source_room_id="Hall-1", source_edge=Edge.EAST, source_socket=2,
                target_room_id="Room-2", target_edge=Edge.WEST, target_socket=3,
                door=Point(x=3, y=1),
            )
        ],
    )
    restored = PlacedLayout.model_validate_json(layout.model_dump_json())
    assert restored == layout
    assert restored.connections[0].target_edge == Edge.WEST
    assert restored.type_counts() == {"Hall": 1, "Room": 1}
