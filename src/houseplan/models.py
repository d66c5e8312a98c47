# src/houseplan/models.py
from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class Edge(str, Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def opposite(self) -> Edge:
        return _OPPOSITE_EDGES[self]


_OPPOSITE_EDGES = {
    Edge.NORTH: Edge.SOUTH,
    Edge.SOUTH: Edge.NORTH,
    Edge.EAST: Edge.WEST,
    Edge.WEST: Edge.EAST,
}


class CellType(str, Enum):
    EMPTY = "empty"
    INTERIOR = "interior"
    WALL = "wall"
    DOOR = "door"


class FailureReason(str, Enum):
    VALIDATION_FAILED = "validation-failed"
    ROOT_DOES_NOT_FIT = "root-does-not-fit"
    STUCK_NO_PLACEMENT = "stuck-no-placement"
    EXHAUSTED_RETRIES = "exhausted-retries"


def _check_color(v: str) -> str:
    if not _HEX_COLOR.match(v):
        raise ValueError(f"color must be '#rrggbb', got {v!r}")
    return v.lower()


class DoorSocket(BaseModel):
    model_config = ConfigDict(frozen=True)

    edge: Edge
    offset: int = Field(ge=0, description="Cells from the room origin along the edge")


class RoomType(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_id: str = Field(alias="typeID", min_length=1)
    color: str = "#94a3b8"
    allowed_neighbor_type_ids: Optional[list[str]] = Field(
        default=None, alias="allowedNeighborTypeIDs"
    )
    order: int = 0

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)

    def allows(self, other_type_id: str) -> bool:
        """Check if a door from this type into ``other_type_id`` is permitted."""
        return other_type_id in (self.allowed_neighbor_type_ids or ())


class RoomPrefab(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_id: str = Field(alias="typeID", min_length=1)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    door_sockets: list[DoorSocket] = Field(default_factory=list, alias="doorSockets")

    @model_validator(mode="after")
    def check_sockets_on_edges(self) -> RoomPrefab:
        for socket in self.door_sockets:
            along = self.width if socket.edge in (Edge.NORTH, Edge.SOUTH) else self.height
            if socket.offset >= along:
                raise ValueError(
                    f"socket {socket.edge.value}{socket.offset} is off the "
                    f"{self.width}x{self.height} {self.type_id} prefab"
                )
        return self


class Point(BaseModel):
    x: int
    y: int


class PlacedRoom(BaseModel):
    room_id: str
    type_id: str
    origin: Point
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: str


class ConnectionRecord(BaseModel):
    source_room_id: str
    source_edge: Edge
    source_socket: int = Field(ge=0)
    target_room_id: str
    target_edge: Edge
    target_socket: int = Field(ge=0)
    door: Point


class LayoutMeta(BaseModel):
    seed: Optional[int] = None
    attempts: int = Field(ge=1)
    grid_width: int = Field(gt=0)
    grid_height: int = Field(gt=0)


class PlacedLayout(BaseModel):
    meta: LayoutMeta
    rooms: list[PlacedRoom]
    connections: list[ConnectionRecord] = Field(default_factory=list)

    def type_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for room in self.rooms:
            counts[room.type_id] = counts.get(room.type_id, 0) + 1
        return counts
