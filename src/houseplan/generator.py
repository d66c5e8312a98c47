# src/houseplan/generator.py
"""House layout generator: socket-driven frontier expansion with whole-layout retries."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

import numpy as np

from houseplan.adjacency import can_connect, edges_meet, reachable_neighbor_types
from houseplan.catalog import DEFAULT_CATALOG, RoomCatalog
from houseplan.errors import GenerationFailure
from houseplan.geometry import Cell, door_position, origin_from_door
from houseplan.grid import GridStore
from houseplan.models import (
    ConnectionRecord,
    DoorSocket,
    FailureReason,
    LayoutMeta,
    PlacedLayout,
    PlacedRoom,
    Point,
    RoomPrefab,
    RoomType,
)
from houseplan.placement import (
    bake_walls,
    can_place_room,
    mark_door_sockets,
    place_room,
    remove_unused_door_sockets,
)

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Configuration for the layout generator."""

    grid_width: int = 80
    grid_height: int = 60
    max_attempts: int = 10
    seed: Optional[int] = 42
    door_color: str = "#f59e0b"
    socket_color: str = "#fcd34d"
    wall_color: str = "#4b5563"
    empty_color: str = "#ffffff"


@dataclass(frozen=True)
class RoomInstance:
    """A concrete room: one prefab of one type, with a per-run identifier."""

    room_id: str
    room_type: RoomType
    prefab: RoomPrefab

    @property
    def type_id(self) -> str:
        return self.room_type.type_id

    @property
    def color(self) -> str:
        return self.room_type.color

    @property
    def width(self) -> int:
        return self.prefab.width

    @property
    def height(self) -> int:
        return self.prefab.height

    @property
    def door_sockets(self) -> list[DoorSocket]:
        return self.prefab.door_sockets


@dataclass
class PlacedRoomRecord:
    room: RoomInstance
    origin: Cell
    used_sockets: set[int] = field(default_factory=set)

    def open_sockets(self) -> list[tuple[int, DoorSocket]]:
        return [
            (i, s) for i, s in enumerate(self.room.door_sockets)
            if i not in self.used_sockets
        ]

    def door_cell(self, socket: DoorSocket) -> Cell:
        return door_position(self.room, self.origin, socket)


@dataclass(frozen=True)
class AvailableDoor:
    """An unused socket on a placed room, with its world door cell."""

    record: PlacedRoomRecord = field(compare=False)
    socket_index: int
    socket: DoorSocket
    position: Cell


@dataclass(frozen=True)
class Placement:
    door: AvailableDoor
    target_socket_index: int
    origin: Cell


@dataclass
class GenerationResult:
    layout: PlacedLayout
    grid: GridStore
    records: list[PlacedRoomRecord]
    attempts: int


@dataclass
class _AttemptState:
    grid: GridStore
    remaining: dict[str, int]
    records: dict[str, PlacedRoomRecord] = field(default_factory=dict)
    connections: list[ConnectionRecord] = field(default_factory=list)
    confirmed_doors: set[Cell] = field(default_factory=set)
    next_id: int = 1


RoomPlacedCallback = Callable[[PlacedRoomRecord], None]


class LayoutGenerator:
    """Builds connected, non-overlapping room layouts on a fixed grid.

    Each attempt seeds the layout with a root room and keeps attaching
    compatible rooms to open door sockets until the requested counts are
    met exactly. A dead end throws the whole attempt away; there is no
    partial backtracking.
    """

    def __init__(
        self,
        catalog: RoomCatalog = DEFAULT_CATALOG,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or GeneratorConfig()
        if self.config.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.seed = None if rng is not None else self.config.seed
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    def generate(
        self,
        required_counts: Mapping[str, int],
        on_room_placed: Optional[RoomPlacedCallback] = None,
    ) -> GenerationResult:
        """Generate a layout with exactly ``required_counts`` rooms per type.

        Raises GenerationFailure with VALIDATION_FAILED straight away for a bad
        catalog or request, and with EXHAUSTED_RETRIES once every attempt has
        hit a dead end.
        """
        cfg = self.config
        self.catalog.validate(required_counts)
        counts = {t: int(c) for t, c in required_counts.items() if c > 0}
        # The seed only reproduces the first run; later runs continue the stream.
        seed = self.seed
        self.seed = None
        logger.info(f"Generating layout for {counts} on a {cfg.grid_width}x{cfg.grid_height} grid")

        attempt_reasons: list[FailureReason] = []
        for attempt in range(1, cfg.max_attempts + 1):
            state = _AttemptState(
                grid=GridStore(cfg.grid_width, cfg.grid_height, cfg.empty_color),
                remaining=dict(counts),
            )
            logger.debug(f"Attempt {attempt}/{cfg.max_attempts}")
            try:
                self._run_attempt(state, on_room_placed)
            except GenerationFailure as exc:
                logger.warning(f"Attempt {attempt} abandoned: {exc}")
                attempt_reasons.append(exc.reason)
                continue

            self._finalize(state)
            logger.info(
                f"Generation complete after {attempt} attempt(s): "
                f"{len(state.records)} rooms, {len(state.connections)} doors"
            )
            return GenerationResult(
                layout=self._build_layout(state, attempt, seed),
                grid=state.grid,
                records=list(state.records.values()),
                attempts=attempt,
            )

        logger.error(f"No layout found after {cfg.max_attempts} attempts")
        raise GenerationFailure(
            FailureReason.EXHAUSTED_RETRIES,
            f"generation did not succeed after {cfg.max_attempts} attempts",
            attempt_reasons,
        )

    # ------------------------------------------------------------------ #
    # One attempt
    # ------------------------------------------------------------------ #

    def _run_attempt(
        self, state: _AttemptState, on_room_placed: Optional[RoomPlacedCallback]
    ) -> None:
        root_type = self._pick_root_type(state.remaining)
        prefabs = self.catalog.prefabs_for_type(root_type.type_id)
        root = self._instantiate(state, prefabs[int(self.rng.integers(0, len(prefabs)))])

        if not can_place_room(state.grid, root, (0, 0)):
            raise GenerationFailure(
                FailureReason.ROOT_DOES_NOT_FIT,
                f"root room {root.room_id} ({root.width}x{root.height}) does not fit the grid",
            )
        self._commit(state, root, (0, 0), None, on_room_placed)

        while any(state.remaining.values()):
            if not self._expand_frontier(state, on_room_placed):
                missing = {t: n for t, n in state.remaining.items() if n > 0}
                raise GenerationFailure(
                    FailureReason.STUCK_NO_PLACEMENT,
                    f"no reachable room fits anywhere; still missing {missing}",
                )

    def _pick_root_type(self, remaining: Mapping[str, int]) -> RoomType:
        """Pick uniformly among the lowest-order requested types."""
        requested = [t for t in self.catalog.list_types() if remaining.get(t.type_id, 0) > 0]
        lowest = min(t.order for t in requested)
        candidates = [t for t in requested if t.order == lowest]
        return candidates[int(self.rng.integers(0, len(candidates)))]

    def _expand_frontier(
        self, state: _AttemptState, on_room_placed: Optional[RoomPlacedCallback]
    ) -> bool:
        """Attach one room to the frontier. Returns False when nothing fits."""
        doors = self.collect_available_doors(state.records.values())
        reachable = reachable_neighbor_types(
            d.record.room.room_type for d in doors
        )

        for prefab in self._candidate_prefabs(state.remaining, reachable):
            room = self._instantiate(state, prefab)
            placement = self.find_placement_for_room(state.grid, room, doors)
            if placement is not None:
                self._commit(state, room, placement.origin, placement, on_room_placed)
                return True
        return False

    def _candidate_prefabs(
        self, remaining: Mapping[str, int], reachable: set[str]
    ) -> list[RoomPrefab]:
        """Prefabs of still-needed reachable types, lowest order first.

        Prefabs sharing an order are shuffled together.
        """
        groups: dict[int, list[RoomPrefab]] = {}
        for type_id, count in remaining.items():
            if count <= 0 or type_id not in reachable:
                continue
            order = self.catalog.get_type(type_id).order
            groups.setdefault(order, []).extend(self.catalog.prefabs_for_type(type_id))

        ordered: list[RoomPrefab] = []
        for order in sorted(groups):
            group = groups[order]
            ordered.extend(group[int(i)] for i in self.rng.permutation(len(group)))
        return ordered

    # ------------------------------------------------------------------ #
    # Frontier and placement search
    # ------------------------------------------------------------------ #

    def collect_available_doors(self, records) -> list[AvailableDoor]:
        """Every unused socket across the placed rooms, in shuffled order."""
        doors = [
            AvailableDoor(
                record=record,
                socket_index=index,
                socket=socket,
                position=record.door_cell(socket),
            )
            for record in records
            for index, socket in record.open_sockets()
        ]
        return [doors[int(i)] for i in self.rng.permutation(len(doors))]

    def find_placement_for_room(
        self, grid: GridStore, room: RoomInstance, doors: list[AvailableDoor]
    ) -> Optional[Placement]:
        """First door/socket pairing that puts ``room`` down without collisions.

        The source and target types must accept each other, and the target
        socket must sit on the edge opposite the source socket so the rooms
        meet flush across the door cell.
        """
        sockets = list(enumerate(room.door_sockets))
        socket_order = [sockets[int(i)] for i in self.rng.permutation(len(sockets))]

        for door in doors:
            if not can_connect(door.record.room.room_type, room.room_type):
                continue
            for index, socket in socket_order:
                if not edges_meet(door.socket.edge, socket.edge):
                    continue
                origin = origin_from_door(room, socket, door.position)
                if can_place_room(grid, room, origin, door.position):
                    return Placement(door=door, target_socket_index=index, origin=origin)
        return None

    # ------------------------------------------------------------------ #
    # Bookkeeping
    # ------------------------------------------------------------------ #

    def _instantiate(self, state: _AttemptState, prefab: RoomPrefab) -> RoomInstance:
        room_type = self.catalog.get_type(prefab.type_id)
        return RoomInstance(
            room_id=f"{room_type.type_id}-{state.next_id}",
            room_type=room_type,
            prefab=prefab,
        )

    def _commit(
        self,
        state: _AttemptState,
        room: RoomInstance,
        origin: Cell,
        placement: Optional[Placement],
        on_room_placed: Optional[RoomPlacedCallback],
    ) -> None:
        cfg = self.config
        record = PlacedRoomRecord(room=room, origin=origin)

        if placement is None:
            place_room(state.grid, room, origin, room.color)
            logger.debug(f"Placed root room {room.room_id} at {origin}")
        else:
            source = placement.door
            source.record.used_sockets.add(source.socket_index)
            record.used_sockets.add(placement.target_socket_index)
            place_room(
                state.grid, room, origin, room.color,
                door=source.position, door_color=cfg.door_color,
            )
            state.confirmed_doors.add(source.position)
            target_socket = room.door_sockets[placement.target_socket_index]
            state.connections.append(
                ConnectionRecord(
                    source_room_id=source.record.room.room_id,
                    source_edge=source.socket.edge,
                    source_socket=source.socket_index,
                    target_room_id=room.room_id,
                    target_edge=target_socket.edge,
                    target_socket=placement.target_socket_index,
                    door=Point(x=source.position[0], y=source.position[1]),
                )
            )
            logger.debug(
                f"Connected {room.room_id} to {source.record.room.room_id} using sockets "
                f"{source.socket_index}->{placement.target_socket_index} at {source.position}"
            )

        state.records[room.room_id] = record
        state.remaining[room.type_id] -= 1
        state.next_id += 1
        mark_door_sockets(
            state.grid,
            (record.door_cell(s) for _, s in record.open_sockets()),
            cfg.socket_color,
        )

        if on_room_placed is not None:
            on_room_placed(record)

    def _finalize(self, state: _AttemptState) -> None:
        removed = remove_unused_door_sockets(state.grid, state.confirmed_doors)
        logger.debug(f"Removed {removed} unused door sockets")
        bake_walls(
            state.grid,
            ((r.room, r.origin) for r in state.records.values()),
            self.config.wall_color,
        )

    def _build_layout(
        self, state: _AttemptState, attempts: int, seed: Optional[int]
    ) -> PlacedLayout:
        cfg = self.config
        rooms = [
            PlacedRoom(
                room_id=r.room.room_id,
                type_id=r.room.type_id,
                origin=Point(x=r.origin[0], y=r.origin[1]),
                width=r.room.width,
                height=r.room.height,
                color=r.room.color,
            )
            for r in state.records.values()
        ]
        meta = LayoutMeta(
            seed=seed,
            attempts=attempts,
            grid_width=cfg.grid_width,
            grid_height=cfg.grid_height,
        )
        return PlacedLayout(meta=meta, rooms=rooms, connections=list(state.connections))
