# src/houseplan/catalog.py
"""Room catalog: room types, their prefabs, and requested-count helpers."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

import numpy as np

from houseplan.errors import GenerationFailure
from houseplan.models import DoorSocket, Edge, FailureReason, RoomPrefab, RoomType

logger = logging.getLogger(__name__)


class RoomCatalog:
    """Immutable set of room types and the prefabs that realise them."""

    def __init__(self, types: list[RoomType], prefabs: list[RoomPrefab]) -> None:
        self._types: dict[str, RoomType] = {}
        for room_type in types:
            if room_type.type_id in self._types:
                raise ValueError(f"duplicate room type {room_type.type_id!r}")
            self._types[room_type.type_id] = room_type

        self._prefabs: dict[str, list[RoomPrefab]] = {}
        for prefab in prefabs:
            self._prefabs.setdefault(prefab.type_id, []).append(prefab)

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dict(cls, types_doc: Any, pool_doc: Any) -> RoomCatalog:
        """Build a catalog from ``RoomTypes.json`` / ``RoomPool.json`` documents.

        Both documents may be given either wrapped (``{"roomTypes": [...]}``,
        ``{"rooms": [...]}``) or as bare lists.
        """
        raw_types = types_doc.get("roomTypes", []) if isinstance(types_doc, dict) else types_doc
        raw_rooms = pool_doc.get("rooms", []) if isinstance(pool_doc, dict) else pool_doc
        types = [RoomType.model_validate(t) for t in raw_types]
        prefabs = [RoomPrefab.model_validate(r) for r in raw_rooms]
        return cls(types, prefabs)

    @classmethod
    def from_json_files(
        cls, types_path: Union[str, Path], pool_path: Union[str, Path]
    ) -> RoomCatalog:
        types_doc = json.loads(Path(types_path).read_text())
        pool_doc = json.loads(Path(pool_path).read_text())
        return cls.from_dict(types_doc, pool_doc)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_types(self) -> list[RoomType]:
        return list(self._types.values())

    def get_type(self, type_id: str) -> RoomType:
        return self._types[type_id]

    def has_type(self, type_id: str) -> bool:
        return type_id in self._types

    def prefabs_for_type(self, type_id: str) -> list[RoomPrefab]:
        return list(self._prefabs.get(type_id, []))

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, required_counts: Mapping[str, int]) -> None:
        """Reject catalogs and requests that generation cannot work with.

        Raises GenerationFailure(VALIDATION_FAILED) listing every problem.
        """
        issues: list[str] = []

        for room_type in self._types.values():
            if room_type.allowed_neighbor_type_ids is None:
                issues.append(f"{room_type.type_id} has no neighbor definitions.")

        for type_id, count in required_counts.items():
            if not isinstance(count, (int, np.integer)) or isinstance(count, bool):
                issues.append(f"{type_id} count must be an integer, got {count!r}.")
                continue
            if count < 0:
                issues.append(f"{type_id} count must not be negative.")
                continue
            if count == 0:
                continue
            if type_id not in self._types:
                issues.append(f"{type_id} is not a known room type.")
            elif not self._prefabs.get(type_id):
                issues.append(f"{type_id} has no prefabs in the room pool.")

        if not any(
            isinstance(c, (int, np.integer)) and not isinstance(c, bool) and c > 0
            for c in required_counts.values()
        ):
            issues.append("At least one room type must have a positive count.")

        if issues:
            for issue in issues:
                logger.error(issue)
            raise GenerationFailure(FailureReason.VALIDATION_FAILED, " ".join(issues))


def pick_counts(
    ranges: Mapping[str, tuple[int, int]], rng: np.random.Generator
) -> dict[str, int]:
    """Draw a required count for each type uniformly from its [min, max] range."""
    issues = []
    for type_id, (lo, hi) in ranges.items():
        if lo < 0 or hi < 0:
            issues.append(f"{type_id} has a negative bound.")
        elif lo > hi:
            issues.append(f"{type_id} has min > max.")
    if issues:
        raise GenerationFailure(FailureReason.VALIDATION_FAILED, " ".join(issues))

    return {type_id: int(rng.integers(lo, hi + 1)) for type_id, (lo, hi) in ranges.items()}


# ---------------------------------------------------------------------- #
# Built-in catalog
# ---------------------------------------------------------------------- #


def _sockets(*specs: str) -> list[DoorSocket]:
    return [DoorSocket(edge=Edge(s[0]), offset=int(s[1:])) for s in specs]


_DEFAULT_TYPES: list[RoomType] = [
    RoomType(
        type_id="Hall", color="#e2e8f0", order=0,
        allowed_neighbor_type_ids=["Corridor", "LivingRoom", "Kitchen", "Bathroom", "Storage"],
    ),
    RoomType(
        type_id="Corridor", color="#cbd5e1", order=1,
        allowed_neighbor_type_ids=["Hall", "Corridor", "Bedroom", "Bathroom", "Storage"],
    ),
    RoomType(
        type_id="LivingRoom", color="#bfdbfe", order=2,
        allowed_neighbor_type_ids=["Hall", "Kitchen", "Bedroom"],
    ),
    RoomType(
        type_id="Kitchen", color="#fde68a", order=2,
        allowed_neighbor_type_ids=["Hall", "LivingRoom", "Storage"],
    ),
    RoomType(
        type_id="Bedroom", color="#ddd6fe", order=3,
        allowed_neighbor_type_ids=["Corridor", "LivingRoom", "Bathroom"],
    ),
    RoomType(
        type_id="Bathroom", color="#a5f3fc", order=4,
        allowed_neighbor_type_ids=["Hall", "Corridor", "Bedroom"],
    ),
    RoomType(
        type_id="Storage", color="#e7e5e4", order=5,
        allowed_neighbor_type_ids=["Hall", "Corridor", "Kitchen"],
    ),
]

_DEFAULT_PREFABS: list[RoomPrefab] = [
    RoomPrefab(type_id="Hall", width=4, height=4, door_sockets=_sockets("N1", "S2", "E1", "W2", "N3", "E3")),
    RoomPrefab(type_id="Hall", width=5, height=3, door_sockets=_sockets("N1", "N3", "S2", "E1", "W1")),
    RoomPrefab(type_id="Corridor", width=2, height=8, door_sockets=_sockets("N0", "S1", "E2", "E6", "W1", "W5")),
    RoomPrefab(type_id="Corridor", width=8, height=2, door_sockets=_sockets("N2", "N6", "S1", "S5", "E0", "W1")),
    RoomPrefab(type_id="LivingRoom", width=7, height=5, door_sockets=_sockets("N3", "S1", "E2", "W2")),
    RoomPrefab(type_id="LivingRoom", width=6, height=6, door_sockets=_sockets("N2", "S3", "E4", "W1")),
    RoomPrefab(type_id="Kitchen", width=4, height=5, door_sockets=_sockets("N1", "S2", "E2", "W3")),
    RoomPrefab(type_id="Kitchen", width=5, height=4, door_sockets=_sockets("N2", "S1", "W1")),
    RoomPrefab(type_id="Bedroom", width=5, height=5, door_sockets=_sockets("N2", "S2", "E2", "W2")),
    RoomPrefab(type_id="Bedroom", width=6, height=4, door_sockets=_sockets("N1", "S4", "W1")),
    RoomPrefab(type_id="Bathroom", width=3, height=3, door_sockets=_sockets("N1", "S1", "E1", "W1")),
    RoomPrefab(type_id="Storage", width=2, height=2, door_sockets=_sockets("N0", "S1", "E0", "W1")),
]

DEFAULT_CATALOG = RoomCatalog(_DEFAULT_TYPES, _DEFAULT_PREFABS)
