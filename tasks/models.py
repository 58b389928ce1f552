"""
Purpose: Domain models for the Tasks capability.
What it does:
- Defines the canonical Task record every other module consumes
  (id, name, coordinates, time slot, kind, assigned driver name).
- Defines TaskKind = PICK | DROP | OTHER.

Rule: No HTTP calls, no ledger logic. Models only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

LatLng = Tuple[float, float]
LngLat = Tuple[float, float]


class TaskKind(str, Enum):
    PICK = "pick"
    DROP = "drop"
    OTHER = "other"

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional[TaskKind]:
        """
        'Pick', 'pickup', 'PICK UP' -> PICK; anything with 'drop' -> DROP;
        other non-empty text -> OTHER; empty -> None.
        """
        value = (text or "").strip().lower()
        if not value:
            return None
        if "pick" in value:
            return cls.PICK
        if "drop" in value:
            return cls.DROP
        return cls.OTHER


@dataclass
class Task:
    """
    A single pickup/drop stop loaded from the task store.

    assigned_driver_name is a projection of ledger ownership; only the
    assignment ledger writes it after the initial load.
    """

    id: str
    name: str
    lat: float
    lng: float
    time_slot: Optional[str] = None
    kind: Optional[TaskKind] = None
    raw_type: Optional[str] = None  # original text, shown in popups
    assigned_driver_name: Optional[str] = None

    @property
    def position(self) -> LatLng:
        return (self.lat, self.lng)

    @property
    def lng_lat(self) -> LngLat:
        # routing providers want [lng, lat]
        return (self.lng, self.lat)

    def has_finite_coordinates(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)

    @property
    def is_pick(self) -> bool:
        return self.kind == TaskKind.PICK
