"""
Purpose: Routing domain models.
What it does:
- RouteSummary / RouteResult: the one canonical shape both provider formats normalize into.
- RouteRequestState + RouteRequest: per-request trace of the primary/fallback protocol.
- RoutingError / MalformedRouteResponse.

Rule: No HTTP here. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

LngLat = Tuple[float, float]


class RoutingError(Exception):
    """Both routing attempts failed. `reason` is shown next to the triggering control."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class MalformedRouteResponse(Exception):
    """The provider answered 2xx but the body matches neither known shape."""
    pass


@dataclass(frozen=True)
class RouteSummary:
    distance_meters: float
    duration_seconds: float

    @property
    def distance_km(self) -> float:
        return round(self.distance_meters / 1000.0, 1)

    @property
    def duration_minutes(self) -> int:
        return int(round(self.duration_seconds / 60.0))


@dataclass(frozen=True)
class RouteResult:
    """
    geometry is always a GeoJSON FeatureCollection of LineString/MultiLineString features.
    summary is None when the provider gave neither a summary nor per-leg segments.
    """
    geometry: Dict[str, Any]
    summary: Optional[RouteSummary] = None

    @property
    def features(self) -> List[Dict[str, Any]]:
        return list(self.geometry.get("features") or [])


class RouteRequestState(Enum):
    IDLE = "IDLE"
    REQUESTING_PRIMARY = "REQUESTING_PRIMARY"
    REQUESTING_FALLBACK = "REQUESTING_FALLBACK"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


# legal transitions; anything else is a programming error
_TRANSITIONS = {
    RouteRequestState.IDLE: {RouteRequestState.REQUESTING_PRIMARY},
    RouteRequestState.REQUESTING_PRIMARY: {RouteRequestState.SUCCEEDED, RouteRequestState.REQUESTING_FALLBACK},
    RouteRequestState.REQUESTING_FALLBACK: {RouteRequestState.SUCCEEDED, RouteRequestState.FAILED},
    RouteRequestState.SUCCEEDED: set(),
    RouteRequestState.FAILED: set(),
}


@dataclass
class RouteRequest:
    """
    One route lookup: Idle -> Requesting(primary) -> {Success | Requesting(fallback) -> {Success | Failed}}.
    """
    coordinates: List[LngLat]
    state: RouteRequestState = RouteRequestState.IDLE
    attempts: int = 0
    errors: List[str] = field(default_factory=list)

    def advance(self, new_state: RouteRequestState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Invalid route request transition {self.state.value} -> {new_state.value}")
        if new_state in (RouteRequestState.REQUESTING_PRIMARY, RouteRequestState.REQUESTING_FALLBACK):
            self.attempts += 1
        self.state = new_state

    @property
    def finished(self) -> bool:
        return self.state in (RouteRequestState.SUCCEEDED, RouteRequestState.FAILED)
