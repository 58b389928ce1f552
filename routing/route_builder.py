"""
Purpose: The Route Request Builder.
What it does:
- Resolves the fixed origin ("home base"): an explicit override, then the
  configured HOME_BASE_LAT/LNG, then a named facility point, then a hard-coded fallback.
- build_coordinates(driver_id): origin -> driver's tasks in ledger order -> origin,
  as [lng, lat] pairs. Tasks that are gone from the catalog or lack finite
  coordinates are skipped.

Rule: No HTTP. Produces input for routing/ors_client.py only.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .models import LngLat

if TYPE_CHECKING:
    from assignment.ledger import AssignmentLedger
    from tasks.catalog import TaskCatalog

logger = logging.getLogger(__name__)

# (lat, lng) of the laundry, used when nothing else is configured
FALLBACK_HOME_BASE_LATLNG = (12.935, 77.614)


def find_named_point(facilities: Optional[Dict[str, Any]], name: str) -> Optional[LngLat]:
    """
    Look up a Point feature by its properties.name (case-insensitive) in a GeoJSON FeatureCollection.
    """
    if not isinstance(facilities, dict):
        return None
    wanted = (name or "").strip().lower()
    for feature in facilities.get("features") or []:
        if not isinstance(feature, dict):
            continue
        properties = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        if str(properties.get("name") or "").lower() != wanted:
            continue
        coordinates = geometry.get("coordinates")
        if geometry.get("type") == "Point" and isinstance(coordinates, list) and len(coordinates) >= 2:
            return (float(coordinates[0]), float(coordinates[1]))
    return None


def resolve_home_base(
    home_base_lat: Optional[float] = None,
    home_base_lng: Optional[float] = None,
    facilities: Optional[Dict[str, Any]] = None,
    home_base_name: str = "laundry",
) -> LngLat:
    if home_base_lat is not None and home_base_lng is not None:
        return (float(home_base_lng), float(home_base_lat))

    point = find_named_point(facilities, home_base_name)
    if point is not None:
        return point

    lat, lng = FALLBACK_HOME_BASE_LATLNG
    return (lng, lat)


def has_route_stops(coordinates: List[LngLat]) -> bool:
    """
    False means "nothing to route": show an empty state, do not call the provider.
    """
    return len(coordinates) > 2


class RouteRequestBuilder:
    def __init__(self, catalog: TaskCatalog, ledger: AssignmentLedger, home_base: LngLat):
        self.catalog = catalog
        self.ledger = ledger
        self.home_base = home_base
        self._origin_override: Optional[LngLat] = None

    @classmethod
    def from_settings(
        cls,
        catalog: TaskCatalog,
        ledger: AssignmentLedger,
        settings,
        facilities: Optional[Dict[str, Any]] = None,
    ) -> RouteRequestBuilder:
        home_base = resolve_home_base(
            settings.home_base_lat,
            settings.home_base_lng,
            facilities,
            settings.home_base_name,
        )
        return cls(catalog, ledger, home_base)

    @property
    def origin(self) -> LngLat:
        return self._origin_override or self.home_base

    def set_origin(self, lng: float, lat: float) -> None:
        if not (math.isfinite(lng) and math.isfinite(lat)):
            raise ValueError("Origin must have finite coordinates")
        self._origin_override = (float(lng), float(lat))
        logger.info(f"Route origin set to {lat:.6f}, {lng:.6f}")

    def reset_origin(self) -> None:
        self._origin_override = None

    def waypoints(self, driver_id: str) -> List[LngLat]:
        points: List[LngLat] = []
        for task_id in self.ledger.sequence(driver_id):
            task = self.catalog.by_id(task_id)
            if task is None or not task.has_finite_coordinates():
                continue
            points.append(task.lng_lat)
        return points

    def build_coordinates(self, driver_id: str) -> List[LngLat]:
        start = self.origin
        return [start, *self.waypoints(driver_id), start]
