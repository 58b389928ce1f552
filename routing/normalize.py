"""
Purpose: Turn either routing-provider response shape into one RouteResult.
What it does:
- classify_response() tags a decoded body as one of two variants:
    GeoJsonRouteResponse  -> {"type": "FeatureCollection", "features": [...]}
    JsonRouteResponse     -> {"routes": [{"geometry": ..., "summary": ..., "segments": [...]}]}
- normalize_route_response() is the single place both variants become a RouteResult.
  Callers never branch on the shape themselves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .models import MalformedRouteResponse, RouteResult, RouteSummary

LINE_TYPES = ("LineString", "MultiLineString")

# openrouteservice encodes plain-JSON geometries as polyline with 5 decimals
POLYLINE_PRECISION = 5


@dataclass(frozen=True)
class GeoJsonRouteResponse:
    payload: Dict[str, Any]


@dataclass(frozen=True)
class JsonRouteResponse:
    route: Dict[str, Any]


ProviderResponse = Union[GeoJsonRouteResponse, JsonRouteResponse]


def classify_response(body: Any) -> ProviderResponse:
    if not isinstance(body, dict):
        raise MalformedRouteResponse("Unexpected routing response format")

    if body.get("type") == "FeatureCollection" and isinstance(body.get("features"), list):
        return GeoJsonRouteResponse(body)

    routes = body.get("routes")
    if isinstance(routes, list) and routes and isinstance(routes[0], dict):
        return JsonRouteResponse(routes[0])

    raise MalformedRouteResponse("Unexpected routing response format")


def normalize_route_response(body: Any) -> RouteResult:
    response = classify_response(body)

    if isinstance(response, GeoJsonRouteResponse):
        features = response.payload["features"]
        first = features[0] if features else {}
        if not isinstance(first, dict):
            raise MalformedRouteResponse("Unexpected routing feature format")
        properties = first.get("properties")
        if properties is None:
            properties = {}
        elif not isinstance(properties, dict):
            raise MalformedRouteResponse("Unexpected routing feature properties")
        summary = read_summary(properties.get("summary"), properties.get("segments"))
        return RouteResult(geometry=response.payload, summary=summary)

    route = response.route
    geometry = coerce_geometry(route.get("geometry"))
    summary = read_summary(route.get("summary"), route.get("segments"))
    feature = {
        "type": "Feature",
        "properties": {"summary": route.get("summary")},
        "geometry": geometry,
    }
    return RouteResult(
        geometry={"type": "FeatureCollection", "features": [feature]},
        summary=summary,
    )


def read_summary(summary: Any, segments: Any) -> Optional[RouteSummary]:
    """
    Top-level summary wins; otherwise add up per-leg segments; otherwise None.
    """
    if isinstance(summary, dict):
        return RouteSummary(
            distance_meters=_as_float(summary.get("distance")),
            duration_seconds=_as_float(summary.get("duration")),
        )

    if isinstance(segments, list):
        distance = 0.0
        duration = 0.0
        for segment in segments:
            if not isinstance(segment, dict):
                continue
            distance += _as_float(segment.get("distance"))
            duration += _as_float(segment.get("duration"))
        return RouteSummary(distance_meters=distance, duration_seconds=duration)

    return None


def coerce_geometry(geometry: Any) -> Dict[str, Any]:
    """
    Accept a GeoJSON line geometry as-is, or decode an encoded polyline into a LineString.
    """
    if isinstance(geometry, dict):
        if geometry.get("type") in LINE_TYPES and isinstance(geometry.get("coordinates"), list):
            return geometry
        raise MalformedRouteResponse(f"Unsupported route geometry type: {geometry.get('type')}")

    if isinstance(geometry, str):
        coordinates = decode_polyline(geometry, POLYLINE_PRECISION)
        if len(coordinates) >= 2:
            return {"type": "LineString", "coordinates": coordinates}

    raise MalformedRouteResponse("Route has no usable geometry")


def decode_polyline(encoded: str, precision: int = POLYLINE_PRECISION) -> List[List[float]]:
    """
    Decode an encoded polyline into [lng, lat] pairs. Invalid input decodes to [].
    """
    if not encoded:
        return []

    coords: List[List[float]] = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded)
    factor = float(10 ** precision)

    def next_value() -> int:
        nonlocal index
        result = 0
        shift = 0
        while True:
            if index >= length:
                raise ValueError("Invalid polyline encoding")
            b = ord(encoded[index]) - 63
            index += 1
            result |= (b & 0x1F) << shift
            shift += 5
            if b < 0x20:
                break
        if result & 1:
            return ~(result >> 1)
        return result >> 1

    try:
        while index < length:
            lat += next_value()
            lng += next_value()
            coords.append([lng / factor, lat / factor])
    except ValueError:
        return []

    return coords


def _as_float(value: Any) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
