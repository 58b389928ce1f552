#Purpose: The routing provider "adapter/client" (openrouteservice directions).
#Sole responsibility: talk to the provider via HTTP and return a normalized RouteResult.
#Encapsulates provider-specific details:
#coordinate formatting ([lng,lat])
#URL construction (/v2/directions/{profile}[/geojson])
#the primary -> fallback attempt protocol
#parsing either response shape (routing/normalize.py)
#It should not contain ledger rules or waypoint ordering.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from .models import (
    LngLat,
    MalformedRouteResponse,
    RouteRequest,
    RouteRequestState,
    RouteResult,
    RoutingError,
)
from .normalize import normalize_route_response

logger = logging.getLogger(__name__)


class RoutingClient:
    """
    Routing Adapter / Client

    Every lookup makes at most two attempts:
    1. POST .../geojson asking for application/geo+json
    2. on transport error, non-2xx or malformed body: POST ... asking for application/json
    No loop beyond that; a second failure is raised as RoutingError.
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str] = None,
        profile: str = "driving-car",
        timeout: float = 15.0,
        session: Optional[Any] = None,
    ):
        if not base_url:
            raise ValueError("Routing base URL not set. Please set ORS_BASE_URL in the .env file.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.profile = profile
        self.timeout = timeout #seconds to wait for the provider before giving up on an attempt
        self.session = session or requests.Session()
        self.last_request: Optional[RouteRequest] = None

    @classmethod
    def from_settings(cls, settings, session: Optional[Any] = None) -> RoutingClient:
        return cls(
            base_url=settings.ors_base_url,
            api_key=settings.ors_api_key,
            profile=settings.ors_profile,
            timeout=settings.routing_timeout,
            session=session,
        )

        #----------------
        # Internal helper methods for URL construction, payloads, attempts
        #----------------
    def primary_url(self) -> str:
        return f"{self.base_url}/v2/directions/{self.profile}/geojson"

    def fallback_url(self) -> str:
        return f"{self.base_url}/v2/directions/{self.profile}"

    def build_payload(self, coordinates: Sequence[LngLat]) -> Dict[str, Any]:
        return {
            "coordinates": [[float(lng), float(lat)] for lng, lat in coordinates],
            "preference": "fastest",
            "units": "m",
            "instructions": False,
        }

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": accept}
        if self.api_key:
            headers["Authorization"] = self.api_key
        return headers

    def _attempt(self, url: str, accept: str, payload: Dict[str, Any]) -> RouteResult:
        """
        One POST. Any failure comes back as an exception with a readable message.
        """
        response = self.session.post(
            url,
            json=payload,
            headers=self._headers(accept),
            timeout=self.timeout,
        )
        if not 200 <= response.status_code < 300:
            raise RoutingError(f"POST {url} {response.status_code}: {response.text}")
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedRouteResponse(f"POST {url} returned invalid JSON") from exc
        return normalize_route_response(body)

        #----------------
        # Public methods
        #----------------
    def route(self, coordinates: Sequence[LngLat]) -> RouteResult:
        """
        Multi-stop route through the coordinates in the given order.

        Returns:
            RouteResult(geometry=FeatureCollection, summary=RouteSummary | None)
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")
        return self._request(list(coordinates))

    def route_leg(self, origin: LngLat, destination: LngLat) -> RouteResult:
        """
        Point-to-point lookup (quick single-task ETA) with the same two-attempt protocol.
        """
        return self._request([origin, destination])

    def _request(self, coordinates: List[LngLat]) -> RouteResult:
        request = RouteRequest(coordinates=coordinates)
        self.last_request = request
        payload = self.build_payload(coordinates)

        request.advance(RouteRequestState.REQUESTING_PRIMARY)
        try:
            result = self._attempt(self.primary_url(), "application/geo+json", payload)
            request.advance(RouteRequestState.SUCCEEDED)
            return result
        except (requests.RequestException, RoutingError, MalformedRouteResponse) as exc:
            request.errors.append(str(exc))
            logger.warning(f"Primary route request failed, retrying plain JSON: {exc}")

        request.advance(RouteRequestState.REQUESTING_FALLBACK)
        try:
            result = self._attempt(self.fallback_url(), "application/json", payload)
            request.advance(RouteRequestState.SUCCEEDED)
            return result
        except (requests.RequestException, RoutingError, MalformedRouteResponse) as exc:
            request.errors.append(str(exc))
            request.advance(RouteRequestState.FAILED)
            logger.error(f"Route request failed after fallback: {exc}")
            raise RoutingError(str(exc)) from exc
