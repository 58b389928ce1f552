#Marks routing as a package.
#Re-exports the public API (RoutingClient, RouteRequestBuilder, RouteResult...)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .models import RouteResult, RouteSummary, RoutingError, RouteRequest, RouteRequestState
from .normalize import normalize_route_response
from .ors_client import RoutingClient
from .route_builder import RouteRequestBuilder, resolve_home_base, has_route_stops
from .coordinates import parse_coordinates

__all__ = [
           "RouteResult",
           "RouteSummary",
             "RoutingError",
             "RouteRequest",
             "RouteRequestState",
             "normalize_route_response",
             "RoutingClient",
             "RouteRequestBuilder",
             "resolve_home_base",
             "has_route_stops",
             "parse_coordinates",
             ]
