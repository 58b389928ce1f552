from .markers import MarkerSpec, MapSurface, marker_for, markers
from .formatting import format_summary, format_routing_failure

__all__ = [
    "MarkerSpec",
    "MapSurface",
    "marker_for",
    "markers",
    "format_summary",
    "format_routing_failure",
]
