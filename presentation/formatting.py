"""
Route summary text for popups and inline messages.
"""
from __future__ import annotations

from typing import Optional

from routing.models import RouteSummary


def format_summary(summary: Optional[RouteSummary], title: str = "Total Route", empty: str = "Route ready") -> str:
    if summary is None:
        return empty
    return (
        f"{title}\n"
        f"Distance: {summary.distance_km} km\n"
        f"Duration: {summary.duration_minutes} min"
    )


def format_routing_failure(reason: str, what: str = "multi-stop route") -> str:
    return f"Could not build {what}.\n{reason}"
