"""
Purpose: Presentation Adapter (boundary only).
What it does:
- Turns catalog + ledger state into marker placement requests for the map surface:
  position, colour, popup text.
- Defines the MapSurface protocol the coordinator draws through.

Rule: reads model state, never mutates it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Protocol, Tuple

from tasks.filters import matches_time_slot
from tasks.models import Task

if TYPE_CHECKING:
    from assignment.ledger import AssignmentLedger
    from drivers.roster import Roster
    from routing.models import RouteResult
    from tasks.catalog import TaskCatalog

PICK_COLOR = "#22c55e"  # green
DROP_COLOR = "#ef4444"  # red, also used for "other"
ROUTE_COLOR = "#6d28d9"


@dataclass(frozen=True)
class MarkerSpec:
    task_id: str
    position: Tuple[float, float]  # (lat, lng)
    color: str
    popup_text: str


class MapSurface(Protocol):
    def place_markers(self, markers: List[MarkerSpec]) -> None: ...

    def draw_route(self, route: "RouteResult") -> None: ...

    def clear_route(self) -> None: ...

    def show_message(self, text: str) -> None: ...


def base_color(task: Task) -> str:
    return PICK_COLOR if task.is_pick else DROP_COLOR


def popup_text(task: Task, driver_name: Optional[str] = None) -> str:
    lines = [
        task.name or "Task",
        task.time_slot or "-",
        f"Type: {(task.raw_type or '').upper()}",
    ]
    if driver_name:
        lines.append(f"Assigned: {driver_name}")
    lines.append(f"{task.lat:.6f}, {task.lng:.6f}")
    return "\n".join(lines)


def marker_for(task: Task, ledger: "AssignmentLedger", roster: "Roster") -> MarkerSpec:
    owner = ledger.owner_of(task.id)
    driver = roster.get(owner) if owner else None
    color = driver.display_color if driver else base_color(task)
    return MarkerSpec(
        task_id=task.id,
        position=task.position,
        color=color,
        popup_text=popup_text(task, task.assigned_driver_name),
    )


def markers(
    catalog: "TaskCatalog",
    ledger: "AssignmentLedger",
    roster: "Roster",
    time_filter: Optional[str] = "All",
) -> List[MarkerSpec]:
    return [
        marker_for(task, ledger, roster)
        for task in catalog.tasks()
        if task.has_finite_coordinates() and matches_time_slot(task, time_filter)
    ]
