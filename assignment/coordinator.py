"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
- Catalog refresh: store rows -> catalog -> ledger seeding -> markers.
- Gesture events -> ledger mutation. The ledger listener then relays the
  change to the task store (fire-and-forget), marks the drawn route stale and
  redraws markers.
- Explicit "build route": ledger -> coordinates -> routing client -> map surface.

Everything runs on the caller's thread except relay writes. A route result is
drawn even if the ledger changed while it was being fetched (last write wins).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from drivers.roster import Roster, default_roster
from presentation.formatting import format_routing_failure, format_summary
from presentation.markers import MapSurface, MarkerSpec, markers
from routing.models import RouteResult, RoutingError
from routing.ors_client import RoutingClient
from routing.route_builder import RouteRequestBuilder, has_route_stops
from tasks.catalog import TaskCatalog
from tasks.filters import ALL_SLOTS, filter_by_time_slot, time_options
from tasks.models import Task
from tasks.store_client import CatalogLoadError, TaskStoreClient

from .gestures import DropEvent, apply_drop
from .ledger import UNASSIGNED, AssignmentLedger, ChangeKind, LedgerChange, Snapshot
from .relay import PersistenceRelay

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = "No tasks assigned for this driver."


class RouteStatus(Enum):
    EMPTY = "EMPTY"    # nothing to route; not an error
    READY = "READY"
    FAILED = "FAILED"


@dataclass(frozen=True)
class RouteOutcome:
    status: RouteStatus
    message: str
    result: Optional[RouteResult] = None


class Coordinator:
    """
    Coordinates the task catalog, the assignment ledger and the routing client
    for one operator session.
    """

    def __init__(
        self,
        catalog: TaskCatalog,
        ledger: AssignmentLedger,
        builder: RouteRequestBuilder,
        routing_client: RoutingClient,
        relay: Optional[PersistenceRelay] = None,
        store: Optional[TaskStoreClient] = None,
        map_surface: Optional[MapSurface] = None,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.roster: Roster = ledger.roster
        self.builder = builder
        self.routing_client = routing_client
        self.relay = relay
        self.store = store
        self.map_surface = map_surface

        self.current_route: Optional[RouteResult] = None
        self.load_error: Optional[str] = None
        self.time_filter: str = ALL_SLOTS

        self.ledger.subscribe(self._on_ledger_change)

    @classmethod
    def from_settings(
        cls,
        settings,
        *,
        roster: Optional[Roster] = None,
        facilities: Optional[Dict[str, Any]] = None,
        map_surface: Optional[MapSurface] = None,
    ) -> Coordinator:
        catalog = TaskCatalog()
        ledger = AssignmentLedger(catalog, roster or default_roster())
        builder = RouteRequestBuilder.from_settings(catalog, ledger, settings, facilities)
        store = relay = None
        if settings.tasks_api_url:
            store = TaskStoreClient(settings.tasks_api_url, timeout=settings.store_timeout)
            relay = PersistenceRelay(
                settings.tasks_api_url,
                timeout=settings.store_timeout,
                max_workers=settings.relay_max_workers,
            )
        return cls(
            catalog,
            ledger,
            builder,
            RoutingClient.from_settings(settings),
            relay=relay,
            store=store,
            map_surface=map_surface,
        )

    # --- Catalog ---

    def refresh_catalog(self) -> List[Task]:
        """
        Replace the catalog from the store and reseed ownership.
        On CatalogLoadError the catalog is emptied and load_error carries the banner text.
        """
        if self.store is None:
            raise ValueError("No task store configured")
        try:
            payload = self.store.fetch_rows()
        except CatalogLoadError as exc:
            self.load_error = str(exc)
            logger.error(f"Task catalog unavailable: {exc}")
            self.catalog.clear()
            self.ledger.seed()
            if self.map_surface is not None:
                self.map_surface.show_message(self.load_error)
            return []

        self.load_error = None
        return self.load_rows(payload)

    def load_rows(self, payload: Any) -> List[Task]:
        tasks = self.catalog.load(payload)
        self.ledger.seed()
        return tasks

    # --- Assignment ---

    def handle_drop(self, event: DropEvent) -> Optional[Snapshot]:
        return apply_drop(self.ledger, event)

    def unassign(self, task_id: str) -> Snapshot:
        return self.ledger.unassign(task_id)

    def clear_driver(self, driver_id: str) -> Snapshot:
        return self.ledger.clear(driver_id)

    def unassigned_tasks(self) -> List[Task]:
        """
        The pool as the operator sees it: ledger order, current time filter applied.
        """
        pool = [self.catalog.by_id(task_id) for task_id in self.ledger.unassigned()]
        return filter_by_time_slot([task for task in pool if task is not None], self.time_filter)

    def driver_tasks(self, driver_id: str) -> List[Task]:
        tasks = [self.catalog.by_id(task_id) for task_id in self.ledger.sequence(driver_id)]
        return [task for task in tasks if task is not None]

    def time_options(self) -> List[str]:
        return time_options(self.catalog.tasks())

    def set_time_filter(self, wanted: Optional[str]) -> None:
        self.time_filter = wanted or ALL_SLOTS
        self._redraw_markers()

    def markers(self) -> List[MarkerSpec]:
        return markers(self.catalog, self.ledger, self.roster, self.time_filter)

    # --- Routing ---

    def set_origin(self, lng: float, lat: float) -> None:
        self.builder.set_origin(lng, lat)

    def reset_origin(self) -> None:
        self.builder.reset_origin()

    def build_route(self, driver_id: str) -> RouteOutcome:
        """
        Home base -> driver's tasks in ledger order -> home base.
        """
        if driver_id not in self.roster:
            return self._outcome(RouteStatus.EMPTY, f"Unknown driver: {driver_id}")

        coordinates = self.builder.build_coordinates(driver_id)
        if not has_route_stops(coordinates):
            return self._outcome(RouteStatus.EMPTY, NO_TASKS_MESSAGE)

        try:
            result = self.routing_client.route(coordinates)
        except RoutingError as exc:
            return self._outcome(RouteStatus.FAILED, format_routing_failure(exc.reason))

        self._show_route(result)
        return self._outcome(RouteStatus.READY, format_summary(result.summary), result)

    def route_to_task(self, task_id: str) -> RouteOutcome:
        """
        Quick single-leg ETA from the current origin to one task.
        """
        task = self.catalog.by_id(task_id)
        if task is None or not task.has_finite_coordinates():
            return self._outcome(RouteStatus.EMPTY, f"Task {task_id} has no location")

        try:
            result = self.routing_client.route_leg(self.builder.origin, task.lng_lat)
        except RoutingError as exc:
            return self._outcome(RouteStatus.FAILED, format_routing_failure(exc.reason, "route/ETA"))

        self._show_route(result)
        return self._outcome(
            RouteStatus.READY, format_summary(result.summary, title="ETA", empty="No summary"), result
        )

    def clear_route(self) -> None:
        self.current_route = None
        if self.map_surface is not None:
            self.map_surface.clear_route()

    def close(self) -> None:
        """
        Leaving the view: in-flight relay writes are abandoned, not awaited.
        """
        if self.relay is not None:
            self.relay.close()

    # --- Internal helpers ---

    def _on_ledger_change(self, change: LedgerChange) -> None:
        if change.kind == ChangeKind.MOVE:
            self._relay([change.task_ids[0]], self._driver_name(change.to_owner))
        elif change.kind == ChangeKind.CLEAR:
            self._relay(change.task_ids, "")

        self.clear_route()
        self._redraw_markers()

    def _relay(self, task_ids, driver_name: str) -> None:
        if self.relay is None:
            logger.debug(f"No relay configured; {len(task_ids)} assignment change(s) stay local")
            return
        self.relay.save_many(task_ids, driver_name)

    def _driver_name(self, owner: Optional[str]) -> str:
        if owner is None or owner == UNASSIGNED:
            return ""
        return self.roster.name_of(owner)

    def _show_route(self, result: RouteResult) -> None:
        self.current_route = result
        if self.map_surface is not None:
            self.map_surface.draw_route(result)

    def _redraw_markers(self) -> None:
        if self.map_surface is not None:
            self.map_surface.place_markers(self.markers())

    def _outcome(self, status: RouteStatus, message: str, result: Optional[RouteResult] = None) -> RouteOutcome:
        if status == RouteStatus.FAILED:
            logger.warning(message.replace("\n", " "))
        if self.map_surface is not None:
            self.map_surface.show_message(message)
        return RouteOutcome(status=status, message=message, result=result)
