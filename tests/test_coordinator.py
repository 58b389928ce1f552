import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from assignment.coordinator import NO_TASKS_MESSAGE, Coordinator, RouteStatus
from assignment.gestures import DropEvent
from assignment.ledger import UNASSIGNED, AssignmentLedger
from assignment.relay import PersistenceRelay
from routing.ors_client import RoutingClient
from routing.route_builder import RouteRequestBuilder
from tasks.catalog import TaskCatalog
from tasks.store_client import TaskStoreClient

from fakes import FakeResponse, FakeSession, RecordingMapSurface

HOME = (77.614, 12.935)

ROUTE_BODY = {
    "routes": [
        {
            "summary": {"distance": 5000, "duration": 600},
            "geometry": {"type": "LineString", "coordinates": [[77.614, 12.935], [77.59, 12.97]]},
        }
    ]
}

ROWS = {
    "rows": [
        {"id": "1", "name": "Asha", "lat": 12.97, "lng": 77.59, "type": "Pick", "timeSlot": "AM", "assignedDriver": "alice"},
        {"id": "2", "name": "Ravi", "lat": 12.95, "lng": 77.60, "type": "Drop", "timeSlot": "PM", "assignedDriver": "Alice"},
        {"id": "3", "name": "Uma", "lat": 12.93, "lng": 77.62, "type": "Drop", "timeSlot": "AM", "assignedDriver": "ALICE"},
        {"id": "4", "name": "Dev", "lat": 12.91, "lng": 77.63, "type": "Pick", "timeSlot": "PM"},
    ]
}


class Harness:
    def __init__(self, roster, store_responses=None, routing_responses=None):
        self.store_session = FakeSession(store_responses or [FakeResponse(200, ROWS)])
        self.relay_session = FakeSession()
        self.routing_session = FakeSession(routing_responses or [])
        self.executor = ThreadPoolExecutor(max_workers=4)
        self.surface = RecordingMapSurface()

        catalog = TaskCatalog()
        ledger = AssignmentLedger(catalog, roster)
        self.coordinator = Coordinator(
            catalog,
            ledger,
            RouteRequestBuilder(catalog, ledger, HOME),
            RoutingClient("https://ors.example", session=self.routing_session),
            relay=PersistenceRelay("https://store.example", session=self.relay_session, executor=self.executor),
            store=TaskStoreClient("https://store.example", session=self.store_session),
            map_surface=self.surface,
        )

    def relayed(self):
        # wait for fire-and-forget writes before looking at them
        self.executor.shutdown(wait=True)
        return [json.loads(call["data"]) for call in self.relay_session.calls]


@pytest.fixture
def harness(roster):
    harness = Harness(roster)
    harness.coordinator.refresh_catalog()
    return harness


def test_refresh_seeds_ledger_from_store(harness):
    ledger = harness.coordinator.ledger

    assert ledger.sequence("driverA") == ["1", "2", "3"]
    assert ledger.unassigned() == ["4"]
    assert harness.coordinator.load_error is None
    # seeding is not an assignment change: nothing is written back
    assert harness.relayed() == []


def test_catalog_load_error_empties_catalog_and_sets_banner(roster):
    harness = Harness(roster, store_responses=[FakeResponse(503, text="down")])

    assert harness.coordinator.refresh_catalog() == []
    assert harness.coordinator.load_error
    assert len(harness.coordinator.catalog) == 0
    assert harness.coordinator.ledger.unassigned() == []


def test_clear_driver_unassigns_all_and_relays_each(harness):
    snapshot = harness.coordinator.clear_driver("driverA")

    assert snapshot["driverA"] == []
    assert set(snapshot[UNASSIGNED]) == {"1", "2", "3", "4"}
    writes = harness.relayed()
    assert len(writes) == 3
    assert sorted(w["id"] for w in writes) == [1, 2, 3]
    assert all(w["assignedDriver"] == "" for w in writes)


def test_clear_driver_relays_even_when_writes_fail(roster):
    harness = Harness(roster)
    harness.relay_session.responses = [FakeResponse(500), FakeResponse(200), FakeResponse(500)]
    harness.coordinator.refresh_catalog()

    harness.coordinator.clear_driver("driverA")

    assert len(harness.relayed()) == 3
    assert harness.coordinator.ledger.sequence("driverA") == []


def test_drop_relays_new_owner_and_invalidates_route(harness):
    coordinator = harness.coordinator
    harness.routing_session.responses = [FakeResponse(200, ROUTE_BODY)]
    assert coordinator.build_route("driverA").status == RouteStatus.READY
    assert coordinator.current_route is not None

    coordinator.handle_drop(DropEvent("tasks", 0, "4", "drv:driverB", 0))

    assert coordinator.current_route is None
    assert harness.surface.cleared >= 1
    assert coordinator.catalog.by_id("4").assigned_driver_name == "Bob"
    assert harness.relayed() == [{"id": 4, "assignedDriver": "Bob"}]


def test_reorder_invalidates_route_without_relaying(harness):
    coordinator = harness.coordinator
    harness.routing_session.responses = [FakeResponse(200, ROUTE_BODY)]
    coordinator.build_route("driverA")

    coordinator.handle_drop(DropEvent("drv:driverA", 0, "1", "drv:driverA", 2))

    assert coordinator.ledger.sequence("driverA") == ["2", "3", "1"]
    assert coordinator.current_route is None
    assert harness.relayed() == []


def test_cancelled_drop_changes_nothing(harness):
    before = harness.coordinator.ledger.snapshot()

    assert harness.coordinator.handle_drop(DropEvent("tasks", 0, "4")) is None
    assert harness.coordinator.ledger.snapshot() == before


def test_build_route_for_empty_driver_does_not_call_provider(harness):
    outcome = harness.coordinator.build_route("driverB")

    assert outcome.status == RouteStatus.EMPTY
    assert outcome.message == NO_TASKS_MESSAGE
    assert harness.routing_session.calls == []


def test_build_route_success_draws_and_summarizes(harness):
    harness.routing_session.responses = [FakeResponse(200, ROUTE_BODY)]

    outcome = harness.coordinator.build_route("driverA")

    assert outcome.status == RouteStatus.READY
    assert "Distance: 5.0 km" in outcome.message
    assert "Duration: 10 min" in outcome.message
    assert harness.surface.routes == [outcome.result]
    coords = harness.routing_session.calls[0]["json"]["coordinates"]
    assert coords[0] == coords[-1] == list(HOME)
    assert len(coords) == 5


def test_build_route_failure_leaves_ledger_alone(harness):
    harness.routing_session.responses = [FakeResponse(500, text="boom"), FakeResponse(500, text="boom again")]
    before = harness.coordinator.ledger.snapshot()

    outcome = harness.coordinator.build_route("driverA")

    assert outcome.status == RouteStatus.FAILED
    assert "boom again" in outcome.message
    assert harness.coordinator.ledger.snapshot() == before
    assert harness.coordinator.current_route is None


def test_later_route_overwrites_earlier(harness):
    second = {"routes": [dict(ROUTE_BODY["routes"][0], summary={"distance": 1000, "duration": 60})]}
    harness.routing_session.responses = [FakeResponse(200, ROUTE_BODY), FakeResponse(200, second)]

    harness.coordinator.build_route("driverA")
    latest = harness.coordinator.route_to_task("4")

    assert latest.status == RouteStatus.READY
    assert latest.message.startswith("ETA")
    assert harness.coordinator.current_route is latest.result


def test_time_filter_limits_pool_and_markers(harness):
    coordinator = harness.coordinator
    coordinator.clear_driver("driverA")

    coordinator.set_time_filter("am")

    assert [t.id for t in coordinator.unassigned_tasks()] == ["1", "3"]
    assert {m.task_id for m in harness.surface.markers} == {"1", "3"}
    assert coordinator.time_options() == ["All", "AM", "PM"]


def test_malformed_route_bodies_fail_without_raising(harness):
    broken = {"type": "FeatureCollection", "features": [{"properties": ["oops"]}]}
    harness.routing_session.responses = [FakeResponse(200, broken), FakeResponse(200, {"routes": "oops"})]

    outcome = harness.coordinator.build_route("driverA")

    assert outcome.status == RouteStatus.FAILED
    assert len(harness.routing_session.calls) == 2
    assert harness.coordinator.current_route is None


def test_catalog_load_error_is_shown_on_the_map(roster):
    harness = Harness(roster, store_responses=[FakeResponse(503, text="down")])

    harness.coordinator.refresh_catalog()

    assert harness.surface.messages == [harness.coordinator.load_error]
