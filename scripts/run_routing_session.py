# Run from the repo root: python -m scripts.run_routing_session

import os
from typing import List

import pandas as pd

from config import configure_logging, load_settings
from assignment.coordinator import Coordinator
from assignment.gestures import DropEvent, driver_list_id


class ConsoleMapSurface:
    """Prints what a real map would draw."""

    def place_markers(self, markers: List) -> None:
        print(f"  [map] {len(markers)} markers")

    def draw_route(self, route) -> None:
        print(f"  [map] route with {len(route.features)} feature(s)")

    def clear_route(self) -> None:
        pass

    def show_message(self, text: str) -> None:
        print("  [map] " + text.replace("\n", " | "))


def load_rows(filepath="mock_tasks.csv"):
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    df = pd.read_csv(os.path.join(base_dir, filepath))
    # blank cells must reach the catalog as None, not NaN
    df = df.astype(object).where(df.notna(), None)
    return {"rows": df.to_dict(orient="records")}


def run_session():
    configure_logging()
    settings = load_settings()
    print("=== STARTING OFFLINE ROUTING SESSION ===")

    coordinator = Coordinator.from_settings(settings, map_surface=ConsoleMapSurface())
    # the CSV stands in for the store; write-backs stay local
    coordinator.store = None
    if coordinator.relay is not None:
        coordinator.relay.close()
        coordinator.relay = None

    tasks = coordinator.load_rows(load_rows())
    print(f"Loaded {len(tasks)} routable tasks. Time slots: {coordinator.time_options()}\n")

    drivers = coordinator.roster.ids()
    # deal the first six unassigned tasks round-robin to the roster
    for index, task in enumerate(coordinator.unassigned_tasks()[:6]):
        driver_id = drivers[index % len(drivers)]
        coordinator.handle_drop(DropEvent(
            source_list_id="tasks",
            source_index=0,
            item_id=task.id,
            destination_list_id=driver_list_id(driver_id),
            destination_index=len(coordinator.ledger.sequence(driver_id)),
        ))

    for driver in coordinator.roster:
        names = [task.name for task in coordinator.driver_tasks(driver.id)]
        print(f"{driver.name}: {names}")
        if settings.ors_api_key:
            outcome = coordinator.build_route(driver.id)
            print(f"  -> {outcome.status.value}")
        else:
            coords = coordinator.builder.build_coordinates(driver.id)
            print(f"  -> {len(coords)} coordinates (set ORS_API_KEY to request a route)")

    coordinator.close()
    print("\n=== SESSION COMPLETE ===")


if __name__ == "__main__":
    run_session()
