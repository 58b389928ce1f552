"""
Purpose: The static driver roster and lookups over it.
What it does:
- Holds drivers in display order.
- Resolves a driver by id, or by display name (case-insensitive) when seeding
  ownership from the task store's assignedDriver column.

Note: the store records display names, not ids, so a renamed driver loses its
seeded tasks on the next load.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .models import Driver, DriverStatus


class Roster:
    def __init__(self, drivers: Iterable[Driver]):
        self._drivers: List[Driver] = list(drivers)
        self._by_id: Dict[str, Driver] = {}
        for driver in self._drivers:
            if driver.id in self._by_id:
                raise ValueError(f"Duplicate driver id in roster: {driver.id}")
            self._by_id[driver.id] = driver

    def __iter__(self) -> Iterator[Driver]:
        return iter(self._drivers)

    def __len__(self) -> int:
        return len(self._drivers)

    def __contains__(self, driver_id: object) -> bool:
        return driver_id in self._by_id

    def ids(self) -> List[str]:
        return [driver.id for driver in self._drivers]

    def get(self, driver_id: str) -> Optional[Driver]:
        return self._by_id.get(driver_id)

    def name_of(self, driver_id: str) -> str:
        driver = self._by_id.get(driver_id)
        return driver.name if driver else ""

    def find_by_name(self, name: Optional[str]) -> Optional[Driver]:
        wanted = (name or "").strip().lower()
        if not wanted:
            return None
        for driver in self._drivers:
            if driver.name.lower() == wanted:
                return driver
        return None


def default_roster() -> Roster:
    """
    Convenience factory for the two-driver sample roster.
    """
    return Roster([
        Driver.new("rakesh", "Rakesh", "#8b5e3c", DriverStatus.AVAILABLE),     # brown
        Driver.new("jagannath", "Jagannath", "#3b82f6", DriverStatus.ON_ROUTE),  # blue
    ])
