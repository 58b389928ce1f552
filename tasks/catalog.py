"""
Purpose: The Task Catalog.
What it does:
- Normalizes heterogeneous task-store rows into canonical Task records
  (best-effort field aliasing, numeric coercion).
- Fails closed per row: a row without finite lat/lng is dropped, the batch is kept.
- Indexes tasks by id; refresh replaces the whole set at once.

Rule: The catalog never decides ownership. assigned_driver_name is written only
by the assignment ledger (set_assigned_driver) after a load.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from .models import Task, TaskKind

logger = logging.getLogger(__name__)

# alias lists, first non-empty wins
ID_KEYS = ("id", "ID")
NAME_KEYS = ("name", "customer", "title")
TIME_SLOT_KEYS = ("timeSlot", "slot", "timeslot")
TYPE_KEYS = ("type", "service", "jobType")
LAT_KEYS = ("lat", "latitude", "Lat", "Latitude")
LNG_KEYS = ("lng", "lon", "longitude", "Lng", "Longitude")
DRIVER_KEYS = ("assignedDriver", "driver")


def _first(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def to_number(value: Any) -> float:
    """
    Coerce a cell value to float; anything unparseable becomes NaN.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return math.nan
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number if math.isfinite(number) else math.nan


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def extract_rows(payload: Any) -> List[Dict[str, Any]]:
    """
    The store answers {"rows": [...]}; older deployments return a bare list.
    """
    if isinstance(payload, dict):
        rows = payload.get("rows")
    else:
        rows = payload
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, dict)]


def normalize_row(row: Dict[str, Any], position: int) -> Optional[Task]:
    """
    Map one raw row to a Task, or None when it has no usable coordinates.
    `position` is 1-based and only used for generated ids/names.
    """
    raw_id = _first(row, ID_KEYS)
    task_id = str(raw_id) if raw_id is not None and str(raw_id).strip() else f"t{position}"

    raw_name = _first(row, NAME_KEYS)
    name = str(raw_name) if raw_name is not None else f"Task {position}"

    lat = _first(row, LAT_KEYS)
    lng = _first(row, LNG_KEYS)
    combined = row.get("latlng")
    if (lat is None or lng is None) and isinstance(combined, str):
        parts = [p for p in re.split(r"[ ,]+", combined.strip()) if p]
        if len(parts) >= 2:
            lat, lng = parts[0], parts[1]

    lat_value = to_number(lat)
    lng_value = to_number(lng)
    if not math.isfinite(lat_value) or not math.isfinite(lng_value):
        return None

    raw_type = _optional_text(_first(row, TYPE_KEYS))
    driver = _optional_text(_first(row, DRIVER_KEYS))

    return Task(
        id=task_id,
        name=name,
        lat=lat_value,
        lng=lng_value,
        time_slot=_optional_text(_first(row, TIME_SLOT_KEYS)),
        kind=TaskKind.from_text(raw_type),
        raw_type=raw_type,
        assigned_driver_name=driver.strip() if driver else None,
    )


def normalize_rows(payload: Any) -> List[Task]:
    tasks: List[Task] = []
    for index, row in enumerate(extract_rows(payload), start=1):
        task = normalize_row(row, index)
        if task is None:
            logger.debug(f"Dropping task row {index}: no finite lat/lng")
            continue
        tasks.append(task)
    return tasks


class TaskCatalog:
    """
    In-memory catalog of the current task set, ordered as the store returned it.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}

    def load(self, raw_rows: Any) -> List[Task]:
        """
        Replace the whole catalog with the normalized rows. Duplicate ids: last row wins.
        """
        fresh: Dict[str, Task] = {}
        for task in normalize_rows(raw_rows):
            if task.id in fresh:
                logger.debug(f"Duplicate task id {task.id}; keeping the later row")
                fresh.pop(task.id)
            fresh[task.id] = task
        # swap in one assignment so readers never see a half-loaded set
        self._tasks = fresh
        logger.info(f"Catalog loaded {len(fresh)} tasks")
        return self.tasks()

    def clear(self) -> None:
        self._tasks = {}

    def by_id(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(str(task_id))

    def __contains__(self, task_id: object) -> bool:
        return str(task_id) in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def ids(self) -> List[str]:
        return list(self._tasks)

    def tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def set_assigned_driver(self, task_id: str, driver_name: Optional[str]) -> None:
        task = self._tasks.get(task_id)
        if task is not None:
            task.assigned_driver_name = driver_name or None
