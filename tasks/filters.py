"""
Time-slot filtering for the task list and map.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Task

ALL_SLOTS = "All"


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def time_options(tasks: Iterable[Task]) -> List[str]:
    """
    ["All", <distinct time slots in first-seen order>]
    """
    seen: List[str] = []
    for task in tasks:
        if task.time_slot and task.time_slot not in seen:
            seen.append(task.time_slot)
    return [ALL_SLOTS] + seen


def matches_time_slot(task: Task, wanted: Optional[str]) -> bool:
    want = _norm(wanted)
    if not want or want == _norm(ALL_SLOTS):
        return True
    return _norm(task.time_slot) == want


def filter_by_time_slot(tasks: Iterable[Task], wanted: Optional[str]) -> List[Task]:
    return [task for task in tasks if matches_time_slot(task, wanted)]
