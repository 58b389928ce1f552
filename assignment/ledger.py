"""
Purpose: The Assignment Ledger (single source of truth for who owns which task).
What it does:
- Owns one ordered task-id list per roster driver plus the UNASSIGNED pool.
  The pool is a reserved pseudo-owner, so every operation is the same
  remove-then-insert on two lists.
- Enforces the single-owner invariant by construction: a task id lives in
  exactly one list (pool included), at most once.
- Keeps the catalog's assigned_driver_name projection in sync inside every mutation.
- Notifies listeners (route invalidation, persistence) after each effective change.

Provides operations (each returns the new snapshot, none raise on bad indices):
   - reorder_within(owner, from_index, to_index)
   - move_between(task_id, from_owner, to_owner, to_index)
   - unassign(task_id)
   - clear(driver_id)

Rule: Ledger owns state transitions; it never does I/O.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from drivers.roster import Roster
from tasks.catalog import TaskCatalog

logger = logging.getLogger(__name__)

UNASSIGNED = "__unassigned__"

Snapshot = Dict[str, List[str]]


class StaleGestureNoop(Exception):
    """A move referenced a task that is no longer where the caller expected it."""
    pass


class ChangeKind(Enum):
    SEED = "SEED"
    REORDER = "REORDER"
    MOVE = "MOVE"
    CLEAR = "CLEAR"


@dataclass(frozen=True)
class LedgerChange:
    """
    What a single effective mutation touched.
    to_owner is UNASSIGNED for unassign/clear and None for SEED.
    """
    kind: ChangeKind
    task_ids: Tuple[str, ...]
    from_owner: Optional[str] = None
    to_owner: Optional[str] = None


Listener = Callable[[LedgerChange], None]


def _clamp(index: Optional[int], upper: int) -> int:
    if index is None or index > upper:
        return upper
    return max(0, index)


class AssignmentLedger:
    """
    In-memory driver -> ordered task ids mapping.

    Single-threaded by contract: mutations happen as reactions to discrete
    events on one logical thread, so there is no locking here.
    """

    def __init__(self, catalog: TaskCatalog, roster: Roster):
        self.catalog = catalog
        self.roster = roster
        self._sequences: Dict[str, List[str]] = {}
        self._owner: Dict[str, str] = {}  # task id -> owner id (pool included)
        self._listeners: List[Listener] = []
        self._reset()

    # --- Public API ---

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def owners(self) -> List[str]:
        return self.roster.ids() + [UNASSIGNED]

    def is_owner(self, owner_id: str) -> bool:
        return owner_id in self._sequences

    def owner_of(self, task_id: str) -> Optional[str]:
        return self._owner.get(task_id)

    def sequence(self, owner_id: str) -> List[str]:
        return list(self._sequences.get(owner_id, []))

    def unassigned(self) -> List[str]:
        return list(self._sequences[UNASSIGNED])

    def snapshot(self) -> Snapshot:
        return {owner: list(ids) for owner, ids in self._sequences.items()}

    def seed(self) -> Snapshot:
        """
        Rebuild ownership from the catalog's assignedDriver names (case-insensitive
        match on roster display names). Unknown names land in the pool.
        """
        self._reset()
        for task in self.catalog.tasks():
            driver = self.roster.find_by_name(task.assigned_driver_name)
            owner = driver.id if driver else UNASSIGNED
            self._sequences[owner].append(task.id)
            self._owner[task.id] = owner
            self._project(task.id)

        self._notify(LedgerChange(ChangeKind.SEED, tuple(self.catalog.ids())))
        return self.snapshot()

    def reorder_within(self, owner_id: str, from_index: int, to_index: Optional[int]) -> Snapshot:
        """
        Move one element inside its own list (to_index None means the end). No ownership change.
        """
        sequence = self._sequences.get(owner_id)
        if sequence is None or not 0 <= from_index < len(sequence):
            logger.debug(f"Ignoring reorder in {owner_id}: index {from_index} out of range")
            return self.snapshot()

        target = _clamp(to_index, len(sequence) - 1)
        if target == from_index:
            return self.snapshot()

        task_id = sequence.pop(from_index)
        sequence.insert(target, task_id)
        self._notify(LedgerChange(ChangeKind.REORDER, (task_id,), owner_id, owner_id))
        return self.snapshot()

    def move_between(
        self,
        task_id: str,
        from_owner: str,
        to_owner: str,
        to_index: Optional[int] = None,
    ) -> Snapshot:
        """
        Remove task_id from from_owner and insert it into to_owner at to_index
        (clamped; None means the end). A task that is not in from_owner is a
        stale gesture and leaves the ledger untouched.
        """
        try:
            source_index = self._locate(task_id, from_owner)
            if to_owner not in self._sequences:
                raise StaleGestureNoop(f"unknown destination {to_owner}")
        except StaleGestureNoop as exc:
            logger.debug(f"Ignoring move of {task_id}: {exc}")
            return self.snapshot()

        if from_owner == to_owner:
            target = len(self._sequences[to_owner]) - 1 if to_index is None else to_index
            return self.reorder_within(from_owner, source_index, target)

        # remove-then-insert: the id is never in two lists at once
        self._sequences[from_owner].pop(source_index)
        destination = self._sequences[to_owner]
        destination.insert(_clamp(to_index, len(destination)), task_id)
        self._owner[task_id] = to_owner
        self._project(task_id)

        self._notify(LedgerChange(ChangeKind.MOVE, (task_id,), from_owner, to_owner))
        return self.snapshot()

    def unassign(self, task_id: str) -> Snapshot:
        owner = self._owner.get(task_id)
        if owner is None or owner == UNASSIGNED:
            return self.snapshot()
        return self.move_between(task_id, owner, UNASSIGNED, None)

    def clear(self, driver_id: str) -> Snapshot:
        """
        Empty one driver's list; removed ids are appended to the pool in visit order.
        """
        if driver_id == UNASSIGNED or driver_id not in self._sequences:
            return self.snapshot()

        removed = self._sequences[driver_id]
        if not removed:
            return self.snapshot()

        self._sequences[driver_id] = []
        pool = self._sequences[UNASSIGNED]
        for task_id in removed:
            pool.append(task_id)
            self._owner[task_id] = UNASSIGNED
            self._project(task_id)

        self._notify(LedgerChange(ChangeKind.CLEAR, tuple(removed), driver_id, UNASSIGNED))
        return self.snapshot()

    # --- Internal helpers ---

    def _reset(self) -> None:
        self._sequences = {driver_id: [] for driver_id in self.roster.ids()}
        self._sequences[UNASSIGNED] = []
        self._owner = {}

    def _locate(self, task_id: str, owner_id: str) -> int:
        sequence = self._sequences.get(owner_id)
        if sequence is None:
            raise StaleGestureNoop(f"unknown source {owner_id}")
        if self._owner.get(task_id) != owner_id:
            raise StaleGestureNoop(f"{task_id} is not owned by {owner_id}")
        return sequence.index(task_id)

    def _project(self, task_id: str) -> None:
        owner = self._owner.get(task_id)
        name = self.roster.name_of(owner) if owner and owner != UNASSIGNED else None
        self.catalog.set_assigned_driver(task_id, name)

    def _notify(self, change: LedgerChange) -> None:
        for listener in list(self._listeners):
            listener(change)
