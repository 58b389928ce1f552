"""
Purpose: Translate drag-and-drop drop events into ledger operations.
What it does:
- Maps list identifiers from the gesture surface to ledger owners:
  "tasks" / "unassigned" -> UNASSIGNED pool, "drv:<driver_id>" -> that driver.
- A drop with no destination is a cancelled gesture: no mutation.
- Same-list drops reorder; cross-list drops move by task id (the id is
  authoritative, the source index only confirms it).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .ledger import UNASSIGNED, AssignmentLedger, Snapshot

logger = logging.getLogger(__name__)

POOL_LIST_IDS = ("tasks", "unassigned")
DRIVER_LIST_PREFIX = "drv:"


@dataclass(frozen=True)
class DropEvent:
    """
    What the drag-and-drop surface reports when a drag ends.
    """
    source_list_id: str
    source_index: int
    item_id: str
    destination_list_id: Optional[str] = None
    destination_index: Optional[int] = None

    @property
    def cancelled(self) -> bool:
        return self.destination_list_id is None


def driver_list_id(driver_id: str) -> str:
    return f"{DRIVER_LIST_PREFIX}{driver_id}"


def owner_for_list(list_id: Optional[str]) -> Optional[str]:
    """
    List identifier -> ledger owner id, None when the list is not ours.
    """
    if list_id is None:
        return None
    if list_id in POOL_LIST_IDS:
        return UNASSIGNED
    if list_id.startswith(DRIVER_LIST_PREFIX):
        return list_id[len(DRIVER_LIST_PREFIX):] or None
    return None


def apply_drop(ledger: AssignmentLedger, event: DropEvent) -> Optional[Snapshot]:
    """
    Apply one drop to the ledger. Returns the new snapshot, or None when the
    gesture was cancelled or pointed at lists the ledger does not know.
    """
    if event.cancelled:
        return None

    source = owner_for_list(event.source_list_id)
    destination = owner_for_list(event.destination_list_id)
    if source is None or destination is None or not ledger.is_owner(source) or not ledger.is_owner(destination):
        logger.debug(f"Ignoring drop between unknown lists {event.source_list_id} -> {event.destination_list_id}")
        return None

    if source == destination:
        sequence = ledger.sequence(source)
        index = event.source_index
        if 0 <= index < len(sequence) and sequence[index] == event.item_id:
            return ledger.reorder_within(source, index, event.destination_index)

    return ledger.move_between(event.item_id, source, destination, event.destination_index)
