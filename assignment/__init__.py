#Expose the assignment pipeline pieces:
#Ledger (ownership + ordering, single source of truth)
#Gesture translation (drop events -> ledger operations)
#Persistence relay (fire-and-forget write-back)
#The Coordinator glue lives in assignment.coordinator and is imported from there.

from .ledger import AssignmentLedger, UNASSIGNED, LedgerChange, ChangeKind, StaleGestureNoop
from .gestures import DropEvent, apply_drop, driver_list_id
from .relay import PersistenceRelay

__all__ = [
    "AssignmentLedger",
    "UNASSIGNED",
    "LedgerChange",
    "ChangeKind",
    "StaleGestureNoop",
    "DropEvent",
    "apply_drop",
    "driver_list_id",
    "PersistenceRelay",
]
