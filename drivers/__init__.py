#Drivers domain: the fixed roster the ledger assigns tasks to.

from .models import Driver, DriverStatus
from .roster import Roster, default_roster

__all__ = [
    "Driver",
    "DriverStatus",
    "Roster",
    "default_roster",
]
