import pytest

from assignment.ledger import AssignmentLedger
from drivers.models import Driver, DriverStatus
from drivers.roster import Roster
from tasks.catalog import TaskCatalog


@pytest.fixture
def roster():
    return Roster([
        Driver.new("driverA", "Alice", "#8b5e3c", DriverStatus.AVAILABLE),
        Driver.new("driverB", "Bob", "#3b82f6", DriverStatus.ON_ROUTE),
    ])


@pytest.fixture
def sample_rows():
    return {
        "rows": [
            {"id": "t1", "name": "Asha", "lat": 12.97, "lng": 77.59, "timeSlot": "8-10 AM", "type": "Pick"},
            {"id": "t2", "name": "Ravi", "lat": 12.95, "lng": 77.60, "timeSlot": "2-4 PM", "type": "Drop"},
        ]
    }


@pytest.fixture
def catalog(sample_rows):
    catalog = TaskCatalog()
    catalog.load(sample_rows)
    return catalog


@pytest.fixture
def ledger(catalog, roster):
    ledger = AssignmentLedger(catalog, roster)
    ledger.seed()
    return ledger
