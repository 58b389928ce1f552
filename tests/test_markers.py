import pytest

from assignment.ledger import UNASSIGNED
from presentation.formatting import format_routing_failure, format_summary
from presentation.markers import DROP_COLOR, PICK_COLOR, markers, popup_text
from routing.coordinates import parse_coordinates
from routing.models import RouteSummary


def by_id(specs):
    return {spec.task_id: spec for spec in specs}


def test_unassigned_markers_use_task_type_color(catalog, ledger, roster):
    specs = by_id(markers(catalog, ledger, roster))

    assert specs["t1"].color == PICK_COLOR
    assert specs["t2"].color == DROP_COLOR
    assert specs["t1"].position == (12.97, 77.59)


def test_assigned_marker_takes_driver_color_and_popup_line(catalog, ledger, roster):
    ledger.move_between("t2", UNASSIGNED, "driverB")

    spec = by_id(markers(catalog, ledger, roster))["t2"]

    assert spec.color == "#3b82f6"
    assert spec.popup_text.splitlines() == [
        "Ravi",
        "2-4 PM",
        "Type: DROP",
        "Assigned: Bob",
        "12.950000, 77.600000",
    ]


def test_markers_follow_time_filter_and_skip_bad_coordinates(catalog, ledger, roster):
    catalog.by_id("t1").lng = float("nan")

    assert [s.task_id for s in markers(catalog, ledger, roster, "2-4 pm")] == ["t2"]
    assert [s.task_id for s in markers(catalog, ledger, roster, "8-10 AM")] == []


def test_popup_defaults(catalog):
    task = catalog.by_id("t1")
    task.name = ""
    task.time_slot = ""

    lines = popup_text(task).splitlines()

    assert lines[:2] == ["Task", "-"]
    assert not any(line.startswith("Assigned:") for line in lines)


def test_format_summary():
    text = format_summary(RouteSummary(distance_meters=5000, duration_seconds=600))

    assert text == "Total Route\nDistance: 5.0 km\nDuration: 10 min"
    assert format_summary(None) == "Route ready"
    assert format_summary(None, title="ETA", empty="No summary") == "No summary"


def test_format_routing_failure_carries_reason():
    assert format_routing_failure("POST x 500: boom") == "Could not build multi-stop route.\nPOST x 500: boom"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12.9716,77.5946", (12.9716, 77.5946)),
        ("12.9716 77.5946", (12.9716, 77.5946)),
        ("77.5946, 12.9716", (12.9716, 77.5946)),
        ("-33.86, 151.2", (-33.86, 151.2)),
    ],
)
def test_parse_coordinates(text, expected):
    assert parse_coordinates(text) == expected


@pytest.mark.parametrize("text", [None, "", "12.97", "abc, def", "95, 200", "nan, 1"])
def test_parse_coordinates_rejects(text):
    assert parse_coordinates(text) is None
