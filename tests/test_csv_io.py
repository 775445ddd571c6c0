"""Tests for CSV import/export functionality."""

import pandas as pd
import pytest

from smart_roster.domain.types import AssignedTask, ScheduleData, ShiftRow, TaskRule
from smart_roster.io.export_csv import export_assignments_csv, export_schedule_csv, working_days_summary
from smart_roster.io.import_csv import import_schedule_csv, import_team_csv


def test_import_team_csv(tmp_path):
    """Test importing the team list from CSV."""
    csv_content = """id,name,role,is_active,email,phone,aliases
1,Ken Andrews,Lead,TRUE,ken@example.com,,Ken;Andrews, Kenneth A
2,Maria Lopez,,no,,555-0100,
"""
    csv_file = tmp_path / "team.csv"
    csv_file.write_text(csv_content.replace("Ken;Andrews, Kenneth A", '"Ken;Andrews, Kenneth A"'))

    team = import_team_csv(csv_file)
    assert [e.name for e in team] == ["Ken Andrews", "Maria Lopez"]

    ken, maria = team
    assert ken.aliases == ["Ken", "Andrews, Kenneth A"]
    assert ken.email == "ken@example.com"
    assert ken.phone is None
    assert ken.is_active is True
    assert maria.role == "Stock"
    assert maria.is_active is False
    assert maria.phone == "555-0100"
    assert maria.aliases == []


def test_import_team_csv_requires_columns(tmp_path):
    csv_file = tmp_path / "team.csv"
    csv_file.write_text("name,role\nA,Stock\n")
    with pytest.raises(ValueError):
        import_team_csv(csv_file)


def test_import_schedule_csv(tmp_path):
    csv_content = """name,role,sun,mon,tue,wed,thu,fri,sat
Alice,Lead,7:00AM-3:00PM,off,,,,,
Bob,,,6:00AM-2:00PM,,,,,
"""
    csv_file = tmp_path / "week.csv"
    csv_file.write_text(csv_content)

    schedule = import_schedule_csv(csv_file, week_period="10/05 - 10/11")
    assert schedule.week_period == "10/05 - 10/11"
    alice, bob = schedule.shifts
    assert (alice.id, bob.id) == ("1", "2")
    assert alice.sun == "7:00AM-3:00PM"
    assert alice.mon == "OFF"
    assert alice.sat == "OFF"
    assert bob.role == "Stock"
    assert bob.mon == "6:00AM-2:00PM"


def _schedule():
    return ScheduleData(
        week_period="wk",
        shifts=[
            ShiftRow(id="1", name="Alice", role="Lead", mon="7:00AM-3:00PM", tue="7:00AM-3:00PM"),
            ShiftRow(id="2", name="Bob", role="Stock", sun="6:00AM-2:00PM"),
        ],
    )


def test_export_assignments_csv(tmp_path):
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", due_time="Store Open", effort=20)
    assignments = {
        "mon-1": [AssignedTask(rule=rule, instance_id="a")],
        "sun-2": [AssignedTask(rule=rule, instance_id="b", is_complete=True)],
    }
    csv_file = tmp_path / "board.csv"
    count = export_assignments_csv(assignments, _schedule(), csv_file)
    assert count == 2

    df = pd.read_csv(csv_file)
    assert list(df["day"]) == ["sun", "mon"]
    assert list(df["name"]) == ["Bob", "Alice"]
    assert list(df["complete"]) == [True, False]


def test_export_schedule_csv_round_trip(tmp_path):
    csv_file = tmp_path / "week.csv"
    assert export_schedule_csv(_schedule(), csv_file) == 2
    schedule = import_schedule_csv(csv_file, week_period="wk")
    assert schedule == _schedule()


def test_working_days_summary():
    summary = working_days_summary(_schedule())
    assert list(summary["name"]) == ["Alice", "Bob"]
    assert list(summary["days_working"]) == [2, 1]
