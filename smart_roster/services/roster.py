"""Roster grid helpers: normalization, edits and name reconciliation."""

from __future__ import annotations

import time
from typing import Any, Dict, Iterable, List

from smart_roster.domain.defaults import DEFAULT_WEEK_PERIOD
from smart_roster.domain.types import DAY_KEYS, OFF, Employee, ScheduleData, ShiftRow

from .matching import NameIndex


SHIFT_PRESETS = [
    ("OFF", OFF),
    ("12AM-8AM", "12:00AM-8:00AM"),
    ("1AM-9AM", "1:00AM-9:00AM"),
    ("4AM-12PM", "4:00AM-12:00PM"),
    ("5AM-1PM", "5:00AM-1:00PM"),
    ("7AM-3PM", "7:00AM-3:00PM"),
    ("11:30AM-7PM", "11:30AM-7:00PM"),
    ("1PM-9PM", "1:00PM-9:00PM"),
]

_PRESETS_BY_LABEL = {label.upper(): value for label, value in SHIFT_PRESETS}


def is_off(value: str | None) -> bool:
    """Blank cells and any casing of OFF mean the person is not working."""
    return value is None or not str(value).strip() or str(value).strip().upper() == OFF


def normalize_value(value: Any) -> str:
    if is_off(value):
        return OFF
    return str(value).strip()


def expand_preset(value: Any) -> str:
    """Full shift text for a preset label ("7AM-3PM"); other values are only normalized."""
    text = normalize_value(value)
    return _PRESETS_BY_LABEL.get(text.upper(), text)


def normalize_row(data: Dict[str, Any], row_id: str, default_role: str = "Stock") -> ShiftRow:
    """Build a ShiftRow with all seven days present and a role filled in."""
    days = {day: normalize_value(data.get(day)) for day in DAY_KEYS}
    return ShiftRow(
        id=row_id,
        name=str(data.get("name") or "").strip(),
        role=str(data.get("role") or "").strip() or default_role,
        is_manual=bool(data.get("isManual", False)),
        **days,
    )


def new_row_id(offset: int = 0) -> str:
    return str(int(time.time() * 1000) + offset)


def synthesize_week(team: Iterable[Employee], week_period: str = DEFAULT_WEEK_PERIOD) -> ScheduleData:
    """All-OFF week with one row per team member, ids taken from the team."""
    shifts = [
        ShiftRow(id=emp.id or str(i + 1), name=emp.name, role=emp.role)
        for i, emp in enumerate(team)
    ]
    return ScheduleData(week_period=week_period, shifts=shifts)


def _require_row(schedule: ScheduleData, row_id: str) -> ShiftRow:
    row = schedule.row(row_id)
    if row is None:
        raise KeyError(f"No roster row with id {row_id!r}")
    return row


def update_shift(schedule: ScheduleData, row_id: str, day: str, value: str) -> ScheduleData:
    """Set one cell (a preset label or free text). Edited rows are flagged as manual."""
    if day not in DAY_KEYS:
        raise ValueError(f"Unknown day key: {day!r}")
    row = _require_row(schedule, row_id)
    setattr(row, day, expand_preset(value))
    row.is_manual = True
    return schedule


def copy_shift_across_week(schedule: ScheduleData, row_id: str, value: str) -> ScheduleData:
    row = _require_row(schedule, row_id)
    for day in DAY_KEYS:
        setattr(row, day, expand_preset(value))
    row.is_manual = True
    return schedule


def add_employee(schedule: ScheduleData, name: str, role: str = "Stock") -> ShiftRow:
    if not name or not name.strip():
        raise ValueError("Employee name must not be blank")
    row = ShiftRow(id=new_row_id(len(schedule.shifts)), name=name.strip(), role=role, is_manual=True)
    schedule.shifts.append(row)
    return row


def remove_employee(schedule: ScheduleData, row_id: str) -> ScheduleData:
    _require_row(schedule, row_id)
    schedule.shifts = [row for row in schedule.shifts if row.id != row_id]
    return schedule


def reconcile_names(schedule: ScheduleData, team: Iterable[Employee]) -> List[str]:
    """
    Rewrite OCR spellings to canonical team names using registered aliases.

    Returns:
        Names that matched nobody on the team
    """
    index = NameIndex(team)
    unmatched: List[str] = []
    for row in schedule.shifts:
        emp = index.lookup(row.name)
        if emp is None:
            unmatched.append(row.name)
            continue
        if row.name != emp.name:
            print(f"[INFO] Reconciled roster name '{row.name}' -> '{emp.name}'")
            row.name = emp.name
    if unmatched:
        print(f"[WARN] {len(unmatched)} roster name(s) not on the team: {unmatched}")
    return unmatched


def working_rows(schedule: ScheduleData, day: str) -> List[ShiftRow]:
    """Rows scheduled to work on a day, in roster order."""
    return [row for row in schedule.shifts if not is_off(row.value_for(day))]
