"""Built-in defaults returned when a user has no stored record yet."""

from __future__ import annotations

from typing import List

from .types import Employee, TaskRule


DEFAULT_PINNED_MESSAGE = "Welcome to the team! Focus on safety and customers today."

DEFAULT_WEEK_PERIOD = "New Week"

# New accounts start with no team; the roster grid is synthesized from
# whatever team the user saves.
DEFAULT_TEAM: List[Employee] = []

DEFAULT_TASK_DB: List[TaskRule] = [
    TaskRule(
        id=1,
        code="OPN",
        name="Open Registers & Count Tills",
        type="skilled",
        due_time="Store Open",
        effort=20,
    ),
    TaskRule(
        id=2,
        code="FSC",
        name="Food Safety Temperature Log",
        type="shift_based",
        due_time="9:00 AM",
        effort=10,
    ),
    TaskRule(
        id=3,
        code="FCE",
        name="Face & Front Shelves",
        type="general",
        effort=30,
    ),
    TaskRule(
        id=4,
        code="HDL",
        name="Pre-Shift Huddle",
        type="all_staff",
        due_time="Shift Start",
        effort=5,
    ),
    TaskRule(
        id=5,
        code="TRK",
        name="Unload Truck",
        type="general",
        effort=90,
        frequency="weekly",
        frequency_day="tue",
    ),
    TaskRule(
        id=6,
        code="DCL",
        name="Deep Clean Cooler",
        type="manual",
        effort=60,
        frequency="monthly",
        frequency_date=1,
    ),
    TaskRule(
        id=7,
        code="CLS",
        name="Close Registers & Deposit",
        type="skilled",
        due_time="Store Close",
        effort=25,
        excluded_days=["sun"],
    ),
]


def default_task_db() -> List[TaskRule]:
    """Fresh copy of the default rule set."""
    return [TaskRule.from_dict(rule.to_dict()) for rule in DEFAULT_TASK_DB]


def default_team() -> List[Employee]:
    return [Employee.from_dict(emp.to_dict()) for emp in DEFAULT_TEAM]
