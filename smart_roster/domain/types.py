"""Plain domain types for rosters, task rules and calendar events.

These are the in-memory snapshots the resolver and services work on. Each
type round-trips through the camelCase JSON documents stored in the record
store and written to export files.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


DAY_KEYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

DAY_LABELS = {
    "sun": "Sunday",
    "mon": "Monday",
    "tue": "Tuesday",
    "wed": "Wednesday",
    "thu": "Thursday",
    "fri": "Friday",
    "sat": "Saturday",
}

OFF = "OFF"

TASK_TYPES = ("skilled", "general", "shift_based", "manual", "all_staff")
FREQUENCIES = ("daily", "weekly", "monthly")

EVENT_TYPE_LABELS = {
    "deep_clean": "Deep Clean",
    "anniversary": "Anniversary",
    "birthday": "Birthday",
    "food_safety_audit": "Food Safety Audit",
    "maintenance": "Maintenance",
    "meeting": "Meeting",
    "training": "Training",
    "other": "Other",
}
EVENT_TYPES = tuple(EVENT_TYPE_LABELS)
RECURRING_PATTERNS = ("daily", "weekly", "monthly", "yearly")


def day_key_for(d) -> str:
    """Day key for a date; Python weekdays start on Monday, day keys on Sunday."""
    return DAY_KEYS[(d.weekday() + 1) % 7]


@dataclass
class Employee:
    id: str
    name: str
    role: str
    is_active: bool = True
    email: Optional[str] = None
    phone: Optional[str] = None
    aliases: List[str] = field(default_factory=list)

    def all_names(self) -> List[str]:
        return [self.name, *self.aliases]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "isActive": self.is_active,
        }
        if self.email is not None:
            data["email"] = self.email
        if self.phone is not None:
            data["phone"] = self.phone
        if self.aliases:
            data["aliases"] = list(self.aliases)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            role=str(data.get("role") or ""),
            is_active=bool(data.get("isActive", True)),
            email=data.get("email"),
            phone=data.get("phone"),
            aliases=[str(a) for a in data.get("aliases") or []],
        )


@dataclass
class ShiftRow:
    """One employee's row in a week's roster: a value per day key."""

    id: str
    name: str
    role: str
    sun: str = OFF
    mon: str = OFF
    tue: str = OFF
    wed: str = OFF
    thu: str = OFF
    fri: str = OFF
    sat: str = OFF
    is_manual: bool = False

    def value_for(self, day: str) -> str:
        if day not in DAY_KEYS:
            raise ValueError(f"Unknown day key: {day!r}")
        return getattr(self, day)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "role": self.role}
        for day in DAY_KEYS:
            data[day] = getattr(self, day)
        if self.is_manual:
            data["isManual"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShiftRow":
        days = {day: str(data.get(day) or OFF) for day in DAY_KEYS}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            role=str(data.get("role") or ""),
            is_manual=bool(data.get("isManual", False)),
            **days,
        )


@dataclass
class ScheduleData:
    week_period: str
    shifts: List[ShiftRow] = field(default_factory=list)

    def row(self, row_id: str) -> Optional[ShiftRow]:
        for row in self.shifts:
            if row.id == row_id:
                return row
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"week_period": self.week_period, "shifts": [s.to_dict() for s in self.shifts]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleData":
        return cls(
            week_period=str(data.get("week_period") or "New Week"),
            shifts=[ShiftRow.from_dict(s) for s in data.get("shifts") or []],
        )


@dataclass
class TaskRule:
    id: int
    code: str
    name: str
    type: str
    fallback_chain: List[str] = field(default_factory=list)
    timing: Optional[str] = None
    due_time: Optional[str] = None
    effort: Optional[int] = None
    frequency: Optional[str] = None
    frequency_day: Optional[str] = None
    frequency_date: Optional[int] = None
    excluded_days: List[str] = field(default_factory=list)

    _OPTIONAL = (
        ("timing", "timing"),
        ("due_time", "dueTime"),
        ("effort", "effort"),
        ("frequency", "frequency"),
        ("frequency_day", "frequencyDay"),
        ("frequency_date", "frequencyDate"),
    )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "type": self.type,
            "fallbackChain": list(self.fallback_chain),
        }
        for attr, key in self._OPTIONAL:
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        if self.excluded_days:
            data["excludedDays"] = list(self.excluded_days)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskRule":
        return cls(
            id=int(data["id"]),
            code=str(data.get("code") or ""),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or "general"),
            fallback_chain=[str(n) for n in data.get("fallbackChain") or []],
            timing=data.get("timing"),
            due_time=data.get("dueTime"),
            effort=data.get("effort"),
            frequency=data.get("frequency"),
            frequency_day=data.get("frequencyDay"),
            frequency_date=data.get("frequencyDate"),
            excluded_days=[str(d) for d in data.get("excludedDays") or []],
        )


@dataclass
class AssignedTask:
    """A TaskRule instantiated for one day and one assignee."""

    rule: TaskRule
    instance_id: str
    is_complete: bool = False

    def signature(self) -> Dict[str, Any]:
        """Comparable view without the per-run instance identifier."""
        return {"rule": self.rule.to_dict(), "isComplete": self.is_complete}

    def to_dict(self) -> Dict[str, Any]:
        data = self.rule.to_dict()
        data["instanceId"] = self.instance_id
        data["isComplete"] = self.is_complete
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssignedTask":
        return cls(
            rule=TaskRule.from_dict(data),
            instance_id=str(data["instanceId"]),
            is_complete=bool(data.get("isComplete", False)),
        )


TaskAssignmentMap = Dict[str, List[AssignedTask]]


def assignment_key(day: str, row_id: str) -> str:
    return f"{day}-{row_id}"


def map_to_dict(assignments: TaskAssignmentMap) -> Dict[str, List[Dict[str, Any]]]:
    return {key: [t.to_dict() for t in tasks] for key, tasks in assignments.items()}


def map_from_dict(data: Dict[str, Any]) -> TaskAssignmentMap:
    return {key: [AssignedTask.from_dict(t) for t in tasks] for key, tasks in (data or {}).items()}


@dataclass
class CalendarEvent:
    id: str
    date: str  # YYYY-MM-DD
    title: str
    event_type: str = "other"
    description: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def label(self) -> str:
        return EVENT_TYPE_LABELS.get(self.event_type, "Other")

    def with_changes(self, **changes) -> "CalendarEvent":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "eventType": self.event_type,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.is_recurring:
            data["isRecurring"] = True
            data["recurringPattern"] = self.recurring_pattern
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data
