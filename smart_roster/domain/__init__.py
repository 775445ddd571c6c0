"""Domain types, record-store models and data access layer."""

from .models import (
    AssignmentRecord,
    Base,
    CalendarEventRecord,
    ScheduleRecord,
    SettingsRecord,
    TaskRuleRecord,
    TeamRecord,
)
from .repositories import (
    AssignmentRepository,
    CalendarEventRepository,
    ScheduleRepository,
    SettingsRepository,
    TaskRuleRepository,
    TeamRepository,
)
from .types import (
    DAY_KEYS,
    OFF,
    AssignedTask,
    CalendarEvent,
    Employee,
    ScheduleData,
    ShiftRow,
    TaskAssignmentMap,
    TaskRule,
)

__all__ = [
    "Base",
    "ScheduleRecord",
    "TaskRuleRecord",
    "AssignmentRecord",
    "TeamRecord",
    "SettingsRecord",
    "CalendarEventRecord",
    "ScheduleRepository",
    "TaskRuleRepository",
    "AssignmentRepository",
    "TeamRepository",
    "SettingsRepository",
    "CalendarEventRepository",
    "DAY_KEYS",
    "OFF",
    "Employee",
    "ShiftRow",
    "ScheduleData",
    "TaskRule",
    "AssignedTask",
    "TaskAssignmentMap",
    "CalendarEvent",
]
