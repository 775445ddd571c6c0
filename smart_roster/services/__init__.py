"""Services for roster, task-rule and calendar logic."""

from .calendar_events import CalendarService, occurs_on
from .matching import NameIndex, normalize_name
from .recurrence import is_due, split_valid_rules, validate_rule
from .roster import reconcile_names, synthesize_week, working_rows
from .storage import StorageService
from .templates import TemplateStore

__all__ = [
    "CalendarService",
    "occurs_on",
    "NameIndex",
    "normalize_name",
    "is_due",
    "split_valid_rules",
    "validate_rule",
    "reconcile_names",
    "synthesize_week",
    "working_rows",
    "StorageService",
    "TemplateStore",
]
