"""Task-assignment engine."""

from .resolver import (
    AssignmentResolver,
    ResolutionResult,
    apply_to_map,
    apply_week,
    tasks_for,
    toggle_complete,
)

__all__ = [
    "AssignmentResolver",
    "ResolutionResult",
    "apply_to_map",
    "apply_week",
    "tasks_for",
    "toggle_complete",
]
