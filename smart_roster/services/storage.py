"""Persistence gateway: per-user load/save of roster, rules, assignments, team and settings.

Loads return a documented default when the user has no record yet; saves are
upserts. Write failures propagate to the caller after the session is rolled
back. Every call needs a user identity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from smart_roster.domain.defaults import DEFAULT_PINNED_MESSAGE, default_task_db, default_team
from smart_roster.domain.repositories import (
    AssignmentRepository,
    ScheduleRepository,
    SettingsRepository,
    TaskRuleRepository,
    TeamRepository,
)
from smart_roster.domain.types import (
    Employee,
    ScheduleData,
    TaskAssignmentMap,
    TaskRule,
    map_from_dict,
    map_to_dict,
)
from smart_roster.exceptions import EnvelopeError, NotAuthenticatedError

from .roster import synthesize_week


class StorageService:
    """Load/save gateway scoped to one authenticated user."""

    def __init__(self, session: Session, user_id: Optional[str]):
        self.session = session
        self._user_id = user_id

    @property
    def user_id(self) -> str:
        if not self._user_id:
            raise NotAuthenticatedError()
        return self._user_id

    # --- Schedule ---

    def get_schedule(self) -> ScheduleData:
        """Stored roster, or an all-OFF week built from the team."""
        data = ScheduleRepository.load(self.session, self.user_id)
        if data:
            return ScheduleData.from_dict(data)
        return synthesize_week(self.get_team())

    def save_schedule(self, schedule: ScheduleData) -> None:
        ScheduleRepository.upsert(self.session, self.user_id, schedule.to_dict())
        print(f"[INFO] Saved schedule '{schedule.week_period}' ({len(schedule.shifts)} rows)")

    # --- Task rules ---

    def get_task_db(self) -> List[TaskRule]:
        """Stored rules; a missing or empty list falls back to the default rule set."""
        data = TaskRuleRepository.load(self.session, self.user_id)
        if not data:
            return default_task_db()
        return [TaskRule.from_dict(r) for r in data]

    def save_task_db(self, rules: List[TaskRule]) -> None:
        TaskRuleRepository.upsert(self.session, self.user_id, [r.to_dict() for r in rules])
        print(f"[INFO] Saved {len(rules)} task rules")

    # --- Assignments ---

    def get_assignments(self) -> TaskAssignmentMap:
        data = AssignmentRepository.load(self.session, self.user_id)
        return map_from_dict(data or {})

    def save_assignments(self, assignments: TaskAssignmentMap) -> None:
        AssignmentRepository.upsert(self.session, self.user_id, map_to_dict(assignments))
        print(f"[INFO] Saved assignments for {len(assignments)} day/person keys")

    # --- Team ---

    def get_team(self) -> List[Employee]:
        data = TeamRepository.load(self.session, self.user_id)
        if data is None:
            return default_team()
        return [Employee.from_dict(e) for e in data]

    def save_team(self, team: List[Employee]) -> None:
        TeamRepository.upsert(self.session, self.user_id, [e.to_dict() for e in team])
        print(f"[INFO] Saved team ({len(team)} members)")

    # --- Pinned message ---

    def get_pinned_message(self) -> str:
        return SettingsRepository.load(self.session, self.user_id) or DEFAULT_PINNED_MESSAGE

    def save_pinned_message(self, message: str) -> None:
        SettingsRepository.upsert(self.session, self.user_id, message)
        print("[INFO] Saved pinned message")

    # --- Export / Import ---

    def export_data(self, now: datetime | None = None) -> Dict[str, Any]:
        """Bundle all five pieces into one JSON-serializable envelope."""
        now = now or datetime.now()
        return {
            "schedule": self.get_schedule().to_dict(),
            "taskDB": [r.to_dict() for r in self.get_task_db()],
            "assignments": map_to_dict(self.get_assignments()),
            "team": [e.to_dict() for e in self.get_team()],
            "pinnedMsg": self.get_pinned_message(),
            "timestamp": now.isoformat(),
        }

    def import_data(self, envelope: Dict[str, Any], schedule_only: bool = False) -> List[str]:
        """
        Restore pieces from an export envelope.

        Args:
            envelope: Parsed export document
            schedule_only: Only write schedule and assignments; keep rules,
                team and pinned message untouched

        Returns:
            Names of the pieces written

        Raises:
            EnvelopeError: If the envelope or any piece in it cannot be parsed
        """
        user_id = self.user_id
        if not isinstance(envelope, dict):
            raise EnvelopeError("Export file must contain a JSON object")

        try:
            schedule = _piece(envelope, "schedule", ScheduleData.from_dict)
            assignments = _piece(envelope, "assignments", map_from_dict)
            rules = team = pinned = None
            if not schedule_only:
                rules = _piece(envelope, "taskDB", lambda d: [TaskRule.from_dict(r) for r in d])
                team = _piece(envelope, "team", lambda d: [Employee.from_dict(e) for e in d])
                pinned = _piece(envelope, "pinnedMsg", str)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise EnvelopeError(f"Export file is malformed: {e}") from e

        written: List[str] = []
        if schedule is not None:
            self.save_schedule(schedule)
            written.append("schedule")
        if rules is not None:
            self.save_task_db(rules)
            written.append("taskDB")
        if assignments is not None:
            self.save_assignments(assignments)
            written.append("assignments")
        if team is not None:
            self.save_team(team)
            written.append("team")
        if pinned is not None:
            self.save_pinned_message(pinned)
            written.append("pinnedMsg")

        mode = "schedule-only" if schedule_only else "full"
        print(f"[OK] Imported ({mode}) for user {user_id}: {', '.join(written) or 'nothing'}")
        return written


def _piece(envelope: Dict[str, Any], key: str, parse):
    value = envelope.get(key)
    if value is None:
        return None
    return parse(value)
