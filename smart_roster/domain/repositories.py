"""Repository classes for the per-user record store.

Every document table holds at most one live record per user. ``upsert``
looks the record up first and then updates or inserts; there is no
optimistic locking, the last write wins.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from .models import (
    AssignmentRecord,
    CalendarEventRecord,
    ScheduleRecord,
    SettingsRecord,
    TaskRuleRecord,
    TeamRecord,
)


class _DocumentRepository:
    """Shared load/upsert for tables that keep one JSON document per user."""

    model: Any = None
    payload_column: str = ""

    @classmethod
    def get(cls, session: Session, user_id: str):
        """Get the user's record, or None if nothing was saved yet."""
        return session.query(cls.model).filter(cls.model.user_id == user_id).first()

    @classmethod
    def load(cls, session: Session, user_id: str) -> Optional[Any]:
        """Get the stored payload, or None if nothing was saved yet."""
        record = cls.get(session, user_id)
        if record is None:
            return None
        return getattr(record, cls.payload_column)

    @classmethod
    def upsert(cls, session: Session, user_id: str, payload: Any):
        """Update the user's record if present, else insert a new one."""
        try:
            record = cls.get(session, user_id)
            if record is not None:
                setattr(record, cls.payload_column, payload)
                record.updated_at = datetime.utcnow()
            else:
                record = cls.model(user_id=user_id, **{cls.payload_column: payload})
                session.add(record)
            session.commit()
        except Exception:
            session.rollback()
            raise
        return record


class ScheduleRepository(_DocumentRepository):
    """Repository for the week roster snapshot."""

    model = ScheduleRecord
    payload_column = "schedule_data"

    @classmethod
    def get(cls, session: Session, user_id: str) -> Optional[ScheduleRecord]:
        """Get the most recently created schedule for a user."""
        return (
            session.query(ScheduleRecord)
            .filter(ScheduleRecord.user_id == user_id)
            .order_by(ScheduleRecord.created_at.desc(), ScheduleRecord.id.desc())
            .first()
        )


class TaskRuleRepository(_DocumentRepository):
    """Repository for the task rule list."""

    model = TaskRuleRecord
    payload_column = "tasks"


class AssignmentRepository(_DocumentRepository):
    """Repository for the task assignment map."""

    model = AssignmentRecord
    payload_column = "assignments"


class TeamRepository(_DocumentRepository):
    """Repository for the team / employee list."""

    model = TeamRecord
    payload_column = "team_members"


class SettingsRepository(_DocumentRepository):
    """Repository for the pinned message."""

    model = SettingsRecord
    payload_column = "pinned_message"


class CalendarEventRepository:
    """Repository for calendar events."""

    @staticmethod
    def get_all(session: Session, user_id: str) -> List[CalendarEventRecord]:
        """Get all events for a user, ordered by date."""
        return (
            session.query(CalendarEventRecord)
            .filter(CalendarEventRecord.user_id == user_id)
            .order_by(CalendarEventRecord.date, CalendarEventRecord.created_at)
            .all()
        )

    @staticmethod
    def get_by_id(session: Session, user_id: str, event_id: str) -> Optional[CalendarEventRecord]:
        """Get a user's event by ID."""
        return (
            session.query(CalendarEventRecord)
            .filter(CalendarEventRecord.user_id == user_id, CalendarEventRecord.id == event_id)
            .first()
        )

    @staticmethod
    def create(session: Session, event: CalendarEventRecord) -> CalendarEventRecord:
        """Create a new event."""
        try:
            session.add(event)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(event)
        return event

    @staticmethod
    def update(session: Session, event: CalendarEventRecord) -> CalendarEventRecord:
        """Persist changes to an existing event."""
        try:
            event.updated_at = datetime.utcnow()
            session.commit()
        except Exception:
            session.rollback()
            raise
        return event

    @staticmethod
    def delete(session: Session, user_id: str, event_id: str) -> int:
        """Delete an event. Returns number of deleted rows."""
        try:
            count = (
                session.query(CalendarEventRecord)
                .filter(CalendarEventRecord.user_id == user_id, CalendarEventRecord.id == event_id)
                .delete(synchronize_session=False)
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        return count
