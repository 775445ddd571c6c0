"""SQLAlchemy models for the per-user roster record store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class ScheduleRecord(Base):
    """Latest week roster snapshot for a user."""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    schedule_data = Column(JSON, nullable=False)  # {"week_period": ..., "shifts": [...]}
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<ScheduleRecord(id={self.id}, user='{self.user_id}')>"


class TaskRuleRecord(Base):
    """The user's task rule list, stored as one document."""

    __tablename__ = "task_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    tasks = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<TaskRuleRecord(id={self.id}, user='{self.user_id}')>"


class AssignmentRecord(Base):
    """Task assignment map keyed by "<day>-<row id>"."""

    __tablename__ = "task_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    assignments = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<AssignmentRecord(id={self.id}, user='{self.user_id}')>"


class TeamRecord(Base):
    """Team / employee list."""

    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    team_members = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<TeamRecord(id={self.id}, user='{self.user_id}')>"


class SettingsRecord(Base):
    """Per-user settings; currently only the pinned message."""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    pinned_message = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<SettingsRecord(id={self.id}, user='{self.user_id}')>"


class CalendarEventRecord(Base):
    """Operational calendar event (deep clean, audit, birthday, ...)."""

    __tablename__ = "calendar_events"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String(30), nullable=False, default="other")
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_pattern = Column(String(10), nullable=True)  # daily, weekly, monthly, yearly
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<CalendarEventRecord(id='{self.id}', date={self.date}, type='{self.event_type}')>"
