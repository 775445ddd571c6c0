"""Calendar of operational events: CRUD plus recurrence expansion."""

from __future__ import annotations

import calendar
import uuid
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from smart_roster.domain.models import CalendarEventRecord
from smart_roster.domain.repositories import CalendarEventRepository
from smart_roster.domain.types import EVENT_TYPES, RECURRING_PATTERNS, CalendarEvent
from smart_roster.exceptions import NotAuthenticatedError


def _to_event(record: CalendarEventRecord) -> CalendarEvent:
    return CalendarEvent(
        id=record.id,
        date=record.date,
        title=record.title,
        event_type=record.event_type,
        description=record.description,
        is_recurring=bool(record.is_recurring),
        recurring_pattern=record.recurring_pattern,
        created_at=record.created_at.isoformat() if record.created_at else None,
        updated_at=record.updated_at.isoformat() if record.updated_at else None,
    )


def _check_event(event: CalendarEvent) -> None:
    if not event.title or not event.title.strip():
        raise ValueError("Event title must not be blank")
    date.fromisoformat(event.date)
    if event.event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type {event.event_type!r}; expected one of {EVENT_TYPES}")
    if event.is_recurring and event.recurring_pattern not in RECURRING_PATTERNS:
        raise ValueError(f"Recurring event needs a pattern from {RECURRING_PATTERNS}")


def occurs_on(event: CalendarEvent, day: date) -> bool:
    """Whether an event (or one of its repetitions) falls on a date."""
    start = date.fromisoformat(event.date)
    if day == start:
        return True
    if not event.is_recurring or day < start:
        return False

    pattern = event.recurring_pattern
    if pattern == "daily":
        return True
    if pattern == "weekly":
        return day.weekday() == start.weekday()
    if pattern == "monthly":
        last = calendar.monthrange(day.year, day.month)[1]
        return day.day == min(start.day, last)
    if pattern == "yearly":
        if (start.month, start.day) == (2, 29) and not calendar.isleap(day.year):
            return (day.month, day.day) == (2, 28)
        return (day.month, day.day) == (start.month, start.day)
    return False


class CalendarService:
    """Per-user calendar event store."""

    def __init__(self, session: Session, user_id: Optional[str]):
        if not user_id:
            raise NotAuthenticatedError()
        self.session = session
        self.user_id = user_id

    def list_events(self) -> List[CalendarEvent]:
        return [_to_event(r) for r in CalendarEventRepository.get_all(self.session, self.user_id)]

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        record = CalendarEventRepository.get_by_id(self.session, self.user_id, event_id)
        return _to_event(record) if record is not None else None

    def create_event(self, event: CalendarEvent) -> CalendarEvent:
        _check_event(event)
        record = CalendarEventRecord(
            id=event.id or uuid.uuid4().hex,
            user_id=self.user_id,
            date=event.date,
            title=event.title.strip(),
            description=event.description,
            event_type=event.event_type,
            is_recurring=event.is_recurring,
            recurring_pattern=event.recurring_pattern if event.is_recurring else None,
        )
        record = CalendarEventRepository.create(self.session, record)
        print(f"[INFO] Created event '{record.title}' on {record.date}")
        return _to_event(record)

    def update_event(self, event: CalendarEvent) -> CalendarEvent:
        _check_event(event)
        record = CalendarEventRepository.get_by_id(self.session, self.user_id, event.id)
        if record is None:
            raise KeyError(f"No event with id {event.id!r}")
        record.date = event.date
        record.title = event.title.strip()
        record.description = event.description
        record.event_type = event.event_type
        record.is_recurring = event.is_recurring
        record.recurring_pattern = event.recurring_pattern if event.is_recurring else None
        CalendarEventRepository.update(self.session, record)
        return _to_event(record)

    def delete_event(self, event_id: str) -> bool:
        deleted = CalendarEventRepository.delete(self.session, self.user_id, event_id)
        if deleted:
            print(f"[INFO] Deleted event {event_id}")
        return deleted > 0

    def events_on(self, day: date) -> List[CalendarEvent]:
        return [e for e in self.list_events() if occurs_on(e, day)]

    def events_in_month(self, year: int, month: int) -> Dict[date, List[CalendarEvent]]:
        """Date -> events for every day of a month that has at least one event."""
        events = self.list_events()
        by_day: Dict[date, List[CalendarEvent]] = defaultdict(list)
        for day_num in range(1, calendar.monthrange(year, month)[1] + 1):
            day = date(year, month, day_num)
            for event in events:
                if occurs_on(event, day):
                    by_day[day].append(event)
        return dict(by_day)

    def upcoming(self, from_date: date, limit: int = 10, horizon_days: int = 366) -> List[tuple]:
        """Next (date, event) occurrences starting at from_date."""
        events = self.list_events()
        found: List[tuple] = []
        for offset in range(horizon_days):
            day = from_date + timedelta(days=offset)
            for event in events:
                if occurs_on(event, day):
                    found.append((day, event))
                    if len(found) >= limit:
                        return found
        return found
