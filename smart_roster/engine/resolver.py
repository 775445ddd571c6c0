"""Assignment resolver - turns task rules and a week roster into a day's assignments.

For each rule on an evaluated day:

1. malformed rules are skipped with a warning,
2. the due check applies excluded days, then the frequency selector,
3. the fallback chain is scanned in order and the first working, active,
   name-matching roster row wins,
4. an exhausted chain falls back by rule type (``all_staff`` -> everyone
   working, ``manual`` -> left for a human, anything else -> unresolved),
5. each (rule, row, day) gets a fresh AssignedTask.

Resolution is a pure function of (rules, roster, team, day, date); only the
instance identifiers differ between runs.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from smart_roster.domain.types import (
    DAY_KEYS,
    AssignedTask,
    Employee,
    ScheduleData,
    ShiftRow,
    TaskAssignmentMap,
    TaskRule,
    assignment_key,
    day_key_for,
)
from smart_roster.exceptions import MalformedRuleError
from smart_roster.services.matching import NameIndex
from smart_roster.services.recurrence import is_due, validate_rule
from smart_roster.services.roster import working_rows


@dataclass
class ResolutionResult:
    """Outcome of resolving one day."""

    day: str
    on_date: Optional[date] = None
    assignments: TaskAssignmentMap = field(default_factory=dict)
    unresolved: List[TaskRule] = field(default_factory=list)
    manual: List[TaskRule] = field(default_factory=list)
    skipped: List[MalformedRuleError] = field(default_factory=list)

    def assigned_count(self) -> int:
        return sum(len(tasks) for tasks in self.assignments.values())

    def signatures(self) -> Dict[str, List[dict]]:
        """Assignments without instance identifiers, for comparing runs."""
        return {key: [t.signature() for t in tasks] for key, tasks in self.assignments.items()}


def _new_instance_id() -> str:
    return uuid.uuid4().hex


class AssignmentResolver:
    """
    Resolves due task rules to roster rows.

    The resolver works on in-memory snapshots only; loading and saving
    rules, roster and assignments is the storage gateway's job.
    """

    def __init__(
        self,
        monthly_overflow: str = "clamp",
        id_factory: Callable[[], str] | None = None,
    ):
        """
        Args:
            monthly_overflow: "clamp" or "skip" for monthly selectors past the month's end
            id_factory: Instance id generator (default: random uuid hex)
        """
        self.monthly_overflow = monthly_overflow
        self.id_factory = id_factory or _new_instance_id

    def resolve_day(
        self,
        rules: Iterable[TaskRule],
        schedule: ScheduleData,
        team: Iterable[Employee],
        day: str,
        on_date: date | None = None,
    ) -> ResolutionResult:
        """
        Compute assignments for one day of the roster.

        Args:
            rules: Full rule set, in priority/display order
            schedule: Week roster
            team: Team list (aliases and active flags)
            day: Day key (sun..sat)
            on_date: Calendar date of ``day``; monthly rules need it

        Returns:
            ResolutionResult with the assignment map entries for that day
        """
        if day not in DAY_KEYS:
            raise ValueError(f"Unknown day key: {day!r}")
        if on_date is not None and day_key_for(on_date) != day:
            raise ValueError(f"{on_date.isoformat()} is not a {day}")

        index = NameIndex(team)
        candidates = [row for row in working_rows(schedule, day) if index.is_active(row.name)]
        result = ResolutionResult(day=day, on_date=on_date)

        for rule in rules:
            try:
                validate_rule(rule)
            except MalformedRuleError as e:
                print(f"[WARN] Skipping rule on {day}: {e}")
                result.skipped.append(e)
                continue

            if rule.frequency == "monthly" and on_date is None:
                print(f"[WARN] Rule {rule.code!r} is monthly but no date was given for {day}; not evaluated")
                continue

            if not is_due(rule, day, on_date, self.monthly_overflow):
                continue

            assignees = self._resolve_assignees(rule, candidates, index)
            if not assignees:
                if rule.type == "manual":
                    result.manual.append(rule)
                else:
                    result.unresolved.append(rule)
                continue

            for row in assignees:
                key = assignment_key(day, row.id)
                result.assignments.setdefault(key, []).append(
                    AssignedTask(rule=rule, instance_id=self.id_factory(), is_complete=False)
                )

        print(
            f"[INFO] Resolved {day}: {result.assigned_count()} task(s), "
            f"{len(result.unresolved)} unresolved, {len(result.manual)} manual, {len(result.skipped)} skipped"
        )
        return result

    def _resolve_assignees(
        self,
        rule: TaskRule,
        candidates: List[ShiftRow],
        index: NameIndex,
    ) -> List[ShiftRow]:
        for wanted in rule.fallback_chain:
            for row in candidates:
                if index.same_person(wanted, row.name):
                    return [row]
        if rule.type == "all_staff":
            return list(candidates)
        return []

    def resolve_week(
        self,
        rules: Iterable[TaskRule],
        schedule: ScheduleData,
        team: Iterable[Employee],
        week_start: date | None = None,
    ) -> Dict[str, ResolutionResult]:
        """
        Resolve every day of the week.

        Args:
            week_start: Sunday that starts the roster week; without it
                monthly rules are not evaluated

        Returns:
            Dict of day key -> ResolutionResult, in sun..sat order
        """
        if week_start is not None and day_key_for(week_start) != "sun":
            raise ValueError(f"Week must start on a Sunday, got {week_start.isoformat()}")
        rules = list(rules)
        team = list(team)
        results: Dict[str, ResolutionResult] = {}
        for offset, day in enumerate(DAY_KEYS):
            on_date = week_start + timedelta(days=offset) if week_start is not None else None
            results[day] = self.resolve_day(rules, schedule, team, day, on_date)
        return results


def apply_to_map(existing: TaskAssignmentMap, result: ResolutionResult) -> TaskAssignmentMap:
    """
    Replace one day's entries in an assignment map with a fresh resolution.

    Keys for other days are kept; every key of the resolved day is dropped
    first so rows that no longer get tasks do not keep stale ones.
    """
    prefix = f"{result.day}-"
    merged = {key: tasks for key, tasks in existing.items() if not key.startswith(prefix)}
    merged.update(result.assignments)
    return merged


def apply_week(existing: TaskAssignmentMap, results: Dict[str, ResolutionResult]) -> TaskAssignmentMap:
    merged = dict(existing)
    for result in results.values():
        merged = apply_to_map(merged, result)
    return merged


def tasks_for(assignments: TaskAssignmentMap, day: str, row_id: str) -> List[AssignedTask]:
    return assignments.get(assignment_key(day, row_id), [])


def toggle_complete(assignments: TaskAssignmentMap, key: str, instance_id: str) -> AssignedTask:
    """Flip the completion flag of one task instance."""
    for task in assignments.get(key, []):
        if task.instance_id == instance_id:
            task.is_complete = not task.is_complete
            return task
    raise KeyError(f"No task {instance_id!r} under {key!r}")
