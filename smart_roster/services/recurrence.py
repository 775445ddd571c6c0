"""Recurrence and exclusion predicates for task rules."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, List, Tuple

from smart_roster.domain.types import DAY_KEYS, FREQUENCIES, TASK_TYPES, TaskRule
from smart_roster.exceptions import MalformedRuleError


def validate_rule(rule: TaskRule) -> None:
    """
    Check that a rule's recurrence metadata can be evaluated.

    Raises:
        MalformedRuleError: If the type, frequency, selector or excluded days are invalid
    """
    code = rule.code or str(rule.id)

    if rule.type not in TASK_TYPES:
        raise MalformedRuleError(code, f"unknown type {rule.type!r}")

    if rule.frequency is not None and rule.frequency not in FREQUENCIES:
        raise MalformedRuleError(code, f"unknown frequency {rule.frequency!r}")

    if rule.frequency == "weekly" and rule.frequency_day not in DAY_KEYS:
        raise MalformedRuleError(code, "weekly rule needs a day-of-week selector")

    if rule.frequency == "monthly":
        dom = rule.frequency_date
        if not isinstance(dom, int) or isinstance(dom, bool) or not 1 <= dom <= 31:
            raise MalformedRuleError(code, "monthly rule needs a day-of-month selector between 1 and 31")

    bad_days = [d for d in rule.excluded_days if d not in DAY_KEYS]
    if bad_days:
        raise MalformedRuleError(code, f"unknown excluded days {bad_days}")


def effective_month_day(frequency_date: int, on_date: date, overflow: str = "clamp") -> int | None:
    """
    Day of ``on_date``'s month on which a monthly selector fires.

    With ``clamp`` a selector past the month's end fires on the last day;
    with ``skip`` it does not fire that month (returns None).
    """
    days_in_month = calendar.monthrange(on_date.year, on_date.month)[1]
    if frequency_date <= days_in_month:
        return frequency_date
    if overflow == "skip":
        return None
    return days_in_month


def is_due(rule: TaskRule, day: str, on_date: date | None = None, overflow: str = "clamp") -> bool:
    """
    Whether a rule is due on a day.

    Args:
        rule: A rule that passed validate_rule
        day: Day key (sun..sat)
        on_date: Calendar date of that day; required for monthly rules
        overflow: Monthly overflow policy ("clamp" or "skip")

    Returns:
        True when the day is not excluded and the frequency selector matches
    """
    if day in rule.excluded_days:
        return False

    frequency = rule.frequency or "daily"
    if frequency == "daily":
        return True
    if frequency == "weekly":
        return day == rule.frequency_day
    if frequency == "monthly":
        if on_date is None:
            return False
        return on_date.day == effective_month_day(rule.frequency_date, on_date, overflow)
    return False


def split_valid_rules(rules: Iterable[TaskRule]) -> Tuple[List[TaskRule], List[MalformedRuleError]]:
    """Partition rules into evaluable ones and the errors for malformed ones."""
    valid: List[TaskRule] = []
    errors: List[MalformedRuleError] = []
    for rule in rules:
        try:
            validate_rule(rule)
        except MalformedRuleError as e:
            errors.append(e)
            continue
        valid.append(rule)
    return valid, errors
