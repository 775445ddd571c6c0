"""Tests for rule validation and the due-day predicate."""

from datetime import date

import pytest

from smart_roster.domain.types import DAY_KEYS, TaskRule
from smart_roster.exceptions import MalformedRuleError
from smart_roster.services.recurrence import effective_month_day, is_due, split_valid_rules, validate_rule


def _rule(**kwargs):
    base = dict(id=1, code="TST", name="Test Task", type="general")
    base.update(kwargs)
    return TaskRule(**base)


def test_daily_rule_due_every_day():
    rule = _rule()
    assert all(is_due(rule, day) for day in DAY_KEYS)

    rule = _rule(frequency="daily")
    assert all(is_due(rule, day) for day in DAY_KEYS)


def test_excluded_days_never_due():
    """Exclusions win over every frequency."""
    assert not is_due(_rule(excluded_days=["sun", "sat"]), "sun")
    assert is_due(_rule(excluded_days=["sun", "sat"]), "mon")

    weekly = _rule(frequency="weekly", frequency_day="mon", excluded_days=["mon"])
    assert not any(is_due(weekly, day) for day in DAY_KEYS)

    monthly = _rule(frequency="monthly", frequency_date=6, excluded_days=["mon"])
    # 2025-10-06 is a Monday
    assert not is_due(monthly, "mon", date(2025, 10, 6))


def test_weekly_rule_only_on_selected_day():
    rule = _rule(frequency="weekly", frequency_day="tue")
    due = [day for day in DAY_KEYS if is_due(rule, day)]
    assert due == ["tue"]


def test_monthly_rule_matches_day_of_month():
    rule = _rule(frequency="monthly", frequency_date=15)
    assert is_due(rule, "wed", date(2025, 10, 15))
    assert not is_due(rule, "thu", date(2025, 10, 16))


def test_monthly_rule_without_date_is_not_due():
    rule = _rule(frequency="monthly", frequency_date=1)
    assert not is_due(rule, "wed")


def test_monthly_overflow_clamp_and_skip():
    """A 31st rule in a 30-day month fires on the 30th, or not at all with skip."""
    rule = _rule(frequency="monthly", frequency_date=31)
    assert effective_month_day(31, date(2025, 11, 1)) == 30
    assert effective_month_day(31, date(2025, 11, 1), "skip") is None

    assert is_due(rule, "sun", date(2025, 11, 30), overflow="clamp")
    assert not is_due(rule, "sun", date(2025, 11, 30), overflow="skip")

    # February in a non-leap year
    assert is_due(_rule(frequency="monthly", frequency_date=30), "fri", date(2025, 2, 28))


@pytest.mark.parametrize(
    "kwargs, reason",
    [
        ({"frequency": "weekly"}, "day-of-week"),
        ({"frequency": "weekly", "frequency_day": "monday"}, "day-of-week"),
        ({"frequency": "monthly"}, "day-of-month"),
        ({"frequency": "monthly", "frequency_date": 0}, "day-of-month"),
        ({"frequency": "monthly", "frequency_date": 32}, "day-of-month"),
        ({"frequency": "hourly"}, "frequency"),
        ({"type": "urgent"}, "type"),
        ({"excluded_days": ["funday"]}, "excluded"),
    ],
)
def test_validate_rule_rejects_malformed(kwargs, reason):
    with pytest.raises(MalformedRuleError) as exc:
        validate_rule(_rule(**kwargs))
    assert reason in str(exc.value)
    assert exc.value.rule_code == "TST"


def test_split_valid_rules():
    good = _rule(id=1, code="OK")
    bad = _rule(id=2, code="BAD", frequency="weekly")
    valid, errors = split_valid_rules([good, bad])
    assert valid == [good]
    assert [e.rule_code for e in errors] == ["BAD"]
