"""Tests for the assignment resolver."""

import itertools
from datetime import date

import pytest

from smart_roster.domain.types import Employee, ScheduleData, ShiftRow, TaskRule
from smart_roster.engine.resolver import (
    AssignmentResolver,
    apply_to_map,
    apply_week,
    tasks_for,
    toggle_complete,
)


def _row(row_id, name, **days):
    return ShiftRow(id=row_id, name=name, role="Stock", **days)


@pytest.fixture
def schedule():
    """Alice off Monday, Bob and Cara working Monday, Dan off all week."""
    return ScheduleData(
        week_period="10/05 - 10/11",
        shifts=[
            _row("1", "Alice", sun="7:00AM-3:00PM", tue="7:00AM-3:00PM"),
            _row("2", "Bob", mon="6:00AM-2:00PM", tue="6:00AM-2:00PM"),
            _row("3", "Cara", mon="12:00PM-8:00PM", wed="12:00PM-8:00PM"),
            _row("4", "Dan"),
        ],
    )


@pytest.fixture
def team():
    return [
        Employee(id="1", name="Alice", role="Lead"),
        Employee(id="2", name="Bob", role="Stock", aliases=["Smith, Robert"]),
        Employee(id="3", name="Cara", role="Stock"),
        Employee(id="4", name="Dan", role="Stock"),
    ]


def _counter_ids():
    counter = itertools.count(1)
    return lambda: f"inst-{next(counter)}"


def test_weekly_rule_falls_back_to_next_working_person(schedule, team):
    """Alice is off Monday, so Bob gets the Monday-only task."""
    rule = TaskRule(
        id=1, code="TRK", name="Unload Truck", type="shift_based",
        fallback_chain=["Alice", "Bob"], frequency="weekly", frequency_day="mon",
    )
    results = AssignmentResolver().resolve_week([rule], schedule, team)

    assert list(results["mon"].assignments) == ["mon-2"]
    assert results["mon"].assignments["mon-2"][0].rule.code == "TRK"
    for day in ("sun", "tue", "wed", "thu", "fri", "sat"):
        assert results[day].assignments == {}
        assert results[day].unresolved == []


def test_first_eligible_in_chain_wins(schedule, team):
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Cara", "Bob"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert list(result.assignments) == ["mon-3"]


def test_chain_matches_alias_case_insensitively(team):
    """OCR spelling on the roster is matched through the employee's alias."""
    schedule = ScheduleData(
        week_period="wk",
        shifts=[_row("77", "SMITH, ROBERT", fri="9:00AM-5:00PM")],
    )
    rule = TaskRule(id=1, code="FCE", name="Face", type="general", fallback_chain=["bob"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "fri")
    assert list(result.assignments) == ["fri-77"]


def test_inactive_employee_is_skipped(schedule, team):
    team[1].is_active = False  # Bob
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Bob", "Cara"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert list(result.assignments) == ["mon-3"]


def test_all_staff_assigns_every_working_active_person(schedule, team):
    team[2].is_active = False  # Cara
    rule = TaskRule(id=1, code="HDL", name="Huddle", type="all_staff")
    result = AssignmentResolver().resolve_day([rule], schedule, team, "tue")
    assert sorted(result.assignments) == ["tue-1", "tue-2"]

    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert list(result.assignments) == ["mon-2"]


def test_all_staff_with_matching_chain_assigns_only_chain_person(schedule, team):
    rule = TaskRule(id=1, code="HDL", name="Huddle", type="all_staff", fallback_chain=["Cara"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert list(result.assignments) == ["mon-3"]


def test_manual_rule_is_left_for_a_human(schedule, team):
    rule = TaskRule(id=1, code="DCL", name="Deep Clean", type="manual", fallback_chain=["Dan"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert result.assignments == {}
    assert result.manual == [rule]
    assert result.unresolved == []


def test_unmatched_rule_is_reported_unresolved(schedule, team):
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Dan", "Zoe"])
    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")
    assert result.assignments == {}
    assert result.unresolved == [rule]


def test_malformed_rule_is_skipped_without_aborting(schedule, team):
    broken = TaskRule(id=1, code="BAD", name="Broken", type="general", frequency="weekly")
    good = TaskRule(id=2, code="FCE", name="Face", type="general", fallback_chain=["Bob"])
    result = AssignmentResolver().resolve_day([broken, good], schedule, team, "mon")

    assert [e.rule_code for e in result.skipped] == ["BAD"]
    assert [t.rule.code for t in result.assignments["mon-2"]] == ["FCE"]


def test_excluded_day_never_assigned(schedule, team):
    rule = TaskRule(
        id=1, code="CLS", name="Close", type="all_staff", excluded_days=["tue"],
    )
    result = AssignmentResolver().resolve_day([rule], schedule, team, "tue")
    assert result.assignments == {}
    assert result.unresolved == []


def test_tasks_keep_rule_order_and_start_incomplete(schedule, team):
    rules = [
        TaskRule(id=1, code="A", name="First", type="general", fallback_chain=["Bob"]),
        TaskRule(id=2, code="B", name="Second", type="general", fallback_chain=["Bob"]),
    ]
    result = AssignmentResolver().resolve_day(rules, schedule, team, "mon")
    tasks = result.assignments["mon-2"]
    assert [t.rule.code for t in tasks] == ["A", "B"]
    assert all(t.is_complete is False for t in tasks)
    assert len({t.instance_id for t in tasks}) == 2


def test_resolution_is_deterministic_up_to_instance_ids(schedule, team):
    rules = [
        TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Alice", "Bob"]),
        TaskRule(id=2, code="HDL", name="Huddle", type="all_staff"),
        TaskRule(id=3, code="DCL", name="Deep Clean", type="manual"),
    ]
    first = AssignmentResolver().resolve_day(rules, schedule, team, "mon")
    second = AssignmentResolver().resolve_day(rules, schedule, team, "mon")

    assert first.signatures() == second.signatures()
    assert list(first.assignments) == list(second.assignments)
    ids_first = {t.instance_id for tasks in first.assignments.values() for t in tasks}
    ids_second = {t.instance_id for tasks in second.assignments.values() for t in tasks}
    assert ids_first.isdisjoint(ids_second)


def test_monthly_rule_with_week_start(schedule, team):
    """Week of Sunday 2025-10-05; a rule on the 7th lands on Tuesday."""
    rule = TaskRule(
        id=1, code="INV", name="Inventory", type="general",
        fallback_chain=["Bob"], frequency="monthly", frequency_date=7,
    )
    results = AssignmentResolver().resolve_week([rule], schedule, team, week_start=date(2025, 10, 5))
    assigned_days = [day for day, r in results.items() if r.assignments]
    assert assigned_days == ["tue"]


def test_monthly_rule_not_evaluated_without_date(schedule, team):
    rule = TaskRule(
        id=1, code="INV", name="Inventory", type="general",
        fallback_chain=["Bob"], frequency="monthly", frequency_date=7,
    )
    result = AssignmentResolver().resolve_day([rule], schedule, team, "tue")
    assert result.assignments == {}
    assert result.unresolved == []


def test_date_must_match_day(schedule, team):
    with pytest.raises(ValueError):
        AssignmentResolver().resolve_day([], schedule, team, "mon", date(2025, 10, 7))
    with pytest.raises(ValueError):
        AssignmentResolver().resolve_week([], schedule, team, week_start=date(2025, 10, 6))


def test_apply_to_map_replaces_only_that_day(schedule, team):
    ids = _counter_ids()
    resolver = AssignmentResolver(id_factory=ids)
    rule = TaskRule(id=1, code="HDL", name="Huddle", type="all_staff")

    week = apply_week({}, resolver.resolve_week([rule], schedule, team))
    assert sorted(week) == ["mon-2", "mon-3", "sun-1", "tue-1", "tue-2", "wed-3"]

    # Cara calls out Monday; recompute only Monday
    schedule.shifts[2].mon = "OFF"
    updated = apply_to_map(week, resolver.resolve_day([rule], schedule, team, "mon"))
    assert sorted(updated) == ["mon-2", "sun-1", "tue-1", "tue-2", "wed-3"]
    assert updated["tue-1"] is week["tue-1"]


def test_tasks_for_and_toggle_complete(schedule, team):
    resolver = AssignmentResolver(id_factory=_counter_ids())
    rule = TaskRule(id=1, code="FCE", name="Face", type="general", fallback_chain=["Bob"])
    assignments = resolver.resolve_day([rule], schedule, team, "mon").assignments

    tasks = tasks_for(assignments, "mon", "2")
    assert [t.instance_id for t in tasks] == ["inst-1"]
    assert tasks_for(assignments, "mon", "1") == []

    assert toggle_complete(assignments, "mon-2", "inst-1").is_complete is True
    assert toggle_complete(assignments, "mon-2", "inst-1").is_complete is False
    with pytest.raises(KeyError):
        toggle_complete(assignments, "mon-2", "missing")


def test_alias_does_not_shadow_another_members_name():
    """Ken's alias "Kenneth" is also a teammate's real name; Ken's task never goes to Kenneth."""
    team = [
        Employee(id="1", name="Ken", role="Lead", aliases=["Kenneth"]),
        Employee(id="2", name="Kenneth", role="Stock"),
    ]
    schedule = ScheduleData(week_period="wk", shifts=[_row("1", "Ken"), _row("2", "Kenneth", mon="7:00AM-3:00PM")])
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Ken"])

    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")

    assert result.assignments == {}
    assert result.unresolved == [rule]


def test_active_flag_comes_from_the_named_member():
    """Ken is inactive, but Kenneth (also Ken's alias) is active and gets his own task."""
    team = [
        Employee(id="1", name="Ken", role="Lead", aliases=["Kenneth"], is_active=False),
        Employee(id="2", name="Kenneth", role="Stock"),
    ]
    schedule = ScheduleData(week_period="wk", shifts=[_row("2", "Kenneth", mon="7:00AM-3:00PM")])
    rule = TaskRule(id=1, code="OPN", name="Open", type="skilled", fallback_chain=["Kenneth"])

    result = AssignmentResolver().resolve_day([rule], schedule, team, "mon")

    assert list(result.assignments) == ["mon-2"]
