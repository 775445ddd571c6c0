"""CSV export utilities for the roster and task board."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from smart_roster.domain.types import DAY_KEYS, ScheduleData, TaskAssignmentMap


ASSIGNMENT_COLUMNS = ["day", "row_id", "name", "code", "task", "type", "due_time", "effort", "complete"]


def assignments_frame(assignments: TaskAssignmentMap, schedule: ScheduleData) -> pd.DataFrame:
    """Flatten an assignment map into one row per task instance, in day order."""
    names = {row.id: row.name for row in schedule.shifts}
    records = []
    for key, tasks in assignments.items():
        day, _, row_id = key.partition("-")
        for task in tasks:
            records.append(
                {
                    "day": day,
                    "row_id": row_id,
                    "name": names.get(row_id, ""),
                    "code": task.rule.code,
                    "task": task.rule.name,
                    "type": task.rule.type,
                    "due_time": task.rule.due_time,
                    "effort": task.rule.effort,
                    "complete": task.is_complete,
                }
            )
    df = pd.DataFrame(records, columns=ASSIGNMENT_COLUMNS)
    if not df.empty:
        df["day_order"] = df["day"].map({d: i for i, d in enumerate(DAY_KEYS)})
        df = df.sort_values(["day_order", "name"], kind="stable").drop(columns="day_order")
        df = df.reset_index(drop=True)
    return df


def export_assignments_csv(
    assignments: TaskAssignmentMap,
    schedule: ScheduleData,
    csv_path: str | Path,
) -> int:
    """
    Export the task board to CSV.

    Returns:
        Number of task rows written
    """
    df = assignments_frame(assignments, schedule)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} assignments to {csv_path}")
    return len(df)


def export_schedule_csv(schedule: ScheduleData, csv_path: str | Path) -> int:
    """Export the roster grid to CSV (id, name, role, sun..sat)."""
    df = pd.DataFrame(
        [row.to_dict() for row in schedule.shifts],
        columns=["id", "name", "role", *DAY_KEYS],
    )
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} roster rows to {csv_path}")
    return len(df)


def working_days_summary(schedule: ScheduleData) -> pd.DataFrame:
    """Count of working days per person, used by the summary command."""
    df = pd.DataFrame(
        [row.to_dict() for row in schedule.shifts],
        columns=["name", *DAY_KEYS],
    )
    if df.empty:
        return pd.DataFrame(columns=["name", "days_working"])
    working = df[list(DAY_KEYS)].apply(lambda col: col.str.strip().str.upper() != "OFF")
    df["days_working"] = working.sum(axis=1)
    return df[["name", "days_working"]]
