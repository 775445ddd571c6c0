"""CSV import utilities for the team list and week roster."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from smart_roster.domain.types import DAY_KEYS, OFF, Employee, ScheduleData, ShiftRow


def _text(value) -> str | None:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def import_team_csv(csv_path: str | Path) -> List[Employee]:
    """
    Read a team list from CSV.

    Expected columns: id, name, role; optional is_active, email, phone and
    aliases (semicolon-separated alternate spellings).

    Args:
        csv_path: Path to team CSV

    Returns:
        List of Employee in file order
    """
    df = pd.read_csv(csv_path, dtype=str)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()

    missing = {"id", "name"} - set(df.columns)
    if missing:
        raise ValueError(f"Team CSV is missing columns: {sorted(missing)}")

    team = []
    for _, row in df.iterrows():
        active = _text(row.get("is_active"))
        aliases = _text(row.get("aliases"))
        team.append(
            Employee(
                id=str(row["id"]).strip(),
                name=str(row["name"]).strip(),
                role=_text(row.get("role")) or "Stock",
                is_active=active is None or active.upper() in ["TRUE", "T", "1", "YES", "Y"],
                email=_text(row.get("email")),
                phone=_text(row.get("phone")),
                aliases=[a.strip() for a in aliases.split(";") if a.strip()] if aliases else [],
            )
        )

    print(f"[INFO] Imported {len(team)} team members from {csv_path}")
    return team


def import_schedule_csv(csv_path: str | Path, week_period: str = "Imported Week") -> ScheduleData:
    """
    Read a week roster from CSV with columns name, role, sun..sat.

    Blank day cells become OFF.
    """
    df = pd.read_csv(csv_path, dtype=str)
    df.columns = df.columns.str.lower().str.strip()
    if "name" not in df.columns:
        raise ValueError("Schedule CSV needs a 'name' column")

    shifts = []
    for i, row in df.iterrows():
        days = {day: (_text(row.get(day)) or OFF) for day in DAY_KEYS}
        days = {day: OFF if value.upper() == OFF else value for day, value in days.items()}
        shifts.append(
            ShiftRow(
                id=_text(row.get("id")) or str(i + 1),
                name=str(row["name"]).strip(),
                role=_text(row.get("role")) or "Stock",
                **days,
            )
        )

    print(f"[INFO] Imported {len(shifts)} roster rows from {csv_path}")
    return ScheduleData(week_period=week_period, shifts=shifts)
