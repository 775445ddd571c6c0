"""End-to-end tests for the command-line interface on a temporary SQLite file."""

import json

import pandas as pd
import pytest

from smart_roster.cli import main


pytestmark = pytest.mark.integration


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ROSTER_DB_URL", raising=False)
    db_url = f"sqlite:///{tmp_path / 'roster.db'}"

    def _run(*argv):
        main(["--db", db_url, "--user", "store-1", *argv])

    return _run


@pytest.fixture
def csv_files(tmp_path):
    team = tmp_path / "team.csv"
    team.write_text("id,name,role,aliases\nalice,Alice Smith,Lead,Alice\nbob,Bob Jones,Stock,\n")
    week = tmp_path / "week.csv"
    week.write_text(
        "name,role,sun,mon,tue,wed,thu,fri,sat\n"
        "Alice,Lead,,7:00AM-3:00PM,,,,,\n"
        "Bob Jones,Stock,,6:00AM-2:00PM,,,,,\n"
    )
    return team, week


def test_import_resolve_and_export(run, csv_files, tmp_path, capsys):
    team, week = csv_files
    run("init-db")
    run("import-team", "--csv", str(team))
    run("import-schedule", "--csv", str(week), "--week-period", "10/05 - 10/11")

    board = tmp_path / "board.csv"
    run("resolve", "--day", "mon", "--persist", "--out", str(board))
    out = capsys.readouterr().out
    assert "[OK] Resolved" in out

    df = pd.read_csv(board)
    assert set(df["day"]) == {"mon"}
    assert set(df["code"]) == {"HDL"}
    assert set(df["name"]) == {"Alice Smith", "Bob Jones"}

    run("export", "--out-dir", str(tmp_path / "backups"))
    [backup] = list((tmp_path / "backups").glob("roster_backup_*.json"))
    envelope = json.loads(backup.read_text())
    assert envelope["schedule"]["week_period"] == "10/05 - 10/11"
    assert [m["name"] for m in envelope["team"]] == ["Alice Smith", "Bob Jones"]
    assert any(key.startswith("mon-") for key in envelope["assignments"])


def test_pin_and_summary(run, csv_files, capsys):
    _, week = csv_files
    run("import-schedule", "--csv", str(week))
    run("pin", "--message", "Truck at 6")
    run("summary")
    out = capsys.readouterr().out
    assert "Truck at 6" in out
    assert "Bob Jones" in out


def test_templates_and_events(run, csv_files, capsys):
    _, week = csv_files
    run("import-schedule", "--csv", str(week), "--week-period", "Normal")
    run("template-save", "--name", "Normal Week")
    run("event-add", "--date", "2025-10-06", "--title", "Vendor visit", "--type", "meeting")
    run("events", "--month", "2025-10")
    run("template-load", "--name", "Normal Week")
    out = capsys.readouterr().out
    assert "[Meeting] Vendor visit" in out
    assert "[OK] Loaded schedule 'Normal'" in out


def test_missing_user_is_reported(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ROSTER_USER_ID", raising=False)
    with pytest.raises(Exception):
        main(["--db", f"sqlite:///{tmp_path / 'r.db'}", "pin"])
    assert "[ERROR]" in capsys.readouterr().out


def test_shift_edit_with_presets(run, csv_files, capsys):
    _, week = csv_files
    run("import-schedule", "--csv", str(week))
    run("presets")
    run("shift", "--row", "1", "--day", "wed", "--value", "7AM-3PM")
    run("shift", "--row", "2", "--all-week", "--value", "off")
    run("summary")
    out = capsys.readouterr().out
    assert "11:30AM-7:00PM" in out
    assert "wed:7:00AM-3:00PM" in out
    assert "[OK] Bob Jones: sun:OFF | mon:OFF" in out
