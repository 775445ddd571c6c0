"""Command-line interface for the roster assistant."""

from __future__ import annotations

import argparse
import mimetypes
from datetime import date
from pathlib import Path

from smart_roster.ai.client import make_client
from smart_roster.ai.ocr import OCRService
from smart_roster.ai.workplace import generate_daily_huddle
from smart_roster.config import RosterConfig, load_config
from smart_roster.domain.db import get_session, init_database
from smart_roster.domain.types import DAY_KEYS, DAY_LABELS, EVENT_TYPES, RECURRING_PATTERNS, CalendarEvent, day_key_for
from smart_roster.engine.resolver import AssignmentResolver, apply_to_map, apply_week
from smart_roster.io.export_csv import export_assignments_csv, working_days_summary
from smart_roster.io.export_json import read_envelope, write_envelope
from smart_roster.io.import_csv import import_schedule_csv, import_team_csv
from smart_roster.io.local_store import LocalStore
from smart_roster.services.calendar_events import CalendarService
from smart_roster.services.roster import (
    SHIFT_PRESETS,
    copy_shift_across_week,
    reconcile_names,
    update_shift,
    working_rows,
)
from smart_roster.services.storage import StorageService
from smart_roster.services.templates import TemplateStore


def _load_cfg(args: argparse.Namespace) -> RosterConfig:
    cfg = load_config(args.config)
    if args.db:
        cfg.db_url = args.db
    if args.user:
        cfg.user_id = args.user
    return cfg


def _run(args: argparse.Namespace, label: str, action) -> None:
    """Open a session, run ``action(cfg, session)``, report and re-raise failures."""
    cfg = _load_cfg(args)
    session = get_session(cfg.db_url)
    try:
        action(cfg, session)
    except Exception as e:
        session.rollback()
        print(f"[ERROR] {label} failed: {e}")
        raise
    finally:
        session.close()


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _load_cfg(args)
    init_database(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_import_team(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        team = import_team_csv(args.csv)
        storage.save_team(team)
        print(f"[OK] Imported {len(team)} team members")

    _run(args, "Team import", action)


def _cmd_import_schedule(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        schedule = import_schedule_csv(args.csv, week_period=args.week_period)
        reconcile_names(schedule, storage.get_team())
        storage.save_schedule(schedule)
        print(f"[OK] Imported roster with {len(schedule.shifts)} rows")

    _run(args, "Schedule import", action)


def _cmd_ocr(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        image_path = Path(args.image)
        mime_type = args.mime or mimetypes.guess_type(image_path.name)[0] or "image/jpeg"
        service = OCRService(make_client(cfg.gemini_api_key), model=cfg.ocr_model, default_role=cfg.default_role)
        schedule = service.parse_schedule(image_path.read_bytes(), mime_type)
        reconcile_names(schedule, storage.get_team())
        if args.save:
            TemplateStore(LocalStore(cfg.templates_path)).remember_last_schedule(storage.get_schedule())
            storage.save_schedule(schedule)
        for row in schedule.shifts:
            cells = " | ".join(f"{day}:{row.value_for(day)}" for day in DAY_KEYS)
            print(f"  {row.name} ({row.role}) {cells}")

    _run(args, "OCR", action)


def _cmd_resolve(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        rules = storage.get_task_db()
        schedule = storage.get_schedule()
        team = storage.get_team()
        resolver = AssignmentResolver(monthly_overflow=cfg.monthly_overflow)
        existing = storage.get_assignments()

        if args.date:
            on_date = date.fromisoformat(args.date)
            result = resolver.resolve_day(rules, schedule, team, day_key_for(on_date), on_date)
            results = {result.day: result}
            assignments = apply_to_map(existing, result)
        elif args.day:
            result = resolver.resolve_day(rules, schedule, team, args.day)
            results = {result.day: result}
            assignments = apply_to_map(existing, result)
        else:
            week_start = date.fromisoformat(args.week_start) if args.week_start else None
            results = resolver.resolve_week(rules, schedule, team, week_start)
            assignments = apply_week(existing, results)

        for day, result in results.items():
            for rule in result.unresolved:
                print(f"[WARN] {DAY_LABELS[day]}: no one available for {rule.code} ({rule.name})")
            for rule in result.manual:
                print(f"[INFO] {DAY_LABELS[day]}: {rule.code} ({rule.name}) needs manual placement")

        if args.persist:
            storage.save_assignments(assignments)
        if args.out:
            export_assignments_csv(assignments, schedule, args.out)
        total = sum(r.assigned_count() for r in results.values())
        print(f"[OK] Resolved {total} task assignment(s) over {len(results)} day(s)")

    _run(args, "Resolution", action)


def _cmd_export(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        path = write_envelope(storage.export_data(), args.out_dir)
        print(f"[OK] Export written to {path}")

    _run(args, "Export", action)


def _cmd_import(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        envelope = read_envelope(args.file)
        storage.import_data(envelope, schedule_only=args.schedule_only)

    _run(args, "Import", action)


def _cmd_pin(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        if args.message is not None:
            storage.save_pinned_message(args.message)
        print(storage.get_pinned_message())

    _run(args, "Pinned message", action)


def _cmd_presets(args: argparse.Namespace) -> None:
    """List the shift presets accepted by the shift command."""
    for label, value in SHIFT_PRESETS:
        print(f"  {label:<12} {value}")


def _cmd_shift(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        schedule = storage.get_schedule()
        if args.all_week:
            copy_shift_across_week(schedule, args.row, args.value)
        else:
            update_shift(schedule, args.row, args.day, args.value)
        storage.save_schedule(schedule)
        row = schedule.row(args.row)
        print(f"[OK] {row.name}: " + " | ".join(f"{day}:{row.value_for(day)}" for day in DAY_KEYS))

    _run(args, "Shift edit", action)


def _cmd_summary(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        schedule = storage.get_schedule()
        print(f"Week: {schedule.week_period}")
        print(working_days_summary(schedule).to_string(index=False))

    _run(args, "Summary", action)


def _cmd_event_add(args: argparse.Namespace) -> None:
    def action(cfg, session):
        events = CalendarService(session, cfg.user_id)
        event = events.create_event(
            CalendarEvent(
                id="",
                date=args.date,
                title=args.title,
                event_type=args.type,
                description=args.description,
                is_recurring=args.recurring is not None,
                recurring_pattern=args.recurring,
            )
        )
        print(f"[OK] Event {event.id} added")

    _run(args, "Event", action)


def _cmd_events(args: argparse.Namespace) -> None:
    def action(cfg, session):
        events = CalendarService(session, cfg.user_id)
        if args.month:
            year, month = (int(x) for x in args.month.split("-"))
            for day, day_events in sorted(events.events_in_month(year, month).items()):
                for event in day_events:
                    print(f"{day.isoformat()}  [{event.label}] {event.title}")
        else:
            start = date.fromisoformat(args.start) if args.start else date.today()
            for day, event in events.upcoming(start, limit=args.limit):
                print(f"{day.isoformat()}  [{event.label}] {event.title}")

    _run(args, "Event listing", action)


def _cmd_template_save(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        TemplateStore(LocalStore(cfg.templates_path)).save_template(args.name, storage.get_schedule())

    _run(args, "Template save", action)


def _cmd_template_load(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        templates = TemplateStore(LocalStore(cfg.templates_path))
        if args.last:
            schedule = templates.load_last_schedule()
            if schedule is None:
                raise SystemExit("No previous schedule stored")
        else:
            found = templates.find_by_name(args.name)
            if found is None:
                raise SystemExit(f"No template named {args.name!r}")
            schedule = templates.load_template(found["id"])
        templates.remember_last_schedule(storage.get_schedule())
        storage.save_schedule(schedule)
        print(f"[OK] Loaded schedule '{schedule.week_period}'")

    _run(args, "Template load", action)


def _cmd_huddle(args: argparse.Namespace) -> None:
    def action(cfg, session):
        storage = StorageService(session, cfg.user_id)
        schedule = storage.get_schedule()
        staff = len(working_rows(schedule, args.day))
        client = make_client(cfg.gemini_api_key)
        print(generate_daily_huddle(client, DAY_LABELS[args.day], staff, args.focus or [], model=cfg.huddle_model))

    _run(args, "Huddle", action)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(prog="smart-roster", description="Retail roster and task assistant")

    # Global options
    parser.add_argument("--config", help="Path to config JSON/YAML")
    parser.add_argument("--db", help="Database URL (default: sqlite:///roster.db)")
    parser.add_argument("--user", help="User identity (default: ROSTER_USER_ID)")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    team = sub.add_parser("import-team", help="Import the team list from CSV")
    team.add_argument("--csv", required=True)
    team.set_defaults(func=_cmd_import_team)

    sched = sub.add_parser("import-schedule", help="Import a week roster from CSV")
    sched.add_argument("--csv", required=True)
    sched.add_argument("--week-period", default="Imported Week")
    sched.set_defaults(func=_cmd_import_schedule)

    ocr = sub.add_parser("ocr", help="Read a photographed schedule")
    ocr.add_argument("--image", required=True)
    ocr.add_argument("--mime", help="Image MIME type (guessed from the extension)")
    ocr.add_argument("--save", action="store_true", help="Replace the stored schedule with the result")
    ocr.set_defaults(func=_cmd_ocr)

    res = sub.add_parser("resolve", help="Resolve task assignments")
    when = res.add_mutually_exclusive_group()
    when.add_argument("--day", choices=DAY_KEYS, help="Single day of the roster week")
    when.add_argument("--date", help="Single calendar date (YYYY-MM-DD)")
    when.add_argument("--week-start", help="Sunday starting the roster week (YYYY-MM-DD)")
    res.add_argument("--persist", action="store_true", help="Save the assignment map")
    res.add_argument("--out", help="Optional: export the task board to CSV")
    res.set_defaults(func=_cmd_resolve)

    exp = sub.add_parser("export", help="Export everything to a JSON backup")
    exp.add_argument("--out-dir", default=".")
    exp.set_defaults(func=_cmd_export)

    imp = sub.add_parser("import", help="Restore from a JSON backup")
    imp.add_argument("--file", required=True)
    imp.add_argument("--schedule-only", action="store_true", help="Only restore schedule and assignments")
    imp.set_defaults(func=_cmd_import)

    pin = sub.add_parser("pin", help="Show or set the pinned message")
    pin.add_argument("--message")
    pin.set_defaults(func=_cmd_pin)

    pre = sub.add_parser("presets", help="List shift presets")
    pre.set_defaults(func=_cmd_presets)

    sh = sub.add_parser("shift", help="Set a roster cell (preset label or free text)")
    sh.add_argument("--row", required=True, help="Roster row id")
    cell = sh.add_mutually_exclusive_group(required=True)
    cell.add_argument("--day", choices=DAY_KEYS)
    cell.add_argument("--all-week", action="store_true", help="Apply to every day")
    sh.add_argument("--value", required=True, help="e.g. 7AM-3PM, OFF or 6:00AM-2:00PM")
    sh.set_defaults(func=_cmd_shift)

    summ = sub.add_parser("summary", help="Working days per person this week")
    summ.set_defaults(func=_cmd_summary)

    ev = sub.add_parser("event-add", help="Add a calendar event")
    ev.add_argument("--date", required=True)
    ev.add_argument("--title", required=True)
    ev.add_argument("--type", choices=EVENT_TYPES, default="other")
    ev.add_argument("--description")
    ev.add_argument("--recurring", choices=RECURRING_PATTERNS)
    ev.set_defaults(func=_cmd_event_add)

    evs = sub.add_parser("events", help="List calendar events")
    evs.add_argument("--month", help="YYYY-MM")
    evs.add_argument("--start", help="List upcoming events from this date")
    evs.add_argument("--limit", type=int, default=10)
    evs.set_defaults(func=_cmd_events)

    ts = sub.add_parser("template-save", help="Save the current schedule as a template")
    ts.add_argument("--name", required=True)
    ts.set_defaults(func=_cmd_template_save)

    tl = sub.add_parser("template-load", help="Replace the schedule with a template")
    which = tl.add_mutually_exclusive_group(required=True)
    which.add_argument("--name")
    which.add_argument("--last", action="store_true", help="Restore the previous schedule")
    tl.set_defaults(func=_cmd_template_load)

    hud = sub.add_parser("huddle", help="Generate a pre-shift huddle")
    hud.add_argument("--day", choices=DAY_KEYS, required=True)
    hud.add_argument("--focus", nargs="*")
    hud.set_defaults(func=_cmd_huddle)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
