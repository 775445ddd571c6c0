"""Export envelope file handling."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict

from smart_roster.exceptions import EnvelopeError


ENVELOPE_KEYS = ("schedule", "taskDB", "assignments", "team", "pinnedMsg", "timestamp")


def export_filename(on: date | None = None) -> str:
    on = on or date.today()
    return f"roster_backup_{on.isoformat()}.json"


def write_envelope(envelope: Dict[str, Any], out_dir: str | Path = ".", on: date | None = None) -> Path:
    """
    Write an export envelope to ``<out_dir>/roster_backup_<date>.json``.

    Returns:
        Path of the written file
    """
    missing = [k for k in ENVELOPE_KEYS if k not in envelope]
    if missing:
        raise EnvelopeError(f"Envelope is missing {missing}")
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(on)
    path.write_text(json.dumps(envelope, indent=2), encoding="utf-8")
    print(f"[INFO] Exported backup to {path}")
    return path


def read_envelope(path: str | Path) -> Dict[str, Any]:
    """
    Read an export file.

    Raises:
        EnvelopeError: If the file is not a JSON object
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise EnvelopeError(f"Could not read export file {path}: {e}") from e
    if not isinstance(data, dict):
        raise EnvelopeError(f"Export file {path} must contain a JSON object")
    return data
