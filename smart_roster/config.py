"""Configuration loading (JSON or YAML) with environment overrides."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml


MONTHLY_OVERFLOW_POLICIES = ("clamp", "skip")


@dataclass
class RosterConfig:
    db_url: str = "sqlite:///roster.db"
    user_id: str | None = None
    gemini_api_key: str | None = None
    ocr_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.5-flash"
    huddle_model: str = "gemini-2.0-flash"
    default_role: str = "Stock"
    # What a monthly rule does when its day-of-month is past the month's end
    monthly_overflow: str = "clamp"
    templates_path: str = "roster_local.json"

    def validate(self) -> None:
        if self.monthly_overflow not in MONTHLY_OVERFLOW_POLICIES:
            raise ValueError(
                f"monthly_overflow must be one of {MONTHLY_OVERFLOW_POLICIES}, got {self.monthly_overflow!r}"
            )
        if not self.db_url:
            raise ValueError("db_url must not be empty")
        if not self.default_role.strip():
            raise ValueError("default_role must not be blank")


_ENV_OVERRIDES = {
    "ROSTER_DB_URL": "db_url",
    "ROSTER_USER_ID": "user_id",
    "GEMINI_API_KEY": "gemini_api_key",
}


def _read_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text) if text.strip() else {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: str | Path | None = None, env: Dict[str, str] | None = None) -> RosterConfig:
    """
    Load configuration from a JSON/YAML file, then apply environment overrides.

    Args:
        path: Optional path to a .json, .yaml or .yml file
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated RosterConfig

    Raises:
        ValueError: On unknown keys or invalid values
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}
    if path is not None:
        data = _read_file(Path(path))

    known = {f.name for f in fields(RosterConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    for env_name, attr in _ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value:
            data[attr] = value

    cfg = RosterConfig(**data)
    cfg.validate()
    return cfg
