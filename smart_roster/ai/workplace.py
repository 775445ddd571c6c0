"""Workplace photo analysis and pre-shift huddle text."""

from __future__ import annotations

import json
import random
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from smart_roster.domain.types import TASK_TYPES, TaskRule
from smart_roster.exceptions import AIServiceError

from .client import clean_json_string, generate_text, image_part


HUDDLE_FALLBACK = "Team, let's focus on safety and customers today! (AI Offline)"
HUDDLE_EMPTY = "Let's have a great shift team!"

WORKPLACE_PROMPT = """
You are a retail operations expert looking at a photo of a store area.
Name 3-5 specific, actionable tasks that would improve it (stocking,
cleaning, safety, organizing). Be specific to what is visible; no generic
advice.

Return a JSON array of objects:
{"code": "short code such as CLN or STK", "name": "actionable task name",
 "type": "general", "effort": estimated minutes as an integer}
"""

HUDDLE_PROMPT = """
Write a high-energy, 30-second pre-shift huddle speech for a retail team.
Day: {day}
Staff Count: {staff_count}
Focus Areas: {focus}

Keep it professional but motivating. Plain text only, no markdown.
"""


class SuggestedTask(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str
    name: str
    type: str = "general"
    effort: Optional[int] = None


def parse_suggested_tasks(text: str, rng: random.Random | None = None) -> List[TaskRule]:
    """
    Validate the model's task suggestions and turn them into unassigned rules.

    Suggested rules get ids in 8000-8999 and an empty fallback chain.
    """
    rng = rng or random.Random()
    try:
        payload: Any = json.loads(clean_json_string(text or "[]"))
        if not isinstance(payload, list):
            raise ValueError("expected a JSON array of tasks")
        suggestions = [SuggestedTask.model_validate(item) for item in payload]
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        raise AIServiceError("Could not analyze image.") from e

    used_ids: set = set()
    rules = []
    for item in suggestions:
        rule_id = rng.randint(8000, 8999)
        while rule_id in used_ids:
            rule_id = rng.randint(8000, 8999)
        used_ids.add(rule_id)
        rules.append(
            TaskRule(
                id=rule_id,
                code=item.code.strip().upper(),
                name=item.name.strip(),
                type=item.type if item.type in TASK_TYPES else "general",
                effort=item.effort,
            )
        )
    return rules


def analyze_workplace_image(
    client: Any,
    image: bytes,
    mime_type: str = "image/jpeg",
    model: str = "gemini-2.5-flash",
) -> List[TaskRule]:
    """Suggest tasks from a photo of the store."""
    text = generate_text(client, model, [image_part(image, mime_type), WORKPLACE_PROMPT], json_response=True)
    rules = parse_suggested_tasks(text)
    print(f"[OK] Workplace analysis suggested {len(rules)} task(s)")
    return rules


def generate_daily_huddle(
    client: Any,
    day: str,
    staff_count: int,
    focus_areas: List[str],
    model: str = "gemini-2.0-flash",
) -> str:
    """
    Short motivational huddle text. API failures fall back to a fixed message
    rather than raising, since the huddle is never blocking.
    """
    prompt = HUDDLE_PROMPT.format(
        day=day,
        staff_count=staff_count,
        focus=", ".join(focus_areas) or "General Service & Speed",
    )
    try:
        text = generate_text(client, model, [prompt])
    except AIServiceError as e:
        print(f"[ERROR] Huddle generation failed: {e}")
        return HUDDLE_FALLBACK
    return text.strip() or HUDDLE_EMPTY
