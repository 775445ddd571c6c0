"""OCR import of photographed paper schedules."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from smart_roster.domain.types import ScheduleData
from smart_roster.exceptions import ScheduleParseError
from smart_roster.services.roster import new_row_id, normalize_row

from .client import clean_json_string, generate_text, image_part


PARSE_FAILURE_MESSAGE = "Failed to parse AI response. Try a clearer image."
DEFAULT_WEEK_PERIOD = "New Schedule"

OCR_PROMPT = """
You read photographed employee work schedules. Analyze the image carefully.

Return a JSON object with:
1. "week_period": the date range printed in the header (for example "12/07 - 12/13").
2. "shifts": one object per employee row, in the order the rows appear.

Names: copy the full name exactly as printed ("Last, First M"). Include every
employee, even those who are off all week.

Roles: take the role from the secondary column. "Lead" -> "Lead",
"Overnight" -> "Produce_Overnight", "Supervisor" -> "Supervisor",
"Stock" or "Produce" -> "Produce_Stock", anything unclear -> "Stock".

Times: copy each cell as "H:MMAM-H:MMPM" (for example "7:15AM-2:00PM").
Keep overnight ranges as printed ("10:00PM-6:00AM"). Blank, "X", "Loan" and
similar cells are "OFF". When a cell holds several lines, use only the primary
time range and ignore totals and department notes.

Each shift object:
{"name": "...", "role": "...", "sun": "...", "mon": "...", "tue": "...",
 "wed": "...", "thu": "...", "fri": "...", "sat": "..."}

Return only the JSON object.
"""


class OCRShiftRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    role: Optional[str] = None
    sun: Optional[str] = None
    mon: Optional[str] = None
    tue: Optional[str] = None
    wed: Optional[str] = None
    thu: Optional[str] = None
    fri: Optional[str] = None
    sat: Optional[str] = None


class OCRSchedule(BaseModel):
    model_config = ConfigDict(extra="ignore")

    week_period: Optional[str] = None
    shifts: Optional[List[OCRShiftRow]] = None


def parse_schedule_response(text: str, default_role: str = "Stock") -> ScheduleData:
    """
    Turn raw model output into a normalized ScheduleData.

    Raises:
        ScheduleParseError: On empty output, invalid JSON or the wrong shape
    """
    if not text or not text.strip():
        raise ScheduleParseError("AI returned empty response.")

    try:
        payload: Any = json.loads(clean_json_string(text))
        parsed = OCRSchedule.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"[ERROR] OCR response rejected: {e}")
        raise ScheduleParseError(PARSE_FAILURE_MESSAGE) from e

    shifts = []
    for i, row in enumerate(parsed.shifts or []):
        data = row.model_dump()
        shifts.append(normalize_row(data, new_row_id(i), default_role=default_role))

    week_period = (parsed.week_period or "").strip() or DEFAULT_WEEK_PERIOD
    return ScheduleData(week_period=week_period, shifts=shifts)


class OCRService:
    """Reads a schedule photo into a roster snapshot."""

    def __init__(self, client: Any, model: str = "gemini-2.5-flash", default_role: str = "Stock"):
        self.client = client
        self.model = model
        self.default_role = default_role

    def parse_schedule(self, image: bytes, mime_type: str = "image/jpeg") -> ScheduleData:
        """
        Run OCR on an image.

        Args:
            image: Raw image bytes
            mime_type: Image MIME type

        Returns:
            ScheduleData with every row carrying all of sun..sat

        Raises:
            ScheduleParseError: If the model output cannot be used
            AIServiceError: If the API call itself fails
        """
        print(f"[INFO] Running schedule OCR with {self.model} ({len(image)} bytes)")
        text = generate_text(
            self.client,
            self.model,
            [image_part(image, mime_type), OCR_PROMPT],
            json_response=True,
        )
        schedule = parse_schedule_response(text, default_role=self.default_role)
        print(f"[OK] OCR read {len(schedule.shifts)} rows for '{schedule.week_period}'")
        return schedule
