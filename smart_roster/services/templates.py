"""Named schedule templates and the last-used schedule, kept in the local store."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from smart_roster.domain.types import ScheduleData
from smart_roster.exceptions import TemplateError
from smart_roster.io.local_store import LocalStore


TEMPLATES_KEY = "schedule_templates"
LAST_SCHEDULE_KEY = "last_schedule"


class TemplateStore:
    """Save, list, load and delete roster templates."""

    def __init__(self, store: LocalStore):
        self.store = store

    def list_templates(self) -> List[Dict[str, Any]]:
        return list(self.store.get(TEMPLATES_KEY, []))

    def save_template(self, name: str, schedule: ScheduleData) -> Dict[str, Any]:
        if not name or not name.strip():
            raise TemplateError("Template name must not be blank")
        templates = self.list_templates()
        template = {
            "id": str(int(time.time() * 1000) + len(templates)),
            "name": name.strip(),
            "scheduleData": schedule.to_dict(),
            "createdAt": datetime.now().isoformat(),
        }
        templates.append(template)
        self.store.set(TEMPLATES_KEY, templates)
        print(f"[OK] Template saved: {template['name']}")
        return template

    def _find(self, template_id: str) -> Dict[str, Any]:
        for template in self.list_templates():
            if template["id"] == template_id:
                return template
        raise TemplateError(f"No template with id {template_id!r}")

    def load_template(self, template_id: str) -> ScheduleData:
        return ScheduleData.from_dict(self._find(template_id)["scheduleData"])

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Most recently saved template with a given name."""
        matches = [t for t in self.list_templates() if t["name"] == name]
        return matches[-1] if matches else None

    def delete_template(self, template_id: str) -> None:
        self._find(template_id)
        remaining = [t for t in self.list_templates() if t["id"] != template_id]
        self.store.set(TEMPLATES_KEY, remaining)

    def remember_last_schedule(self, schedule: ScheduleData) -> None:
        self.store.set(LAST_SCHEDULE_KEY, schedule.to_dict())

    def load_last_schedule(self) -> Optional[ScheduleData]:
        data = self.store.get(LAST_SCHEDULE_KEY)
        return ScheduleData.from_dict(data) if data else None
