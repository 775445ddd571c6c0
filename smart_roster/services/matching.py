"""Name matching between fallback chains, roster rows and the team.

OCR output spells names the way the paper schedule does ("Andrews, Ken A"),
while fallback chains use whatever the manager typed ("Ken"). Employees carry
alias lists so both resolve to the same person.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from smart_roster.domain.types import Employee


def normalize_name(name: str) -> str:
    """Case-insensitive, whitespace-collapsed form of a name."""
    return " ".join(str(name).split()).casefold()


class NameIndex:
    """Lookup from any known spelling to the team member it belongs to."""

    def __init__(self, team: Iterable[Employee]):
        team = list(team)
        self._by_name: Dict[str, Employee] = {}
        # Canonical names first; an alias never shadows another member's own name
        for emp in team:
            key = normalize_name(emp.name)
            if key:
                self._by_name.setdefault(key, emp)
        for emp in team:
            for alias in emp.aliases:
                key = normalize_name(alias)
                if key:
                    self._by_name.setdefault(key, emp)

    def lookup(self, name: str) -> Optional[Employee]:
        return self._by_name.get(normalize_name(name))

    def spellings(self, name: str) -> List[str]:
        """All normalized spellings that resolve to the same person as ``name``."""
        emp = self.lookup(name)
        if emp is None:
            return [normalize_name(name)]
        return [key for key, other in self._by_name.items() if other is emp]

    def same_person(self, a: str, b: str) -> bool:
        """True when two spellings resolve to the same team member (or are equal, if unknown)."""
        emp_a, emp_b = self.lookup(a), self.lookup(b)
        if emp_a is None or emp_b is None:
            return emp_a is None and emp_b is None and normalize_name(a) == normalize_name(b)
        return emp_a is emp_b

    def canonical(self, name: str) -> str:
        """Canonical team name for a spelling, or the spelling itself if unknown."""
        emp = self.lookup(name)
        return emp.name if emp is not None else name

    def is_active(self, name: str) -> bool:
        """Unknown names count as active; deactivation is a team-level flag."""
        emp = self.lookup(name)
        return True if emp is None else emp.is_active
