from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Tuple

import pytest

from domain.models import Person
from domain.roster import Roster


class MemoryCalendar:
    """In-memory stand-in for the calendar repository."""

    def __init__(self, entries=None, counts=None) -> None:
        self.entries: Dict[date, Tuple[str, bool]] = dict(entries or {})
        self.counts: Dict[Tuple[int, int], Dict[str, Tuple[int, int]]] = dict(counts or {})
        self.commits: List[Tuple[date, str, Optional[str]]] = []
        self.count_requests: List[Tuple[int, int]] = []

    def fetch_day(self, day: date):
        return self.entries.get(day)

    def fetch_month_counts(self, month: int, year: int):
        self.count_requests.append((month, year))
        return dict(self.counts.get((month, year), {}))

    def commit_day(self, day: date, assignee: Person, displaced: Optional[Person] = None) -> bool:
        self.commits.append((day, assignee.code, displaced.code if displaced else None))
        self.entries[day] = (assignee.code, False)
        return True


def make_roster(*codes: str, shadow: str = "xx") -> Roster:
    return Roster([Person(code=code, order=idx) for idx, code in enumerate(codes)], shadow_code=shadow)


@pytest.fixture()
def roster() -> Roster:
    return make_roster("a", "b", "c")


@pytest.fixture()
def memory_calendar() -> MemoryCalendar:
    return MemoryCalendar()
