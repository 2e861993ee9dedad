"""SQLite calendar store holding on-duty and availability entries.

Every entry is an all-day item ``(calendar, day, title)``. The on-call
calendar carries ``"<code> onduty"`` entries, the availability calendar
carries free-text absence markers. Both calendars may be the same one.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from adapters import markers
from domain.errors import TransportError
from domain.models import Person
from rules.business_days import is_weekend

logger = logging.getLogger(__name__)


class OnDutyEntry(NamedTuple):
    code: str
    fixed: bool


class CalendarRepository:
    def __init__(
        self,
        path: str | Path = "rotator.db",
        *,
        oncall_calendar: str = "oncall",
        availability_calendar: Optional[str] = None,
        away_words: Iterable[str] | None = None,
    ) -> None:
        self.path = Path(path)
        self.oncall_calendar = oncall_calendar
        self.availability_calendar = availability_calendar or oncall_calendar
        self._away_re = markers.away_pattern(away_words)
        self._ensure_schema()

    @contextmanager
    def _connect(self, operation: str, day: Optional[date] = None) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as exc:
            raise TransportError(operation, day, str(exc)) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise TransportError(operation, day, str(exc)) from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect("init") as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    calendar TEXT NOT NULL,
                    day TEXT NOT NULL,
                    title TEXT NOT NULL,
                    attendee TEXT
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS entries_day ON entries(calendar, day)")

    # -- raw entries --------------------------------------------------------------
    def add_entry(self, calendar: str, day: date, title: str, attendee: Optional[str] = None) -> int:
        with self._connect("add entry", day) as conn:
            cursor = conn.execute(
                "INSERT INTO entries(calendar, day, title, attendee) VALUES (?, ?, ?, ?)",
                (calendar, day.isoformat(), title, attendee),
            )
            return int(cursor.lastrowid)

    def entries_on(self, calendar: str, day: date) -> List[Tuple[int, str]]:
        with self._connect("list entries", day) as conn:
            cursor = conn.execute(
                "SELECT id, title FROM entries WHERE calendar = ? AND day = ? ORDER BY id",
                (calendar, day.isoformat()),
            )
            return [(int(row[0]), row[1]) for row in cursor]

    def entries_between(self, calendar: str, start: date, end: date) -> List[Dict[str, object]]:
        with self._connect("list entries", start) as conn:
            cursor = conn.execute(
                "SELECT id, day, title, attendee FROM entries WHERE calendar = ? AND day BETWEEN ? AND ? ORDER BY day, id",
                (calendar, start.isoformat(), end.isoformat()),
            )
            return [
                {"id": int(row[0]), "day": row[1], "title": row[2], "attendee": row[3]}
                for row in cursor
            ]

    # -- on-duty calendar ---------------------------------------------------------
    def fetch_day(self, day: date) -> Optional[OnDutyEntry]:
        """Find the person in the on-call calendar for ``day``."""
        for _, title in self.entries_on(self.oncall_calendar, day):
            parsed = markers.parse_onduty(title)
            if parsed is not None:
                return OnDutyEntry(*parsed)
        return None

    def onduty_between(self, start: date, end: date) -> Dict[date, OnDutyEntry]:
        found: Dict[date, OnDutyEntry] = {}
        for entry in self.entries_between(self.oncall_calendar, start, end):
            day = date.fromisoformat(str(entry["day"]))
            if day in found:
                continue
            parsed = markers.parse_onduty(str(entry["title"]))
            if parsed is not None:
                found[day] = OnDutyEntry(*parsed)
        return found

    def fetch_month_counts(self, month: int, year: int) -> Dict[str, Tuple[int, int]]:
        first = date(year, month, 1)
        last = (first.replace(day=28) + timedelta(days=4)).replace(day=1) - timedelta(days=1)
        counts: Dict[str, List[int]] = {}
        for day, entry in self.onduty_between(first, last).items():
            counter = counts.setdefault(entry.code, [0, 0])
            counter[0] += 1
            if is_weekend(day):
                counter[1] += 1
        return {code: (c[0], c[1]) for code, c in counts.items()}

    def commit_day(self, day: date, assignee: Person, displaced: Optional[Person] = None) -> bool:
        existing = self.fetch_day(day)
        if existing is not None and existing.code == assignee.code:
            # Nothing to do!
            return True

        attendee = assignee.calendar_email if "@" in assignee.calendar_email else None
        title = markers.onduty_title(assignee.code)
        rewritten = False
        with self._connect("commit", day) as conn:
            rows = conn.execute(
                "SELECT id, title FROM entries WHERE calendar = ? AND day = ? ORDER BY id",
                (self.oncall_calendar, day.isoformat()),
            ).fetchall()
            for entry_id, old_title in rows:
                if markers.parse_onduty(old_title) is None:
                    continue
                conn.execute(
                    "UPDATE entries SET title = ?, attendee = ? WHERE id = ?",
                    (title, attendee, entry_id),
                )
                rewritten = True
            if not rewritten:
                conn.execute(
                    "INSERT INTO entries(calendar, day, title, attendee) VALUES (?, ?, ?, ?)",
                    (self.oncall_calendar, day.isoformat(), title, attendee),
                )

        was = existing.code if existing else (displaced.code if displaced else "nobody")
        logger.info("%s is now oncall on %s (was %s)", assignee.code, day.isoformat(), was)
        return True

    # -- availability calendar ----------------------------------------------------
    def absence_codes_for(self, day: date) -> List[str]:
        codes: List[str] = []
        for _, title in self.entries_on(self.availability_calendar, day):
            code = markers.parse_absence(title, self._away_re)
            if code is not None and code not in codes:
                codes.append(code)
        return codes


class DryRunRepository:
    """Reads from ``inner`` and only logs what a commit would write."""

    def __init__(self, inner: CalendarRepository) -> None:
        self.inner = inner

    def fetch_day(self, day: date) -> Optional[OnDutyEntry]:
        return self.inner.fetch_day(day)

    def fetch_month_counts(self, month: int, year: int) -> Dict[str, Tuple[int, int]]:
        return self.inner.fetch_month_counts(month, year)

    def absence_codes_for(self, day: date) -> List[str]:
        return self.inner.absence_codes_for(day)

    def commit_day(self, day: date, assignee: Person, displaced: Optional[Person] = None) -> bool:
        existing = self.inner.fetch_day(day)
        if existing is None or existing.code != assignee.code:
            logger.info("[dry-run] would set %s oncall on %s", assignee.code, day.isoformat())
        return True


__all__ = ["CalendarRepository", "DryRunRepository", "OnDutyEntry"]
