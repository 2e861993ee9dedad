"""Day assignment state shared by the engine and the adapters."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, MutableMapping, Optional

from .models import DayAssignment, Person


class DayAssignmentSet(MutableMapping[date, DayAssignment]):
    """A mapping of date to the person on duty, iterated in date order."""

    def __init__(self, assignments: Iterable[DayAssignment] | None = None) -> None:
        self._data: Dict[date, DayAssignment] = {}
        if assignments:
            for a in assignments:
                self._data[a.date] = a

    # -- MutableMapping protocol -------------------------------------------------
    def __getitem__(self, key: date) -> DayAssignment:
        return self._data[key]

    def __setitem__(self, key: date, value: DayAssignment) -> None:
        if value.date != key:
            raise ValueError(f"assignment for {value.date} stored under {key}")
        self._data[key] = value

    def __delitem__(self, key: date) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._data.keys()))

    def __len__(self) -> int:
        return len(self._data)

    # -- Core helpers -------------------------------------------------------------
    def assign(self, day: date, assignee: Person, *, fixed: bool = False) -> DayAssignment:
        """Record ``assignee`` for ``day``; a fixed record is never replaced."""
        current = self._data.get(day)
        if current is not None and current.fixed:
            raise ValueError(f"{day.isoformat()} is fixed to {current.assignee.code}")
        record = DayAssignment(date=day, assignee=assignee, fixed=fixed)
        self._data[day] = record
        return record

    def assignee_on(self, day: date) -> Optional[Person]:
        record = self._data.get(day)
        return record.assignee if record else None

    def is_fixed(self, day: date) -> bool:
        record = self._data.get(day)
        return bool(record and record.fixed)

    def last_before(self, day: date) -> Optional[DayAssignment]:
        """Return the record for the day before ``day``, if it is known."""
        return self._data.get(day - timedelta(days=1))


__all__ = ["DayAssignmentSet"]
