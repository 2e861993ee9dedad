"""Monthly fairness restrictions (max days / weekends per person)."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, Mapping, Optional, Tuple

from domain.models import RestrictionCounter, RestrictionSet

logger = logging.getLogger(__name__)

MonthCounts = Mapping[str, Tuple[int, int]]
MonthCountsFetcher = Callable[[int, int], MonthCounts]

# Keeps the shadow oncaller below any limit for a whole month.
SHADOW_COUNTER = (-31, -31)


class FairnessLedger:
    """Per-month counters of days and weekend days booked per person.

    Counters are only valid for the cached ``(month, year)``. Any day of a
    different month rebuilds them through ``fetch_month_counts`` first.
    """

    def __init__(
        self,
        fetch_month_counts: MonthCountsFetcher,
        *,
        max_days: int = 0,
        max_weekends: int = 0,
        shadow_code: str = "xx",
        unrestrict: bool = False,
    ) -> None:
        self._fetch = fetch_month_counts
        self.max_days = max(int(max_days or 0), 0)
        self.max_weekends = max(int(max_weekends or 0), 0)
        self.shadow_code = shadow_code.lower()
        self.unrestrict = unrestrict
        self._current: Optional[RestrictionSet] = None
        self.refresh_count = 0

    # ------------------------------------------------------------------
    @property
    def enabled(self) -> bool:
        return self.max_days + self.max_weekends > 0

    @property
    def checks_overload(self) -> bool:
        return self.enabled and not self.unrestrict

    @property
    def current(self) -> Optional[RestrictionSet]:
        return self._current

    def refresh(self, month: int, year: int) -> RestrictionSet:
        counters: Dict[str, RestrictionCounter] = {}
        if self.checks_overload:
            logger.debug("Fetching restriction info for %04d-%02d", year, month)
            for code, (days, weekends) in self._fetch(month, year).items():
                counters[code.lower()] = RestrictionCounter(int(days), int(weekends))
            self.refresh_count += 1
        counters[self.shadow_code] = RestrictionCounter(*SHADOW_COUNTER)
        self._current = RestrictionSet(month=month, year=year, counters=counters)
        return self._current

    def ensure(self, day: date) -> RestrictionSet:
        if self._current is None or not self._current.covers(day):
            return self.refresh(day.month, day.year)
        return self._current

    # ------------------------------------------------------------------
    def counter(self, code: str) -> RestrictionCounter:
        if self._current is None:
            raise RuntimeError("fairness ledger used before refresh")
        return self._current.counters.setdefault(code.lower(), RestrictionCounter())

    def is_overloaded(self, code: str, weekend: bool) -> bool:
        if not self.checks_overload or self._current is None:
            return False
        counter = self._current.counters.get(code.lower())
        if counter is None:
            return False
        if self.max_days and counter.days_booked >= self.max_days:
            return True
        return bool(weekend and self.max_weekends and counter.weekends_booked >= self.max_weekends)

    def overloaded_codes(self, weekend: bool) -> list[str]:
        if not self.checks_overload or self._current is None:
            return []
        return [code for code in self._current.counters if self.is_overloaded(code, weekend)]

    def increment(self, code: str, weekend: bool) -> None:
        if code.lower() == self.shadow_code:
            return
        counter = self.counter(code)
        counter.days_booked += 1
        if weekend:
            counter.weekends_booked += 1

    def decrement(self, code: str, weekend: bool) -> None:
        if code.lower() == self.shadow_code:
            return
        counter = self.counter(code)
        counter.days_booked = max(counter.days_booked - 1, 0)
        if weekend:
            counter.weekends_booked = max(counter.weekends_booked - 1, 0)

    def snapshot(self) -> Dict[str, Tuple[int, int]]:
        if self._current is None:
            return {}
        return {
            code: (c.days_booked, c.weekends_booked)
            for code, c in sorted(self._current.counters.items())
            if code != self.shadow_code
        }


__all__ = ["FairnessLedger", "MonthCounts", "MonthCountsFetcher", "SHADOW_COUNTER"]
