from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Set
import json

import holidays

DEFAULT_COUNTRY = "AT"


class ProductionCalendar:
    """Holiday calendar answering whether a date is a business day.

    Public holidays of ``country`` are computed for any year; ``off_dates``
    adds local days off and ``working_overrides`` turns a day back into a
    business day.
    """

    def __init__(
        self,
        off_dates: Iterable[date] = (),
        working_overrides: Iterable[date] = (),
        *,
        name: Optional[str] = None,
        country: Optional[str] = None,
        subdiv: Optional[str] = None,
    ) -> None:
        self._off_dates: Set[date] = set(off_dates)
        self._working_overrides: Set[date] = set(working_overrides)
        self.country = country
        self._public = holidays.country_holidays(country, subdiv=subdiv) if country else None
        self.name = name or country

    @classmethod
    def from_json(cls, path: Path | str) -> "ProductionCalendar":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        off_dates = {date.fromisoformat(item) for item in payload.get("off_dates", [])}
        working_overrides = {date.fromisoformat(item) for item in payload.get("working_overrides", [])}
        return cls(
            off_dates=off_dates,
            working_overrides=working_overrides,
            name=payload.get("name"),
            country=payload.get("country"),
            subdiv=payload.get("subdiv"),
        )

    @classmethod
    def load_default(cls) -> "ProductionCalendar":
        return cls(country=DEFAULT_COUNTRY)

    def holiday_name(self, dt: date) -> Optional[str]:
        if self._public is None:
            return None
        return self._public.get(dt)

    def is_off_date(self, dt: date) -> bool:
        return dt in self._off_dates or (self._public is not None and dt in self._public)

    def is_working_override(self, dt: date) -> bool:
        return dt in self._working_overrides

    def is_business_day(self, dt: date) -> bool:
        if self.is_working_override(dt):
            return True
        if self.is_off_date(dt):
            return False
        return dt.weekday() < 5

    def off_dates(self) -> Set[date]:
        return set(self._off_dates)

    def working_overrides(self) -> Set[date]:
        return set(self._working_overrides)
