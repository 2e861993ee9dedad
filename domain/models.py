"""Domain dataclasses for the on-call rotator."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


@dataclass(frozen=True)
class Person:
    """Somebody who can be put on duty.

    ``order`` is the position in the rotation sequence. The shadow person
    and codes found in the calendar that are unknown to the roster carry
    ``order=None``: they never anchor the rotation.
    """

    code: str
    order: Optional[int] = None
    email: str = ""
    calendar_email: str = ""
    slack_id: str = ""

    @property
    def in_rotation(self) -> bool:
        return self.order is not None


@dataclass
class DayAssignment:
    date: date
    assignee: Person
    fixed: bool = False


@dataclass
class RestrictionCounter:
    days_booked: int = 0
    weekends_booked: int = 0


@dataclass
class RestrictionSet:
    month: int
    year: int
    counters: Dict[str, RestrictionCounter] = field(default_factory=dict)

    def covers(self, day: date) -> bool:
        return self.month == day.month and self.year == day.year


__all__ = ["Person", "DayAssignment", "RestrictionCounter", "RestrictionSet"]
