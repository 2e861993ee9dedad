"""Day-by-day rotation generation and reconciliation."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Protocol, Union

from domain.assignments import DayAssignmentSet
from domain.errors import TransportError
from domain.models import DayAssignment, Person
from domain.roster import Roster
from rules.availability import unavailable_for
from rules.business_days import BusinessDayOracle, is_weekend, is_workday
from rules.fairness import FairnessLedger, MonthCounts
from rules.rotor import RotationSelector

logger = logging.getLogger(__name__)


class Reconciler(Protocol):
    def fetch_day(self, day: date): ...

    def fetch_month_counts(self, month: int, year: int) -> MonthCounts: ...

    def commit_day(self, day: date, assignee: Person, displaced: Optional[Person] = None) -> bool: ...


AbsenceSource = Callable[[date], Iterable[str]]


@dataclass
class DayDecision:
    date: date
    assignee: Person
    previous: Optional[Person]
    fixed: bool
    workday: bool
    unavailable: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.previous is None or self.previous.code != self.assignee.code

    def describe(self) -> str:
        note = "Fixed,Out" if self.fixed else "Out"
        return f"{self.date:%a %Y-%m-%d}: {self.assignee.code} # {note}: {','.join(self.unavailable)}"


def month_range(start: date, days: int) -> tuple[date, date]:
    """Whole months covering ``days`` days from ``start``."""
    first = start.replace(day=1)
    end = start + timedelta(days=max(days, 1) - 1)
    last = (end.replace(day=28) + timedelta(days=4)).replace(day=1) - timedelta(days=1)
    return first, last


class RotationEngine:
    """Everything one run owns: roster, fairness ledger and day state."""

    def __init__(
        self,
        roster: Roster,
        reconciler: Reconciler,
        *,
        is_business_day: BusinessDayOracle,
        absence_codes_for: AbsenceSource,
        max_days_per_month: int = 0,
        max_weekends_per_month: int = 0,
        unrestrict: bool = False,
        rng: Union[random.Random, int, None] = None,
    ) -> None:
        self.roster = roster
        self.reconciler = reconciler
        self.is_business_day = is_business_day
        self.absence_codes_for = absence_codes_for
        self.unrestrict = unrestrict
        self.ledger = FairnessLedger(
            reconciler.fetch_month_counts,
            max_days=max_days_per_month,
            max_weekends=max_weekends_per_month,
            shadow_code=roster.shadow.code,
            unrestrict=unrestrict,
        )
        self.selector = RotationSelector(roster, rng)
        self.days = DayAssignmentSet()

    # ------------------------------------------------------------------
    def load_day(self, day: date) -> None:
        entry = self.reconciler.fetch_day(day)
        if entry is None:
            self.days.pop(day, None)
            return
        code, fixed = entry
        self.days[day] = DayAssignment(date=day, assignee=self.roster.resolve(code), fixed=bool(fixed))

    def prefetch(self, first: date, last: date) -> int:
        """Load the calendar from the day before ``first`` to the day after ``last``."""
        day = first - timedelta(days=1)
        count = 0
        while day <= last + timedelta(days=1):
            self.load_day(day)
            day += timedelta(days=1)
            count += 1
        logger.debug("Prefetched %d days", count)
        return count

    def seed(self, start: date, last_on: Optional[str] = None) -> Person:
        """Pick yesterday's person to prime the rotation."""
        if last_on:
            return self.roster.resolve(last_on)
        previous = self.days.last_before(start)
        if previous is not None:
            logger.debug("Yesterday's oncall (starting point) was: %s", previous.assignee.code)
            return previous.assignee
        return self.roster.by_order(0)

    # ------------------------------------------------------------------
    def step(self, day: date, last_assigned: Person) -> DayDecision:
        workday = is_workday(day, self.is_business_day)
        weekend = is_weekend(day)
        self.ledger.ensure(day)

        existing = self.days.get(day)
        previous = existing.assignee if existing else None
        unavailable = unavailable_for(
            day,
            self.ledger,
            self.absence_codes_for(day),
            assigned_today=previous.code if previous else None,
        )

        if existing is not None and existing.fixed:
            if self.unrestrict:
                self.ledger.increment(existing.assignee.code, weekend)
            decision = DayDecision(day, existing.assignee, previous, True, workday, unavailable)
            logger.info(decision.describe())
            return decision

        chosen = self.selector.select_next(unavailable, last_assigned, workday)
        if self.roster.is_shadow(chosen):
            logger.warning("Nobody is available on %s, assigning %s", day.isoformat(), chosen.code)
        self._account(chosen, previous, weekend)
        self.days.assign(day, chosen)
        decision = DayDecision(day, chosen, previous, False, workday, unavailable)
        logger.info(decision.describe())

        try:
            committed = self.reconciler.commit_day(day, chosen, previous if decision.changed else None)
        except OSError as exc:
            raise TransportError("commit", day, str(exc)) from exc
        if not committed:
            raise TransportError("commit", day, f"could not record {chosen.code}")
        return decision

    def _account(self, chosen: Person, previous: Optional[Person], weekend: bool) -> None:
        if self.unrestrict:
            # Counters started from zero: every processed day counts once.
            self.ledger.increment(chosen.code, weekend)
            return
        if previous is not None and previous.code == chosen.code:
            return
        self.ledger.increment(chosen.code, weekend)
        if previous is not None:
            self.ledger.decrement(previous.code, weekend)

    def generate(self, start: date, days: int, last_assigned: Person) -> List[DayDecision]:
        decisions: List[DayDecision] = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            decision = self.step(day, last_assigned)
            decisions.append(decision)
            last_assigned = decision.assignee
        return decisions


__all__ = ["RotationEngine", "DayDecision", "Reconciler", "month_range"]
