"""Round-robin selection of the next person on duty."""
from __future__ import annotations

import random
from typing import Collection, Optional, Union

from domain.models import Person
from domain.roster import Roster


class RotationSelector:
    """Greedy round-robin over the roster order.

    ``rng`` may be a ``random.Random`` or an integer seed; it is only used
    to pick a starting point when the previous day has no roster anchor.
    """

    def __init__(self, roster: Roster, rng: Union[random.Random, int, None] = None) -> None:
        self.roster = roster
        if isinstance(rng, random.Random):
            self._rng = rng
        else:
            self._rng = random.Random(rng)

    def _anchor_index(self, last_assigned: Optional[Person]) -> int:
        size = self.roster.size()
        if last_assigned is None or not last_assigned.in_rotation or last_assigned.code not in self.roster:
            # A random guess is as good as any.
            return self._rng.randrange(size)
        return self.roster.by_code(last_assigned.code).order  # type: ignore[return-value]

    def select_next(self, unavailable: Collection[str], last_assigned: Optional[Person], workday: bool) -> Person:
        size = self.roster.size()
        blocked = {code.lower() for code in unavailable}
        if all(person.code in blocked for person in self.roster):
            # Nobody is available.
            return self.roster.shadow

        index = self._anchor_index(last_assigned)
        # On a frozen day step back first so the previous assignee stays on.
        if not workday:
            index = (index - 1) % size

        for _ in range(size):
            index = (index + 1) % size
            candidate = self.roster.by_order(index)
            if candidate.code not in blocked:
                return candidate
        raise AssertionError("unreachable: an available candidate exists")


def select_next(
    roster: Roster,
    unavailable: Collection[str],
    last_assigned: Optional[Person],
    workday: bool,
    *,
    rng: Union[random.Random, int, None] = None,
) -> Person:
    return RotationSelector(roster, rng).select_next(unavailable, last_assigned, workday)


__all__ = ["RotationSelector", "select_next"]
