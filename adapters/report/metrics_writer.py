"""Per-person load summary of a generated rota."""
from __future__ import annotations

import csv
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from domain.models import Person
from rules.business_days import is_weekend
from services.engine import DayDecision


def load_summary(decisions: Sequence[DayDecision], people: Iterable[Person]) -> List[Tuple[str, int, int, int]]:
    """Rows of ``(code, days, weekend days, fixed days)`` in roster order.

    Codes that appear in the rota without being in ``people`` (the shadow
    oncaller, former roster members) are appended at the end.
    """
    days: Counter = Counter()
    weekends: Counter = Counter()
    fixed: Counter = Counter()
    for decision in decisions:
        code = decision.assignee.code
        days[code] += 1
        if is_weekend(decision.date):
            weekends[code] += 1
        if decision.fixed:
            fixed[code] += 1

    order: Dict[str, None] = {person.code: None for person in people}
    for code in days:
        order.setdefault(code, None)
    return [(code, days[code], weekends[code], fixed[code]) for code in order]


def write_load_summary(path: str | Path, decisions: Sequence[DayDecision], people: Iterable[Person]) -> Path:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["oncall", "days", "weekend_days", "fixed_days"])
        for row in load_summary(decisions, people):
            writer.writerow(row)
    return path
