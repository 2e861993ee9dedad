"""Who must not be put on duty on a given day."""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from rules.business_days import is_weekend
from rules.fairness import FairnessLedger

logger = logging.getLogger(__name__)


def unavailable_for(
    day: date,
    ledger: FairnessLedger,
    absence_codes: Iterable[str],
    assigned_today: Optional[str] = None,
) -> List[str]:
    """Merge overloaded and absent codes for ``day``.

    The person already recorded for ``day`` is not checked for overload:
    their booking of this very day is part of the counters. The result is
    lower-cased and free of duplicates, overloaded codes first.
    """
    unavailable: List[str] = []
    seen: set[str] = set()
    today = (assigned_today or "").lower()
    weekend = is_weekend(day)

    for code in ledger.overloaded_codes(weekend):
        if code == today:
            continue
        counter = ledger.counter(code)
        logger.debug("Oncaller overloaded: %s, %d/%d", code, counter.days_booked, counter.weekends_booked)
        if code not in seen:
            seen.add(code)
            unavailable.append(code)

    for raw in absence_codes:
        code = raw.strip().lower()
        if code and code not in seen:
            seen.add(code)
            unavailable.append(code)
    return unavailable


__all__ = ["unavailable_for"]
