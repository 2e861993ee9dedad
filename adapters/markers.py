"""Calendar entry title vocabulary.

On-duty entries read ``"<code> onduty"``; a ``fixed`` word anywhere in the
title pins the day. Absences are all-day entries such as ``"ab urlaub"``
or ``"cd - away"`` in the availability calendar.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Tuple

DEFAULT_AWAY_WORDS = ("away", "urlaub", "krank", "vacation", "leave", "familienzeit", "za")

ONDUTY_RE = re.compile(r"(?i)(\w{2,3}).*onduty")
FIXED_RE = re.compile(r"(?i)\bfixed\b")


def away_pattern(words: Iterable[str] | None = None) -> Pattern[str]:
    vocabulary = [re.escape(w) for w in (words or ()) if w] or list(DEFAULT_AWAY_WORDS)
    return re.compile(r"(?i)(\w{2,3})[\s-]+(" + "|".join(vocabulary) + r")")


def parse_onduty(title: str) -> Optional[Tuple[str, bool]]:
    """Return ``(code, fixed)`` for an on-duty title, otherwise ``None``."""
    match = ONDUTY_RE.search(title or "")
    if match is None:
        return None
    return match.group(1).lower(), bool(FIXED_RE.search(title))


def parse_absence(title: str, pattern: Pattern[str]) -> Optional[str]:
    match = pattern.search(title or "")
    if match is None:
        return None
    return match.group(1).lower()


def onduty_title(code: str, *, fixed: bool = False) -> str:
    title = f"{code} onduty"
    return f"{title} fixed" if fixed else title


__all__ = [
    "DEFAULT_AWAY_WORDS",
    "ONDUTY_RE",
    "FIXED_RE",
    "away_pattern",
    "parse_onduty",
    "parse_absence",
    "onduty_title",
]
