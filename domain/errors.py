"""Exception hierarchy shared by the rotator layers."""
from __future__ import annotations

from datetime import date
from typing import Optional


class RotatorError(RuntimeError):
    """Base class for rotator failures."""


class ConfigurationError(RotatorError):
    """Raised when the configuration or the roster is unusable."""


class TransportError(RotatorError):
    """Raised when reading or writing the calendar fails.

    Fatal for the run: skipping a day would desynchronise the fairness
    counters from what the calendar holds.
    """

    def __init__(self, operation: str, day: Optional[date] = None, detail: str = "") -> None:
        self.operation = operation
        self.day = day
        self.detail = detail
        where = f" for {day.isoformat()}" if day else ""
        message = f"{operation} failed{where}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NotificationError(RotatorError):
    """Raised when a reminder could not be delivered."""

    def __init__(self, code: str, urgency: str, detail: str = "") -> None:
        self.code = code
        self.urgency = urgency
        self.detail = detail
        super().__init__(f"notifying {code} ({urgency}) failed: {detail}" if detail else f"notifying {code} ({urgency}) failed")


__all__ = ["RotatorError", "ConfigurationError", "TransportError", "NotificationError"]
