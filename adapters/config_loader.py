"""Config loading helpers."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from adapters.markers import DEFAULT_AWAY_WORDS
from domain.errors import ConfigurationError
from domain.models import Person
from domain.roster import DEFAULT_SHADOW_CODE, Roster

DEFAULT_GENERATE_DAYS = 30
DEFAULT_MAIL_SERVER = "localhost:25"
DEFAULT_HOLIDAY_COUNTRY = "AT"


@dataclass
class RotatorConfig:
    """Rotator settings.

    ``max_days_per_month`` / ``max_weekends_per_month``: how often one person
    may be on duty per month; 0 means no limit. ``shadow_oncaller`` is put
    on duty when nobody is available.
    """

    oncallers: List[Person]
    generate_days: int = DEFAULT_GENERATE_DAYS
    max_days_per_month: int = 0
    max_weekends_per_month: int = 0
    mail_server: str = DEFAULT_MAIL_SERVER
    mail_sender: str = ""
    oncall_calendar: str = "oncall"
    availability_calendar: str = ""
    slack_key: str = ""
    slack_channel: str = ""
    shadow_oncaller: str = DEFAULT_SHADOW_CODE
    away_words: List[str] = field(default_factory=lambda: list(DEFAULT_AWAY_WORDS))
    database: str = "rotator.db"
    holiday_calendar: Optional[str] = None
    holiday_country: str = DEFAULT_HOLIDAY_COUNTRY

    def __post_init__(self) -> None:
        # Availability falls back to the on-call calendar.
        if self.oncall_calendar and not self.availability_calendar:
            self.availability_calendar = self.oncall_calendar

    def roster(self) -> Roster:
        return Roster(self.oncallers, shadow_code=self.shadow_oncaller)


def load_config(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    if path.suffix.lower() in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _int(raw: Dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc


def _person(entry: Dict[str, Any]) -> Person:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Oncaller entry must be a mapping, got {entry!r}")
    if "Code" not in entry or "Order" not in entry:
        raise ConfigurationError(f"Oncaller entry needs Order and Code: {entry!r}")
    try:
        order = int(entry["Order"])
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Oncaller order must be an integer: {entry!r}") from exc
    return Person(
        code=str(entry["Code"]).lower(),
        order=order,
        email=str(entry.get("Email") or ""),
        calendar_email=str(entry.get("CalendarEmail") or ""),
        slack_id=str(entry.get("SlackID") or ""),
    )


def parse_config(raw: Dict[str, Any]) -> RotatorConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError("configuration must be a mapping")
    oncallers = [_person(entry) for entry in raw.get("Oncallers") or []]
    if not oncallers:
        raise ConfigurationError("Oncallers is empty: nobody to rotate")
    away_words = [str(w) for w in raw.get("AwayWords") or []] or list(DEFAULT_AWAY_WORDS)

    config = RotatorConfig(
        oncallers=oncallers,
        generate_days=_int(raw, "GenerateDays", 0) or DEFAULT_GENERATE_DAYS,
        max_days_per_month=_int(raw, "MaxDaysPerMonth", 0),
        max_weekends_per_month=_int(raw, "MaxWeekendsPerMonth", 0),
        mail_server=str(raw.get("MailServer") or DEFAULT_MAIL_SERVER),
        mail_sender=str(raw.get("MailSender") or ""),
        oncall_calendar=str(raw.get("OncallCalendar") or "oncall"),
        availability_calendar=str(raw.get("AvailabilityCalendar") or ""),
        slack_key=str(raw.get("SlackKey") or ""),
        slack_channel=str(raw.get("SlackChannel") or ""),
        shadow_oncaller=str(raw.get("ShadowOncaller") or DEFAULT_SHADOW_CODE).lower(),
        away_words=away_words,
        database=str(raw.get("Database") or "rotator.db"),
        holiday_calendar=raw.get("HolidayCalendar") or None,
        holiday_country=str(raw.get("HolidayCountry") or DEFAULT_HOLIDAY_COUNTRY),
    )
    # Validate the roster up front so a bad config fails before any run.
    config.roster()
    return config


def load_rotator_config(path: str | Path) -> RotatorConfig:
    try:
        raw = load_config(path)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"config file not found: {path}") from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot parse {path}: {exc}") from exc
    return parse_config(raw)


__all__ = ["RotatorConfig", "load_config", "parse_config", "load_rotator_config"]
