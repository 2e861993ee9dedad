"""High level orchestration of one rotator run."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from adapters.config_loader import RotatorConfig
from adapters.monitoring import write_monitoring_file
from adapters.notify import Notifier
from adapters.production_calendar import ProductionCalendar
from adapters.repository import CalendarRepository, DryRunRepository
from adapters.slack import SlackNotifier
from domain.errors import ConfigurationError, NotificationError
from domain.models import Person
from domain.roster import Roster
from services.engine import DayDecision, RotationEngine, month_range

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    start: Optional[date] = None
    days: int = 0
    last_on: Optional[str] = None
    monitoring_file: Optional[str] = None
    notify: Optional[str] = None
    dry_run: bool = True
    unrestrict: bool = False
    seed: Union[random.Random, int, None] = None


@dataclass
class RunResult:
    mode: str
    today_before: Optional[str] = None
    today_after: Optional[str] = None
    decisions: List[DayDecision] = field(default_factory=list)
    notified: List[Tuple[str, str]] = field(default_factory=list)
    notification_errors: List[NotificationError] = field(default_factory=list)
    ledger: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    monitoring_path: Optional[Path] = None

    @property
    def shadow_days(self) -> List[date]:
        return [d.date for d in self.decisions if d.assignee.order is None and not d.fixed]


def holiday_calendar_for(config: RotatorConfig) -> ProductionCalendar:
    if config.holiday_calendar:
        try:
            return ProductionCalendar.from_json(config.holiday_calendar)
        except (OSError, ValueError, NotImplementedError) as exc:
            raise ConfigurationError(f"cannot load holiday calendar {config.holiday_calendar}: {exc}") from exc
    try:
        return ProductionCalendar(country=config.holiday_country)
    except NotImplementedError as exc:
        raise ConfigurationError(f"no public holidays known for {config.holiday_country!r}") from exc


def repository_for(config: RotatorConfig, path: Optional[str] = None) -> CalendarRepository:
    return CalendarRepository(
        path or config.database,
        oncall_calendar=config.oncall_calendar,
        availability_calendar=config.availability_calendar,
        away_words=config.away_words,
    )


def build_engine(
    config: RotatorConfig,
    repository: CalendarRepository,
    *,
    calendar: Optional[ProductionCalendar] = None,
    dry_run: bool = True,
    unrestrict: bool = False,
    seed: Union[random.Random, int, None] = None,
) -> RotationEngine:
    calendar = calendar or holiday_calendar_for(config)
    reconciler = DryRunRepository(repository) if dry_run else repository
    return RotationEngine(
        config.roster(),
        reconciler,
        is_business_day=calendar.is_business_day,
        absence_codes_for=repository.absence_codes_for,
        max_days_per_month=config.max_days_per_month,
        max_weekends_per_month=config.max_weekends_per_month,
        unrestrict=unrestrict,
        rng=seed,
    )


def notifier_for(config: RotatorConfig, roster: Roster) -> Notifier:
    slack = SlackNotifier(config.slack_key, config.slack_channel) if config.slack_key else None
    return Notifier(roster, mail_server=config.mail_server, mail_sender=config.mail_sender, slack=slack)


def _safe_notify(notifier: Notifier, result: RunResult, person: Optional[Person], urgency: str, today: date) -> None:
    if person is None:
        logger.warning("Nobody is on duty for %s notification", urgency)
        return
    try:
        if notifier.notify(person.code, urgency, today):
            result.notified.append((person.code, urgency))
    except NotificationError as exc:
        logger.error("Error sending mail: %s", exc)
        result.notification_errors.append(exc)


def run_rotation(
    config: RotatorConfig,
    repository: CalendarRepository,
    options: RunOptions,
    *,
    today: Optional[date] = None,
    notifier: Optional[Notifier] = None,
    calendar: Optional[ProductionCalendar] = None,
) -> RunResult:
    """Generate and commit the rota, then send whatever reminders are due.

    Configuration and transport errors propagate; notification failures are
    collected on the result.
    """
    today = today or date.today()
    engine = build_engine(
        config,
        repository,
        calendar=calendar,
        dry_run=options.dry_run,
        unrestrict=options.unrestrict,
        seed=options.seed,
    )

    # Stash today's oncaller for future reference (may be empty).
    engine.load_day(today)
    before = engine.days.assignee_on(today)

    if options.monitoring_file:
        path = write_monitoring_file(before.code if before else "", engine.roster, options.monitoring_file)
        logger.info("Monitoring status written to %s", path)
        return RunResult(mode="monitoring", today_before=before.code if before else None, monitoring_path=path)

    start = options.start or today
    days = options.days if options.days > 0 else config.generate_days

    first, last = month_range(start, days)
    engine.prefetch(first, last)
    last_assigned = engine.seed(start, options.last_on)

    result = RunResult(mode="generate", today_before=before.code if before else None)
    result.decisions = engine.generate(start, days, last_assigned)
    result.ledger = engine.ledger.snapshot()

    after = engine.days.assignee_on(today)
    result.today_after = after.code if after else None

    notifier = notifier or notifier_for(config, engine.roster)
    if before is not None and after is not None and before.code != after.code:
        if options.dry_run:
            logger.info("[dry-run] would alert %s: takes over today from %s", after.code, before.code)
        else:
            # Notify the new oncaller
            _safe_notify(notifier, result, after, "emergency", today)

    if options.notify in ("today", "tomorrow"):
        target = today + timedelta(days=1) if options.notify == "tomorrow" else today
        if options.dry_run:
            # Nothing was written: remind whoever the calendar still holds.
            entry = repository.fetch_day(target)
            person = engine.roster.resolve(entry.code) if entry else None
        else:
            person = engine.days.assignee_on(target)
        _safe_notify(notifier, result, person, options.notify, today)
    return result


def notify_only(
    config: RotatorConfig,
    repository: CalendarRepository,
    urgency: str,
    *,
    today: Optional[date] = None,
    notifier: Optional[Notifier] = None,
) -> RunResult:
    today = today or date.today()
    roster = config.roster()
    target = today + timedelta(days=1) if urgency == "tomorrow" else today
    entry = repository.fetch_day(target)
    result = RunResult(mode="notify")
    notifier = notifier or notifier_for(config, roster)
    _safe_notify(notifier, result, roster.resolve(entry.code) if entry else None, urgency, today)
    return result


__all__ = [
    "RunOptions",
    "RunResult",
    "build_engine",
    "holiday_calendar_for",
    "notifier_for",
    "notify_only",
    "repository_for",
    "run_rotation",
]
