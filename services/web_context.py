"""Per-request access to the rotator configuration and calendar store."""
from __future__ import annotations

from datetime import date
from typing import Tuple

from flask import current_app, g

from adapters.config_loader import RotatorConfig, load_rotator_config, parse_config
from adapters.repository import CalendarRepository
from services.rotator import repository_for


def rotator_config() -> RotatorConfig:
    if "rotator_config" not in g:
        inline = current_app.config.get("ROTATOR")
        if inline is not None:
            g.rotator_config = parse_config(inline)
        else:
            g.rotator_config = load_rotator_config(current_app.config["ROTATOR_CONFIG"])
    return g.rotator_config  # type: ignore[return-value]


def repository() -> CalendarRepository:
    if "repository" not in g:
        g.repository = repository_for(rotator_config(), current_app.config["DATABASE"])
    return g.repository  # type: ignore[return-value]


def parse_entry(raw: str) -> Tuple[str, date, str]:
    calendar, day, title = raw.split(":", 2)
    return calendar, date.fromisoformat(day), title
