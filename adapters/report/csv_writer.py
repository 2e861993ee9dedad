"""CSV report helpers."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from services.engine import DayDecision


def write_rota(path: str | Path, decisions: Sequence[DayDecision]) -> Path:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["date", "weekday", "oncall", "fixed", "workday", "previous", "unavailable"])
        for decision in decisions:
            writer.writerow(
                [
                    decision.date.isoformat(),
                    f"{decision.date:%a}",
                    decision.assignee.code,
                    int(decision.fixed),
                    int(decision.workday),
                    decision.previous.code if decision.previous else "",
                    " ".join(decision.unavailable),
                ]
            )
    return path
