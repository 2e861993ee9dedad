"""Excel report writer."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from adapters.report.metrics_writer import load_summary
from domain.models import Person
from rules.business_days import is_weekend
from services.engine import DayDecision

HEADER_FONT = Font(bold=True)
CENTER = Alignment(horizontal="center", vertical="center")
WEEKEND_FILL = PatternFill(fill_type="solid", start_color="FFF2CC", end_color="FFF2CC")
FIXED_FONT = Font(italic=True)


def write_rota(
    path: str | Path,
    decisions: Sequence[DayDecision],
    people: Iterable[Person],
    *,
    title: str | None = None,
) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = title or "Rota"

    headers = ["Date", "Day", "Oncall", "Fixed", "Out"]
    for col, label in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = HEADER_FONT
        cell.alignment = CENTER

    for row_idx, decision in enumerate(decisions, start=2):
        values = [
            decision.date.isoformat(),
            f"{decision.date:%a}",
            decision.assignee.code,
            "yes" if decision.fixed else "",
            ", ".join(decision.unavailable),
        ]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            if col < 5:
                cell.alignment = CENTER
            if is_weekend(decision.date):
                cell.fill = WEEKEND_FILL
            if decision.fixed:
                cell.font = FIXED_FONT

    summary = wb.create_sheet("Load")
    for col, label in enumerate(["Oncall", "Days", "Weekend days", "Fixed days"], start=1):
        summary.cell(row=1, column=col, value=label).font = HEADER_FONT
    for row_idx, row in enumerate(load_summary(decisions, people), start=2):
        for col, value in enumerate(row, start=1):
            summary.cell(row=row_idx, column=col, value=value).alignment = CENTER

    path = Path(path)
    wb.save(path)
    return path
