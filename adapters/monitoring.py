"""Prometheus text-file status of who is on call."""
from __future__ import annotations

import os
import socket
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from domain.models import Person

HELP_LINE = "# HELP oncall_rotation_status Positive if oncall."
TYPE_LINE = "# TYPE oncall_rotation_status gauge"


def render_status(
    current_code: str,
    people: Iterable[Person],
    *,
    hostname: Optional[str] = None,
    script: Optional[str] = None,
) -> str:
    host = (hostname if hostname is not None else socket.gethostname()).split(".")[0]
    name = script if script is not None else os.path.basename(sys.argv[0])
    current = (current_code or "").lower()
    output: List[str] = [HELP_LINE, TYPE_LINE]
    for person in people:
        status = 1 if person.code == current else 0
        output.append(
            f'oncall_rotation_status{{scripthost="{host}",oncaller="{person.code}",scriptname="{name}"}} {status}'
        )
    return "\n".join(output) + "\n"


def write_monitoring_file(current_code: str, people: Iterable[Person], dest: str | Path) -> Path:
    path = Path(dest)
    path.write_text(render_status(current_code, people), encoding="utf-8")
    return path


__all__ = ["render_status", "write_monitoring_file"]
