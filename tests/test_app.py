from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from adapters.repository import CalendarRepository
from app import create_app

ROTATOR = {
    "OncallCalendar": "oncall",
    "Oncallers": [
        {"Order": 0, "Code": "ab"},
        {"Order": 1, "Code": "cd"},
        {"Order": 2, "Code": "ef"},
    ],
}


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.sqlite"


@pytest.fixture()
def client(db_path: Path):
    app = create_app({
        "TESTING": True,
        "DATABASE": str(db_path),
        "ROTATOR": ROTATOR,
    })
    with app.test_client() as client:
        yield client


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.data == b"OK"


def test_generate_dry_run_does_not_write(client):
    resp = client.post(
        "/api/rota/generate",
        json={"start": "2026-10-05", "days": 3, "last_on": "ab"},
    )
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["ok"] is True
    assert payload["dry_run"] is True
    assert [d["oncall"] for d in payload["days"]] == ["cd", "ef", "ab"]

    listing = client.get("/api/rota?start=2026-10-05&days=3").get_json()
    assert listing["days"] == []


def test_generate_and_list(client):
    client.post(
        "/api/rota/generate",
        json={"start": "2026-10-05", "days": 3, "last_on": "ab", "dry_run": False},
    )
    listing = client.get("/api/rota?start=2026-10-05&days=3").get_json()
    assert listing["end"] == "2026-10-07"
    assert [(d["date"], d["oncall"]) for d in listing["days"]] == [
        ("2026-10-05", "cd"),
        ("2026-10-06", "ef"),
        ("2026-10-07", "ab"),
    ]


def test_metrics_reports_todays_oncaller(client, db_path):
    CalendarRepository(db_path).add_entry("oncall", date.today(), "ef onduty")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"
    assert 'oncaller="ef",scriptname="rotator-web"} 1' in resp.get_data(as_text=True)
    assert client.get("/api/oncall/today").get_json()["oncall"] == "ef"


def test_bad_start_date_is_rejected(client):
    resp = client.get("/api/rota?start=yesterday")
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False
