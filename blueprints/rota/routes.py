from __future__ import annotations

from datetime import date, timedelta

from flask import Blueprint, Response, jsonify, request

from adapters.monitoring import render_status
from domain.errors import ConfigurationError, TransportError
from services import web_context
from services.rotator import RunOptions, run_rotation

bp = Blueprint("rota", __name__)


def _date_arg(value: str | None, default: date) -> date:
    if not value:
        return default
    return date.fromisoformat(value)


@bp.errorhandler(ConfigurationError)
def configuration_error(exc: ConfigurationError):
    return jsonify({"ok": False, "error": str(exc)}), 500


@bp.errorhandler(TransportError)
def transport_error(exc: TransportError):
    return jsonify({"ok": False, "error": str(exc), "day": exc.day.isoformat() if exc.day else None}), 502


@bp.errorhandler(ValueError)
def bad_request(exc: ValueError):
    return jsonify({"ok": False, "error": str(exc)}), 400


@bp.route("/api/rota", methods=["GET"])
def list_rota():
    start = _date_arg(request.args.get("start"), date.today())
    days = int(request.args.get("days", 30))
    end = start + timedelta(days=max(days, 1) - 1)
    entries = web_context.repository().onduty_between(start, end)
    return jsonify(
        {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "days": [
                {"date": day.isoformat(), "oncall": entry.code, "fixed": entry.fixed}
                for day, entry in sorted(entries.items())
            ],
        }
    )


@bp.route("/api/oncall/today", methods=["GET"])
def oncall_today():
    entry = web_context.repository().fetch_day(date.today())
    return jsonify({"date": date.today().isoformat(), "oncall": entry.code if entry else None})


@bp.route("/metrics", methods=["GET"])
def metrics():
    entry = web_context.repository().fetch_day(date.today())
    roster = web_context.rotator_config().roster()
    body = render_status(entry.code if entry else "", roster, script="rotator-web")
    return Response(body, mimetype="text/plain")


@bp.route("/api/rota/generate", methods=["POST"])
def generate_rota():
    payload = request.get_json(silent=True) or {}
    options = RunOptions(
        start=_date_arg(payload.get("start"), date.today()),
        days=int(payload.get("days", 0)),
        last_on=payload.get("last_on"),
        dry_run=bool(payload.get("dry_run", True)),
        unrestrict=bool(payload.get("unrestrict", False)),
        seed=payload.get("seed"),
    )
    result = run_rotation(web_context.rotator_config(), web_context.repository(), options)
    return jsonify(
        {
            "ok": True,
            "dry_run": options.dry_run,
            "days": [
                {
                    "date": d.date.isoformat(),
                    "oncall": d.assignee.code,
                    "fixed": d.fixed,
                    "workday": d.workday,
                    "out": d.unavailable,
                }
                for d in result.decisions
            ],
            "load": {code: {"days": days, "weekends": weekends} for code, (days, weekends) in result.ledger.items()},
            "notification_errors": [str(e) for e in result.notification_errors],
        }
    )
