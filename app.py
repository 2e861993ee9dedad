from __future__ import annotations

import os
from pathlib import Path

import click
from flask import Flask, redirect, url_for

from services import web_context


BLUEPRINTS = [
    ("blueprints.rota.routes", "bp"),
]


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(
        DATABASE=os.path.join(app.instance_path, "rotator.db"),
        ROTATOR_CONFIG=os.environ.get("ROTATOR_CONFIG", "rotator.yaml"),
    )

    if test_config:
        app.config.update(test_config)

    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    for import_path, attr in BLUEPRINTS:
        module = __import__(import_path, fromlist=[attr])
        blueprint = getattr(module, attr)
        app.register_blueprint(blueprint)

    app.add_url_rule("/", endpoint="root", view_func=lambda: redirect(url_for("rota.list_rota")))

    @app.route("/healthz")
    def healthcheck() -> tuple[str, int]:
        return "OK", 200

    @app.cli.command("init-db")
    @click.option("--entry", "entries", multiple=True, help="Seed an entry as CALENDAR:YYYY-MM-DD:TITLE.")
    def init_db_command(entries: tuple[str, ...]) -> None:
        """Create the calendar database and optionally seed entries."""
        repository = web_context.repository()
        for raw in entries:
            try:
                calendar, day, title = web_context.parse_entry(raw)
            except ValueError as exc:
                raise click.BadParameter(f"{raw!r}: {exc}", param_hint="--entry") from exc
            repository.add_entry(calendar, day, title)
        click.echo(f"Database initialized at {repository.path}.")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
