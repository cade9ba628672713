"""``flask seed`` commands populating a development database with demo channels."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from vidhub.core.extensions import db
from vidhub.seeds import seed_data

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(seed_data.__name__).setLevel(level)
    LOGGER.setLevel(level)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Print one ``created/existing`` line per seeded table."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (nothing to do)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        click.echo(
            f"  {table.ljust(width)}  created={counters.get('created', 0):>2}"
            f"  existing={counters.get('existing', 0):>2}"
        )


def _refuse_in_production() -> None:
    """Abort ``seed fresh`` unless the app runs in debug or testing mode."""
    cfg = current_app.config
    if cfg.get("DEBUG") or cfg.get("TESTING"):
        return
    raise click.UsageError("'flask seed fresh' drops every table; refusing outside development.")


def _run(verbose: bool) -> None:
    try:
        summary = seed_data.run_all(db, verbose=verbose)
    except Exception as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log each seeding step.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Demo data for local development."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Insert demo users and subscriptions; safe to repeat."""
    _run(bool(ctx.obj.get("verbose", False)))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop and recreate the schema, then seed."""
    _refuse_in_production()
    if not yes:
        click.confirm("Drop users and subscriptions and recreate them?", abort=True)
    LOGGER.info("Recreating database schema")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _run(bool(ctx.obj.get("verbose", False)))
