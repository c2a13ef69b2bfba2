"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path

import click

from dailymuse.core.exceptions import MuseError
from dailymuse.entries.models import MuseEntry, OperationResult

MUSE_DIR = Path.home() / ".dailymuse"
CONFIG_PATH = MUSE_DIR / "config.yaml"


def load_config(ctx: click.Context):
    """Load config from --config, else ~/.dailymuse/config.yaml, plus MUSE_* env vars."""
    from dailymuse.core.config import Config

    config_file = (ctx.obj or {}).get("config_file") or str(CONFIG_PATH)
    return Config(config_file=config_file)


def load_services(ctx: click.Context):
    from dailymuse.backends import create_services

    return create_services(load_config(ctx))


def run_with_services(ctx: click.Context, operation):
    """Build the configured services and drive one async operation to completion.

    ``operation`` takes ``(scheduler, queries)`` and returns a coroutine.
    """
    scheduler, queries = load_services(ctx)
    return asyncio.run(operation(scheduler, queries))


def login(config, password: str):
    """Turn the --password option into a creator session, or fail.

    An empty password never reaches the gate; it stays anonymous and is
    refused by ``require_creator``.
    """
    from dailymuse.auth import ANONYMOUS, PasswordGate, require_creator

    session = PasswordGate(config.get("admin.password", "")).login(password) if password else ANONYMOUS
    require_creator(session)
    return session


def handle_errors(func):
    """Report domain errors as a one-line message with exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MuseError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


password_option = click.option(
    "--password",
    prompt=True,
    hide_input=True,
    envvar="MUSE_PASSWORD",
    help="Creator (admin) password.",
)


def format_entry(entry: MuseEntry) -> str:
    line = f"{entry.scheduled_date}  {entry.episode_number:<6} {entry.title or 'Untitled'}"
    if not entry.is_published:
        line += "  (incomplete artwork)"
    return line


def echo_result(result: OperationResult, message: str) -> None:
    click.echo(message)
    for warning in result.warnings:
        click.secho(f"warning: {warning}", fg="yellow", err=True)
