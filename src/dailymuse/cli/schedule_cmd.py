"""muse reschedule / remove / reindex."""

from __future__ import annotations

import asyncio

import click

from .common import echo_result, handle_errors, load_config, login, password_option, run_with_services


@click.command()
@click.argument("old_date")
@click.argument("new_date")
@password_option
@click.pass_context
@handle_errors
def reschedule(ctx: click.Context, old_date: str, new_date: str, password: str) -> None:
    """Move the entry at OLD_DATE to NEW_DATE."""
    login(load_config(ctx), password)
    result = run_with_services(ctx, lambda scheduler, _: scheduler.reschedule(old_date, new_date))
    if old_date == new_date:
        echo_result(result, "Dates are identical; nothing to do.")
    else:
        echo_result(result, f"Moved {old_date} -> {new_date}.")


@click.command()
@click.argument("date")
@password_option
@click.pass_context
@handle_errors
def remove(ctx: click.Context, date: str, password: str) -> None:
    """Delete the entry at DATE and its images."""
    login(load_config(ctx), password)
    result = run_with_services(ctx, lambda scheduler, _: scheduler.remove(date))
    echo_result(result, f"Removed {date}.")


@click.command()
@click.pass_context
@handle_errors
def reindex(ctx: click.Context) -> None:
    """Rebuild index.json for the flat-file entry store."""
    from dailymuse.backends import create_entry_store
    from dailymuse.entries.backends import FileEntryStore

    store = create_entry_store(load_config(ctx))
    if not isinstance(store, FileEntryStore):
        raise click.ClickException(f"reindex only applies to the file store (configured: {store.name}).")
    dates = asyncio.run(store.rebuild_index())
    click.echo(f"Indexed {len(dates)} entries.")
