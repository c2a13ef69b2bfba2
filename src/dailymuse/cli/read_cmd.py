"""muse today / archive / list."""

from __future__ import annotations

import click

from .common import format_entry, handle_errors, run_with_services


@click.command()
@click.pass_context
@handle_errors
def today(ctx: click.Context) -> None:
    """Show today's episode."""
    entry = run_with_services(ctx, lambda _, queries: queries.today())
    if entry is None:
        click.echo("To be continued... No episode scheduled for today.")
        return
    click.echo(format_entry(entry))
    if entry.concept:
        click.echo(f"\n{entry.concept}")
    click.echo(f"\ntitle: {entry.title_image or '-'}")
    click.echo(f"comic: {entry.comic_image or '-'}")


@click.command()
@click.option("--before", default=None, help="Cutoff date (YYYY-MM-DD); defaults to today.")
@click.pass_context
@handle_errors
def archive(ctx: click.Context, before: str | None) -> None:
    """List past episodes, newest first."""
    entries = run_with_services(ctx, lambda _, queries: queries.archive(before=before))
    if not entries:
        click.echo("The archive is empty.")
        return
    for entry in entries:
        click.echo(format_entry(entry))


@click.command(name="list")
@click.pass_context
@handle_errors
def list_entries(ctx: click.Context) -> None:
    """List every scheduled entry, including future ones."""
    entries = run_with_services(ctx, lambda _, queries: queries.all_entries())
    if not entries:
        click.echo("Nothing scheduled yet.")
        return
    for entry in entries:
        click.echo(format_entry(entry))
