"""muse generate / publish."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from dailymuse.entries import codec
from dailymuse.entries.models import PublishDraft

from .common import echo_result, handle_errors, load_config, login, password_option, run_with_services


def _read_image(path: str) -> str:
    data = Path(path).read_bytes()
    return codec.encode(data, codec.sniff_mime(data))


@click.command()
@click.option("--title", required=True, help="Episode title shown on the title card.")
@click.option("--episode", "episode_number", required=True, help='Episode label, e.g. "#01".')
@click.option("--concept", required=True, help="Four sentences, one per panel.")
@click.option("--character", "character_description", default="", help="Main character description.")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory for the generated images.",
)
@click.pass_context
@handle_errors
def generate(
    ctx: click.Context,
    title: str,
    episode_number: str,
    concept: str,
    character_description: str,
    out_dir: str,
) -> None:
    """Generate a title card and a four-panel comic."""
    from dailymuse.generation import ImageGenerator

    config = load_config(ctx)
    generator = ImageGenerator(
        model=config.get("generation.model"),
        size=config.get("generation.size", "1024x1024"),
    )

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    async def _both():
        return await asyncio.gather(
            generator.generate_title(title, episode_number, character_description),
            generator.generate_comic(concept, character_description),
        )

    click.echo("Generating title card and comic...")
    title_ref, comic_ref = asyncio.run(_both())

    for name, ref in (("title", title_ref), ("comic", comic_ref)):
        path = out / f"{name}.{codec.extension_for(codec.mime_type(ref))}"
        path.write_bytes(codec.decode(ref))
        click.echo(f"Wrote {path}")


@click.command()
@click.option("--date", "scheduled_date", required=True, help="Publication date (YYYY-MM-DD).")
@click.option("--title", required=True)
@click.option("--episode", "episode_number", required=True)
@click.option("--title-image", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--comic-image", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--character", "character_description", default="")
@click.option("--concept", default="")
@password_option
@click.pass_context
@handle_errors
def publish(
    ctx: click.Context,
    scheduled_date: str,
    title: str,
    episode_number: str,
    title_image: str,
    comic_image: str,
    character_description: str,
    concept: str,
    password: str,
) -> None:
    """Schedule a new episode on a free date."""
    login(load_config(ctx), password)
    draft = PublishDraft(
        scheduled_date=scheduled_date,
        title=title,
        episode_number=episode_number,
        title_image=_read_image(title_image),
        comic_image=_read_image(comic_image),
        character_description=character_description,
        concept=concept,
    )
    result = run_with_services(ctx, lambda scheduler, _: scheduler.publish(draft))
    echo_result(result, f"Published '{title}' for {scheduled_date}.")
