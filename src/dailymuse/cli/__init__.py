"""dailymuse CLI: publish, reschedule and browse daily comics."""

import click

from dailymuse import __version__


@click.group()
@click.version_option(version=__version__, package_name="dailymuse")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="MUSE_CONFIG",
    help="YAML or JSON config file (default: ~/.dailymuse/config.yaml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log progress at INFO level.")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool, log_file: str | None) -> None:
    """Daily Muse: a comic a day, scheduled by date."""
    from dailymuse.core.utils.logging import setup_logging

    setup_logging(verbose=verbose, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


from .publish_cmd import generate, publish
from .read_cmd import archive, list_entries, today
from .schedule_cmd import reindex, remove, reschedule

main.add_command(publish)
main.add_command(generate)
main.add_command(reschedule)
main.add_command(remove)
main.add_command(reindex)
main.add_command(today)
main.add_command(archive)
main.add_command(list_entries)
