"""photofolio CLI entry point."""

import logging

import click

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.option(
    "--log-level",
    default="warning",
    envvar="PHOTOFOLIO_LOG_LEVEL",
    show_envvar=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str):
    """photofolio — gallery filter and sort CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from photofolio.cli.config_cmd import config  # noqa: E402
from photofolio.cli.filter_cmd import filter_group  # noqa: E402
from photofolio.cli.gallery_cmd import gallery  # noqa: E402

cli.add_command(config)
cli.add_command(filter_group)
cli.add_command(gallery)
