"""Main CLI entry point for leadq-cli."""

import logging
from pathlib import Path

import click

from . import __version__
from .commands.setup import init, reset, show, status, templates
from .config.settings import load_config
from .ui.console import create_console

logger = logging.getLogger(__name__)


def configure_logging(level: str, fmt: str) -> None:
    """Route log records to stderr at the configured level."""
    logging.basicConfig(level=getattr(logging, level), format=fmt)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode with verbose output",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config: Path | None) -> None:
    """
    LeadQ CLI - guided setup for your LeadQ.ai workspace.

    Walks you through your profile, organization and CRM pipeline,
    then saves a single setup record used by the rest of LeadQ.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_config(config)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(
        "DEBUG" if debug else settings.logging.level, settings.logging.format
    )

    ctx.obj["settings"] = settings
    ctx.obj["debug"] = debug
    ctx.obj.setdefault("console", create_console())
    logger.debug(f"Using {settings.storage.backend} store")


cli.add_command(init)
cli.add_command(status)
cli.add_command(show)
cli.add_command(reset)
cli.add_command(templates)


def main() -> None:
    """Entry point for the leadq-cli console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
