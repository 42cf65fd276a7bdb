#!/usr/bin/env python3
"""
BurpNote CLI.

Primary entry point. Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service tui
    python cli.py --service tui --debug
    python cli.py --service config
    python cli.py --service info
"""

import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from burpnote.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["tui", "config", "info"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
def main(service: str, verbose: bool, debug: bool) -> None:
    """
    BurpNote CLI.

    Runs the notes plugin inside the standalone Textual host, or shows
    the loaded configuration.

    \b
    Examples:
        python cli.py --service tui
        python cli.py --service tui --debug
        python cli.py --service config
        python cli.py --service info
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    # The TUI owns the terminal; its logs go to the JSONL file only
    if service == "tui":
        setup_logging(level=log_level, enable_console=False)
    else:
        setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="tui" if service == "tui" else "cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "tui":
        run_tui(logger)
    elif service == "config":
        show_config(logger)
    elif service == "info":
        show_info(logger)


def run_tui(logger) -> None:
    """Start the standalone host with the BurpNote plugin registered."""
    from burpnote.plugin.extender import NotesExtender
    from burpnote.plugin.host import StandaloneHost

    try:
        extender = NotesExtender()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration.", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"), err=True)
        sys.exit(1)

    host = StandaloneHost()
    extender.register_extender_callbacks(host)

    logger.info("Starting TUI")
    host.run()
    logger.info("TUI stopped")


def show_config(logger) -> None:
    """Display loaded configuration. The password is never shown."""
    click.echo("Application Configuration:\n")

    try:
        from burpnote.backend.core.config import get_app_config

        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    sections = [
        ("Application Settings", app_config.application),
        ("Database Settings", app_config.database),
        ("Logging Settings", app_config.logging),
        ("Feature Flags", app_config.features),
    ]
    for title, section in sections:
        click.echo(f"{title} (from YAML):")
        click.echo("-" * 40)
        for key, value in section.model_dump().items():
            if isinstance(value, dict):
                click.echo(f"  {key}:")
                for k, v in value.items():
                    click.echo(f"    {k}: {v}")
            else:
                click.echo(f"  {key}: {value}")
        click.echo()

    logger.info("Configuration displayed successfully")


def show_info(logger) -> None:
    """Display application information."""
    click.echo("BurpNote")
    click.echo("=" * 40)
    click.echo("\nDomain-keyed notes for proxy sessions, stored in MySQL.\n")
    click.echo("Available Services:")
    click.echo("  tui     - Run the plugin in the standalone host")
    click.echo("  config  - Display loaded configuration")
    click.echo("  info    - Show this information")
    click.echo("\nUse --help for full options.")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
