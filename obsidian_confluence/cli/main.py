"""Main CLI entry point for the obsidian-confluence command.

This module provides the Typer application that publishes a single note
from an Obsidian vault to Confluence.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from obsidian_confluence import __version__
from obsidian_confluence.cli.models import ExitCode
from obsidian_confluence.cli.output import OutputHandler
from obsidian_confluence.cli.sync_command import SyncCommand

# Create Typer app
app = typer.Typer(
    name="obsidian-confluence",
    help="""Publish an Obsidian note to Confluence.

EXAMPLE:
  obsidian-confluence Projects/Plan.md --vault ~/notes""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

APP_LOGGER_NAME = "obsidian_confluence"


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the package logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)
    # Repeated invocations in one process must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    # Define log format
    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    # File handler (if logdir is specified)
    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"obsidian-confluence_{timestamp}.log"

        # File handler gets the logger name too
        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    note: Optional[str] = typer.Argument(
        None,
        help="Markdown note to publish",
    ),
    vault: str = typer.Option(
        ".",
        "--vault",
        help="Vault root directory (link and embed targets resolve inside it)",
        metavar="DIR",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Settings file (default: <vault>/.obsidian-confluence/config.yaml)",
        metavar="PATH",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Publish an Obsidian note to Confluence.

    Creates the page on first sync and stores its id in the note's
    frontmatter; later syncs update the same page.
    """
    if version:
        typer.echo(f"obsidian-confluence version {__version__}")
        raise typer.Exit()

    if note is None:
        typer.echo("Error: Missing argument 'NOTE'.", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    sync_cmd = SyncCommand(vault_root=vault, config_path=config, output_handler=output)
    exit_code = sync_cmd.run(note)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m obsidian_confluence.cli.main
if __name__ == "__main__":
    main()
