"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from ledremote import __version__
from ledremote.models.config import default_config_path

from .commands import color, config, firmware, info, off, pattern, probe

logger = logging.getLogger(__name__)


def _default_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "ledremote-debug.log"
    return Path.home() / ".ledremote" / "logs" / "ledremote.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Explicit log level wins when logging to a custom file
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = _default_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Keeps last 5 files, max 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="ledremote")
@click.option(
    '--address',
    '-a',
    type=str,
    default=None,
    help='Device IP address (default: last connected address)'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.ledremote/config.json)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./ledremote-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    address: Optional[str],
    config_path: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    LED Remote - control an ESP32 LED strip over your local network.

    Without a command, the terminal UI starts. It has three modes:

    \b
    - Solid: pick a color with sliders or presets
    - Pattern: build a sequence of timed color steps
    - System: check and install firmware updates

    \b
    Examples:
      # Start the UI and connect to the last device
      ledremote

      # Start the UI with a specific device
      ledremote --address 192.168.1.50

      # Set a color from a script
      ledremote color 255 0 0

      # Send a rainbow pattern
      ledremote pattern rainbow

      # Enable debug logging
      ledremote --debug
    """
    ctx.ensure_object(dict)
    ctx.obj["address"] = address
    ctx.obj["config_path"] = config_path or default_config_path()

    if ctx.invoked_subcommand is not None:
        if verbose or debug or log_file:
            setup_logging(verbose, debug, log_file, log_level)
        return

    # Lazy imports keep `--help` and scripting commands fast
    from ledremote.exceptions import format_error_for_display
    from ledremote.tui import LedRemoteApp

    # The TUI owns stdout, so logs go to a file
    log_path = setup_logging(verbose, debug, log_file, log_level)
    logger.info("Starting LED Remote")

    try:
        app = LedRemoteApp(config_path=ctx.obj["config_path"], address=address)
        app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running application")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        click.echo("For logging options, run: ledremote --help", err=True)
        sys.exit(1)


cli.add_command(probe)
cli.add_command(color)
cli.add_command(off)
cli.add_command(pattern)
cli.add_command(info)
cli.add_command(firmware)
cli.add_command(config)

if __name__ == "__main__":
    cli()
