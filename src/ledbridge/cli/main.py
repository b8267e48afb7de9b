"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from ledbridge import __version__

from .commands import config, ports, probe, send_group, serve

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEBUG_LOG_NAME = "ledbridge-debug.log"

# Handlers installed by setup_logging, replaced on the next call
_handlers: list[logging.Handler] = []


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Optional[Path]:
    """Return the log file path implied by the flags, or None for stderr only."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / DEBUG_LOG_NAME
    return None


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    The bridge always logs to stderr. A rotating log file is added in debug
    mode or when a custom path is given.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    # Determine log level based on flags
    if debug:
        level = logging.DEBUG
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    _handlers.append(stream_handler)

    root_level = level
    log_path = resolve_log_path(debug, log_file)
    if log_path is not None:
        file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

        # Keeps last 5 files, max 10MB each
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)
        root_level = min(level, file_level)

    root_logger.setLevel(root_level)
    for handler in _handlers:
        root_logger.addHandler(handler)

    logger.info(
        f"Logging configured: level={logging.getLevelName(level)}, file={log_path or '(none)'}"
    )


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="ledbridge")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help=f'Enable debug mode (DEBUG level, logs to ./{DEBUG_LOG_NAME})'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
@click.option(
    '--config', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Configuration file (default: ~/.ledbridge/config.json)'
)
def cli(
    ctx,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str,
    config_path: Optional[Path]
):
    """
    ledbridge - HTTP bridge for a serial-attached LED strip controller.

    Translates web requests (brightness, effect, color, fire palette)
    into the controller's framed serial protocol.

    \b
    Examples:
      # Serve the HTTP API on the default port
      ledbridge serve --port-path /dev/ttyACM0

      # Ask the controller for its firmware version
      ledbridge probe

      # One-shot command without the server
      ledbridge send brightness 75

      # List serial ports
      ledbridge ports

      # Enable debug logging
      ledbridge --debug serve
    """
    setup_logging(verbose, debug, log_file, log_level)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_path"] = resolve_log_path(debug, log_file)


cli.add_command(serve)
cli.add_command(probe)
cli.add_command(ports)
cli.add_command(send_group)
cli.add_command(config)

if __name__ == "__main__":
    cli()
