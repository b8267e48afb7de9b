"""Helpers shared by the CLI commands."""

import logging
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from pydantic import ValidationError as PydanticValidationError

from ledbridge.exceptions import LedBridgeError, format_error_for_display, wrap_pydantic_error
from ledbridge.models import BridgeConfig
from ledbridge.models.config import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)


def report_error(ctx: click.Context, error: Exception) -> NoReturn:
    """Show a clean error message without traceback and exit with code 1."""
    if isinstance(error, LedBridgeError):
        logger.error(error.log_line())
    else:
        logger.exception("Unexpected error")

    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    log_path = (ctx.obj or {}).get("log_path")
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
    click.echo("For logging options, run: ledbridge --help", err=True)

    sys.exit(1)


def config_path(ctx: click.Context) -> Path:
    return (ctx.obj or {}).get("config_path") or DEFAULT_CONFIG_PATH


def load_config(ctx: click.Context, **overrides: Any) -> BridgeConfig:
    """
    Load the configuration file and apply command-line overrides.

    Options left at None are not applied. Invalid values exit with code 1.
    """
    path = config_path(ctx)
    try:
        config = BridgeConfig.load_or_default(path)
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return config
        try:
            return BridgeConfig.model_validate({**config.model_dump(), **updates})
        except PydanticValidationError as e:
            raise wrap_pydantic_error(e, "command line") from e
    except LedBridgeError as e:
        report_error(ctx, e)


def serial_overrides(port_path: Optional[str], baud: Optional[int]) -> dict[str, Any]:
    return {"serial_port": port_path, "baud_rate": baud}
