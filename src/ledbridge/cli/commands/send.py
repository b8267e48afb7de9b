"""One-shot commands sent without the HTTP server."""

import logging
from collections.abc import Callable
from typing import Optional

import click

from ledbridge.cli.common import load_config, report_error, serial_overrides
from ledbridge.dispatcher import CommandDispatcher, DispatchResult, describe
from ledbridge.exceptions import LedBridgeError
from ledbridge.link import LinkManager
from ledbridge.models import Effect, Palette

logger = logging.getLogger(__name__)


def _run(ctx: click.Context, operation: Callable[[CommandDispatcher], DispatchResult]) -> None:
    params = ctx.parent.params
    config = load_config(ctx, **serial_overrides(params["port_path"], params["baud"]))

    try:
        with LinkManager.from_config(config) as link:
            result = operation(CommandDispatcher(link))
    except LedBridgeError as e:
        report_error(ctx, e)

    if not result.ok:
        click.echo(describe(result), err=True)
        ctx.exit(1)
    click.echo(describe(result))


@click.group(name="send")
@click.option('--port-path', '-p', type=str, default=None, help='Serial device path or pyserial URL')
@click.option('--baud', '-b', type=int, default=None, help='Serial baud rate')
def send_group(port_path: Optional[str], baud: Optional[int]):
    """
    Send a single command to the controller.

    \b
    Examples:
      ledbridge send brightness 75
      ledbridge send effect 5
      ledbridge send color '#4f2d86'
      ledbridge send palette 2
    """
    pass


@send_group.command()
@click.pass_context
@click.argument('percent')
def brightness(ctx, percent: str):
    """Set brightness (0-100 percent)."""
    _run(ctx, lambda d: d.set_brightness(percent))


@send_group.command()
@click.pass_context
@click.argument('effect_id')
def effect(ctx, effect_id: str):
    """Select an effect by id."""
    _run(ctx, lambda d: d.set_effect(effect_id))


@send_group.command()
@click.pass_context
@click.argument('value')
def color(ctx, value: str):
    """Set the solid color ('#rrggbb')."""
    _run(ctx, lambda d: d.set_color(value))


@send_group.command()
@click.pass_context
@click.argument('palette_id')
def palette(ctx, palette_id: str):
    """Select a fire palette by id."""
    _run(ctx, lambda d: d.set_fire_palette(palette_id))


@send_group.command()
@click.pass_context
@click.argument('enabled')
def debugging(ctx, enabled: str):
    """Turn firmware debug output on or off."""
    _run(ctx, lambda d: d.set_debugging(enabled))


@send_group.command()
@click.pass_context
def reset(ctx):
    """Reboot the controller."""
    _run(ctx, lambda d: d.full_reset())


@send_group.command()
@click.pass_context
def bootloader(ctx):
    """Reboot the controller into its bootloader."""
    _run(ctx, lambda d: d.enter_bootloader())


@send_group.command(name="list")
def list_values():
    """List effect and palette ids."""
    click.echo("Effects:\n")
    for e in Effect:
        click.echo(f"  [{e.value}] {e.name.lower()}")

    click.echo("\nFire Palettes:\n")
    for p in Palette:
        click.echo(f"  [{p.value}] {p.name.lower()}")
