"""Serial device commands."""

import logging
from typing import Optional

import click

from ledbridge.cli.common import load_config, report_error, serial_overrides
from ledbridge.exceptions import LedBridgeError
from ledbridge.link import LinkManager

logger = logging.getLogger(__name__)


@click.command()
def ports():
    """List available serial ports."""
    found = LinkManager.list_ports()

    click.echo("Serial Ports:\n")
    if not found:
        click.echo("  No serial ports found.")
        return

    for i, port in enumerate(found):
        click.echo(f"  [{i}] {port.device} - {port.description}")


@click.command()
@click.pass_context
@click.option('--port-path', '-p', type=str, default=None, help='Serial device path or pyserial URL')
@click.option('--baud', '-b', type=int, default=None, help='Serial baud rate')
def probe(ctx, port_path: Optional[str], baud: Optional[int]):
    """Open the serial port and print the controller's firmware version."""
    config = load_config(ctx, **serial_overrides(port_path, baud))

    try:
        with LinkManager.from_config(config) as link:
            version = link.probe_version()
            click.echo(f"Port:     {link.port_name}")
            click.echo(f"Firmware: {version or '(empty)'}")
            click.echo(f"Protocol: {link.protocol_version.name}")
    except LedBridgeError as e:
        report_error(ctx, e)
