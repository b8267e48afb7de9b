"""Serve command - runs the HTTP bridge."""

import logging
from pathlib import Path
from typing import Optional

import click
import uvicorn

from ledbridge.api import create_app
from ledbridge.cli.common import load_config, serial_overrides

logger = logging.getLogger(__name__)


@click.command()
@click.pass_context
@click.option('--port-path', '-p', type=str, default=None, help='Serial device path or pyserial URL')
@click.option('--baud', '-b', type=int, default=None, help='Serial baud rate')
@click.option('--host', type=str, default=None, help='HTTP bind address')
@click.option('--http-port', type=int, default=None, help='HTTP bind port')
@click.option(
    '--static-dir',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help='Directory with a web page to serve at /'
)
def serve(
    ctx,
    port_path: Optional[str],
    baud: Optional[int],
    host: Optional[str],
    http_port: Optional[int],
    static_dir: Optional[Path]
):
    """
    Run the HTTP bridge.

    The serial link is opened at startup. If the controller is missing the
    server still starts and requests answer 503 until it is plugged in.

    \b
    Examples:
      ledbridge serve --port-path /dev/ttyACM0
      ledbridge serve --host 0.0.0.0 --http-port 8080 --static-dir ./www
      ledbridge serve --port-path socket://192.168.1.20:7777
    """
    config = load_config(
        ctx,
        **serial_overrides(port_path, baud),
        host=host,
        port=http_port,
        static_dir=static_dir,
    )

    logger.info(f"Starting bridge on http://{config.host}:{config.port} -> {config.serial_port}")
    click.echo(f"Serving on http://{config.host}:{config.port} (serial: {config.serial_port})")

    app = create_app(config)

    # log_config=None keeps uvicorn on the handlers set up by the CLI
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
