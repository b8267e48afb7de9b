"""Config command - show or save the effective configuration."""

import click

from ledbridge.cli.common import config_path, load_config, report_error
from ledbridge.exceptions import LedBridgeError


@click.command()
@click.pass_context
@click.option('--save', is_flag=True, help='Write the effective configuration to the config file')
def config(ctx, save: bool):
    """
    Show the effective configuration.

    Values come from the config file when it exists, defaults otherwise.
    """
    cfg = load_config(ctx)
    path = config_path(ctx)

    click.echo(f"Configuration ({path}{'' if path.exists() else ', not found, defaults'}):\n")
    for name, field in type(cfg).model_fields.items():
        value = getattr(cfg, name)
        click.echo(f"  {name}: {value if value is not None else '(none)'}")
        if field.description:
            click.echo(f"      {field.description}")

    if save:
        try:
            cfg.save(path)
        except (LedBridgeError, OSError) as e:
            report_error(ctx, e)
        click.echo(f"\nSaved to {path}")
