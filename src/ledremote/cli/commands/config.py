"""Config command implementations.

Commands:
    - config show               # Display configuration
    - config path               # Print the config file location
    - config set KEY VALUE      # Validate, update and save one field
    - config reset [--yes]      # Reset to defaults and save
"""

import click
from pydantic import ValidationError

from ledremote.exceptions import format_error_for_display, wrap_pydantic_error
from ledremote.models import AppConfig

from .device import load_config_service


@click.group(name="config")
def config():
    """Configure LED Remote settings."""
    pass


@config.command(name="show")
@click.pass_context
def show(ctx: click.Context):
    """Display the current configuration."""
    service = load_config_service(ctx.obj["config_path"])
    values = service.get_all()
    width = max(len(key) for key in values)

    click.echo(f"Configuration ({ctx.obj['config_path']}):\n")
    for key, value in values.items():
        description = AppConfig.model_fields[key].description or ""
        click.echo(f"  {key:<{width}}  {value}")
        if description:
            click.echo(f"  {'':<{width}}  ({description})")


@config.command(name="path")
@click.pass_context
def path(ctx: click.Context):
    """Print the config file location."""
    click.echo(str(ctx.obj["config_path"]))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_value(ctx: click.Context, key: str, value: str):
    """Set KEY to VALUE and save."""
    config_path = ctx.obj["config_path"]
    service = load_config_service(config_path)

    try:
        service.set(key, value)
    except AttributeError as e:
        fields = ", ".join(AppConfig.model_fields)
        raise click.BadParameter(f"Unknown setting '{key}'. Valid settings: {fields}", param_hint="KEY") from e
    except ValidationError as e:
        message, hint = format_error_for_display(wrap_pydantic_error(e, str(config_path)))
        raise click.ClickException(f"{message}\n{hint}" if hint else message) from e

    service.save()
    click.echo(f"[OK] {key} = {service.get(key)}")


@config.command(name="reset")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, yes: bool):
    """Reset all settings to their defaults."""
    if not yes:
        click.confirm("Reset all settings to defaults?", abort=True)

    service = load_config_service(ctx.obj["config_path"])
    service.reset()
    saved = service.save()
    click.echo(f"[OK] Configuration reset ({saved})")
