"""Device command implementations."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional

import aiohttp
import click

from ledremote.core import RemoteController
from ledremote.exceptions import LedRemoteError, format_error_for_display
from ledremote.models import AppConfig, Color, ControlMode
from ledremote.protocols import ControllerEvent
from ledremote.services import ConfigService

logger = logging.getLogger(__name__)


class EchoObserver:
    """Prints controller notifications that have no return value to report."""

    def on_controller_event(self, event: ControllerEvent, **kwargs: Any) -> None:
        if event is ControllerEvent.CONNECTION_REQUIRED:
            click.echo(f"[FAIL] {kwargs['error'].user_message}", err=True)
        elif event is ControllerEvent.UPDATE_SENT:
            click.echo(
                f"[OK] Update to {kwargs['version']} sent. The device is rebooting; "
                "reconnect in a minute."
            )


def load_config_service(config_path: Path) -> ConfigService[AppConfig]:
    """
    Load the config file into a ConfigService.

    Raises:
        click.ClickException: If the file exists but is invalid
    """
    try:
        config_obj = AppConfig.load_or_default(config_path)
    except LedRemoteError as e:
        message, hint = format_error_for_display(e)
        raise click.ClickException(f"{message}\n{hint}" if hint else message) from e
    return ConfigService[AppConfig](AppConfig, config_obj, config_path)


def run_with_device(
    ctx: click.Context,
    address: Optional[str],
    action: Callable[[RemoteController], Awaitable[bool]],
    mode: ControlMode = ControlMode.PATTERN,
    prepare: Optional[Callable[[RemoteController], None]] = None,
) -> None:
    """
    Connect to the device, run `action`, and exit non-zero on failure.

    Args:
        ctx: Click context (holds config path and the global --address)
        address: Address argument of the command, if any
        action: Coroutine function receiving the connected controller
        mode: Mode to start in; PATTERN keeps the solid color from being sent on connect
        prepare: Optional hook run before connecting
    """
    service = load_config_service(ctx.obj["config_path"])
    target = address or ctx.obj.get("address") or service.get("last_address")

    async def main() -> bool:
        async with aiohttp.ClientSession() as session:
            controller = RemoteController(service, session=session)
            controller.register_observer(EchoObserver())
            controller.change_mode(mode)
            if prepare is not None:
                prepare(controller)
            try:
                if not await controller.connect(target):
                    click.echo(f"[FAIL] {controller.status.text}", err=True)
                    return False
                ok = await action(controller)
                if not ok and controller.status.is_error:
                    click.echo(f"[FAIL] {controller.status.text}", err=True)
                return ok
            finally:
                await controller.aclose()

    if not asyncio.run(main()):
        ctx.exit(1)


@click.command(name="probe")
@click.argument("address", required=False)
@click.pass_context
def probe(ctx: click.Context, address: Optional[str]):
    """Check that the device answers and remember its address."""

    async def action(controller: RemoteController) -> bool:
        click.echo(f"[OK] Device at {controller.address} is reachable (saved as default)")
        return True

    run_with_device(ctx, address, action)


@click.command(name="color")
@click.argument("r", type=click.IntRange(0, 255))
@click.argument("g", type=click.IntRange(0, 255))
@click.argument("b", type=click.IntRange(0, 255))
@click.pass_context
def color(ctx: click.Context, r: int, g: int, b: int):
    """Set a solid color (each channel 0-255)."""
    target = Color(r=r, g=g, b=b)

    async def action(controller: RemoteController) -> bool:
        # Connecting in SOLID mode already schedules the color
        await controller.flush_color()
        if controller.status.is_error:
            return False
        click.echo(f"[OK] Color set to {target.to_hex()}")
        return True

    run_with_device(
        ctx,
        None,
        action,
        mode=ControlMode.SOLID,
        prepare=lambda controller: controller.set_solid_color(target),
    )


@click.command(name="off")
@click.pass_context
def off(ctx: click.Context):
    """Turn the LEDs off."""

    async def action(controller: RemoteController) -> bool:
        await controller.toggle_power()
        if controller.status.is_error:
            return False
        click.echo("[OK] LEDs off")
        return True

    run_with_device(ctx, None, action, mode=ControlMode.SOLID)


@click.command(name="pattern")
@click.argument("kind", type=click.Choice(["rainbow", "random"], case_sensitive=False))
@click.option("--seed", type=int, default=None, help="Seed for a reproducible random pattern")
@click.pass_context
def pattern(ctx: click.Context, kind: str, seed: Optional[int]):
    """Generate a pattern and send it to the device."""

    def prepare(controller: RemoteController) -> None:
        if kind.lower() == "rainbow":
            controller.pattern.generate_rainbow()
        else:
            controller.pattern.generate_random(random.Random(seed))

    async def action(controller: RemoteController) -> bool:
        if await controller.send_pattern():
            click.echo(f"[OK] Sent {kind.lower()} pattern with {len(controller.pattern)} steps")
            return True
        return False

    run_with_device(ctx, None, action, prepare=prepare)


@click.command(name="info")
@click.pass_context
def info(ctx: click.Context):
    """Show the firmware version running on the device."""

    async def action(controller: RemoteController) -> bool:
        device_info = await controller.refresh_device_info()
        if device_info is None:
            return False
        click.echo(f"Address:  {controller.address}")
        click.echo(f"Firmware: {device_info.version}")
        return True

    run_with_device(ctx, None, action)
