"""Firmware command implementations."""

import click

from ledremote.core import RemoteController
from ledremote.models import ControlMode

from .device import run_with_device


@click.group(name="firmware")
def firmware():
    """Firmware version checks and updates."""
    pass


async def _compare_versions(controller: RemoteController) -> bool:
    """Read both versions and print them. Returns False if either lookup failed."""
    if not controller.change_mode(ControlMode.SYSTEM):
        return False
    device_info = await controller.refresh_device_info()
    if device_info is None:
        return False
    latest = await controller.check_for_update()
    if latest is None:
        return False

    click.echo(f"Current version: {device_info.version}")
    click.echo(f"Latest version:  {latest.version}")
    return True


@firmware.command(name="check")
@click.pass_context
def check(ctx: click.Context):
    """Compare the device firmware with the latest release."""

    async def action(controller: RemoteController) -> bool:
        if not await _compare_versions(controller):
            return False
        latest = controller.firmware_info
        if controller.update_available:
            click.echo(f"\nUpdate available. Changes in v{latest.version}:")
            click.echo(latest.changelog)
            click.echo("\nRun 'ledremote firmware update' to install it.")
        else:
            click.echo("\nThe device is up to date.")
        return True

    run_with_device(ctx, None, action)


@firmware.command(name="update")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def update(ctx: click.Context, yes: bool):
    """Install the latest firmware on the device (the device reboots)."""

    async def action(controller: RemoteController) -> bool:
        if not await _compare_versions(controller):
            return False
        latest = controller.firmware_info
        if not controller.update_available:
            click.echo("The device is up to date.")
            return True

        if not yes and not click.confirm(
            f"Update to version {latest.version}? The device will reboot when done.",
            default=False,
        ):
            click.echo("Update cancelled.")
            return True

        return await controller.start_firmware_update()

    run_with_device(ctx, None, action)
