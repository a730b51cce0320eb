"""Smoke tests for TUI using Textual's test framework.

These tests verify that the TUI can launch, render, and respond to basic
interactions without crashing. They don't test detailed behavior, just that
the core functionality works.
"""

import pytest
from textual.widgets import ContentSwitcher, Input

from ledremote.core import RemoteController
from ledremote.models import ConnectionState, ControlMode
from ledremote.tui import LedRemoteApp
from ledremote.tui.widgets import (
    ColorPreview,
    ConnectionModal,
    PatternPanel,
    SolidPanel,
    StatusBar,
    SystemPanel,
)


@pytest.fixture
def app(config_service):
    """App with an injected controller; the app closes it on unmount."""
    return LedRemoteApp(controller=RemoteController(config_service))


async def dismiss_dialog(app, pilot) -> None:
    """Close the startup connection dialog and clear focus so app bindings fire."""
    await pilot.pause()
    await pilot.press("escape")
    await pilot.pause()
    app.set_focus(None)


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUILaunch:
    """Test that TUI can launch without crashing."""

    async def test_opens_connection_dialog_on_start(self, app):
        async with app.run_test() as pilot:
            await pilot.pause()

            assert isinstance(app.screen, ConnectionModal)
            assert app.screen.query_one("#address-input", Input).value == "192.168.1.100"

    async def test_mounts_widgets(self, app):
        async with app.run_test() as pilot:
            await dismiss_dialog(app, pilot)

            assert not isinstance(app.screen, ConnectionModal)
            assert app.query_one(ColorPreview) is not None
            assert app.query_one(SolidPanel) is not None
            assert app.query_one(PatternPanel) is not None
            assert app.query_one(SystemPanel) is not None
            assert app.query_one(StatusBar).text == "Ready"

    async def test_switch_to_pattern_mode(self, app):
        async with app.run_test() as pilot:
            await dismiss_dialog(app, pilot)

            await pilot.press("2")
            await pilot.pause()

            assert app.controller.mode is ControlMode.PATTERN
            assert app.query_one("#mode-switcher", ContentSwitcher).current == "pattern"

    async def test_system_mode_needs_connection(self, app):
        async with app.run_test() as pilot:
            await dismiss_dialog(app, pilot)

            await pilot.press("3")
            await pilot.pause()

            assert app.controller.mode is ControlMode.SOLID
            assert isinstance(app.screen, ConnectionModal)

    async def test_add_step_binding(self, app):
        async with app.run_test() as pilot:
            await dismiss_dialog(app, pilot)
            await pilot.press("2")
            await pilot.press("a")
            await pilot.pause()

            assert len(app.controller.pattern) == 2

    async def test_invalid_address_keeps_dialog_open(self, app):
        async with app.run_test() as pilot:
            await pilot.pause()
            app.screen.query_one("#address-input", Input).value = "esp32.local"
            await pilot.click("#connect-btn")
            await pilot.pause()

            assert isinstance(app.screen, ConnectionModal)
            assert app.controller.state is ConnectionState.DISCONNECTED


@pytest.mark.integration
@pytest.mark.asyncio
class TestTUIConnect:
    """Connecting through the UI to the fake device."""

    async def test_connects_to_start_address(self, config_service, fake_device):
        app = LedRemoteApp(address=fake_device.address, controller=RemoteController(config_service))

        async with app.run_test() as pilot:
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.controller.is_connected
            assert not isinstance(app.screen, ConnectionModal)
            assert app.sub_title == fake_device.address

    async def test_failed_start_address_reopens_dialog(self, config_service, unreachable_address):
        app = LedRemoteApp(address=unreachable_address, controller=RemoteController(config_service))

        async with app.run_test() as pilot:
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert isinstance(app.screen, ConnectionModal)
            assert "Could not connect" in str(app.screen.error)
