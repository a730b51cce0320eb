"""Main TUI application with solid, pattern and system modes."""

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Header, RadioButton, RadioSet

from ledremote.core import RemoteController
from ledremote.exceptions import ErrorContext, PatternEditError
from ledremote.models import AppConfig, ConnectionState, ControlMode
from ledremote.models.config import default_config_path
from ledremote.protocols import ControllerEvent, PatternEvent
from ledremote.services import ConfigService

from .decorators import handle_action_errors
from .widgets import (
    ColorPreview,
    ConfirmationModal,
    ConnectionModal,
    PatternPanel,
    SolidPanel,
    StatusBar,
    SystemPanel,
)

logger = logging.getLogger(__name__)

_MODE_RADIO_IDS = {
    ControlMode.SOLID: "mode-solid",
    ControlMode.PATTERN: "mode-pattern",
    ControlMode.SYSTEM: "mode-system",
}


class LedRemoteApp(App):
    """
    Textual TUI for the LED remote.

    A pure UI layer: all state lives in the RemoteController. The app
    forwards user intents to it and re-renders from its properties
    whenever a ControllerEvent or PatternEvent arrives.

    Device requests run as Textual workers so the UI stays responsive
    while a request is waiting on the network.
    """

    TITLE = "LED Remote"

    BINDINGS = [
        Binding("c", "connect", "Connect", show=True),
        Binding("x", "disconnect", "Disconnect", show=True),
        Binding("1", "set_control_mode('solid')", "Solid", show=True),
        Binding("2", "set_control_mode('pattern')", "Pattern", show=True),
        Binding("3", "set_control_mode('system')", "System", show=True),
        Binding("p", "toggle_power", "Power", show=True),
        Binding("s", "send_pattern", "Send Pattern", show=False),
        Binding("a", "add_step", "Add Step", show=False),
        Binding("d", "delete_step", "Delete Step", show=False),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    # =================================================================
    # Initialization & Lifecycle
    # =================================================================

    def __init__(
        self,
        config_path: Optional[Path] = None,
        address: Optional[str] = None,
        controller: Optional[RemoteController] = None,
    ):
        """
        Initialize the Textual UI application.

        Args:
            config_path: Config file (defaults to ~/.ledremote/config.json)
            address: Device to connect to on startup (skips the dialog)
            controller: Pre-built controller (tests inject one)
        """
        super().__init__()
        if controller is None:
            path = config_path or default_config_path()
            config_obj = AppConfig.load_or_default(path)
            controller = RemoteController(ConfigService[AppConfig](AppConfig, config_obj, path))
        self.controller = controller
        self._start_address = address
        self._connection_modal_open = False
        logger.info("LedRemoteApp created")

    def compose(self) -> ComposeResult:
        """Create the main layout."""
        yield Header()

        with Vertical(id="main"):
            yield ColorPreview(id="preview")
            with RadioSet(id="mode-radio"):
                yield RadioButton("Solid", id="mode-solid", value=True)
                yield RadioButton("Pattern", id="mode-pattern")
                yield RadioButton("System", id="mode-system")
            with ContentSwitcher(initial="solid", id="mode-switcher"):
                yield SolidPanel(id="solid")
                yield PatternPanel(id="pattern")
                yield SystemPanel(id="system")

        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        """Register observers, render the initial state, then connect."""
        self.controller.register_observer(self)
        self.controller.pattern.register_observer(self)

        self._sync_all()

        if self._start_address:
            self._connect(self._start_address)
        else:
            self.action_connect()

        logger.info("TUI mount complete")

    async def on_unmount(self) -> None:
        with ErrorContext("close controller", logger, re_raise=False):
            self.controller.pattern.unregister_observer(self)
            await self.controller.aclose()
        logger.info("TUI unmounted")

    # =================================================================
    # Observer Protocols - re-render from controller state
    # =================================================================

    def on_controller_event(self, event: ControllerEvent, **kwargs: Any) -> None:
        """Keep widgets in sync with the controller."""
        if event is ControllerEvent.STATUS_CHANGED:
            self._sync_status_bar()
        elif event in (ControllerEvent.COLOR_CHANGED, ControllerEvent.POWER_CHANGED):
            self._sync_solid()
            self._sync_preview()
        elif event is ControllerEvent.MODE_CHANGED:
            self._sync_mode()
            self._sync_preview()
            self._sync_status_bar()
            if kwargs["mode"] is ControlMode.SYSTEM:
                self.run_worker(self._refresh_device_info(), group="device")
        elif event is ControllerEvent.CONNECTION_CHANGED:
            self._sync_status_bar()
            self._sync_system()
            self.sub_title = self.controller.address or ""
        elif event is ControllerEvent.CONNECTION_REQUIRED:
            self.action_connect()
        elif event in (
            ControllerEvent.DEVICE_INFO_CHANGED,
            ControllerEvent.FIRMWARE_INFO_CHANGED,
            ControllerEvent.UPDATE_STARTED,
        ):
            self._sync_system()
        elif event is ControllerEvent.UPDATE_SENT:
            self.notify(
                f"Update to v{kwargs['version']} sent. The device is rebooting; "
                "reconnect in a minute.",
                timeout=10,
            )

    def on_pattern_event(self, event: PatternEvent, index: int) -> None:
        self._sync_pattern()
        self._sync_preview()

    # =================================================================
    # Rendering
    # =================================================================

    def _sync_all(self) -> None:
        self._sync_mode()
        self._sync_solid()
        self._sync_pattern()
        self._sync_system()
        self._sync_preview()
        self._sync_status_bar()

    def _sync_status_bar(self) -> None:
        controller = self.controller
        self.query_one(StatusBar).update_state(
            controller.state, controller.address, controller.mode, controller.status
        )

    def _sync_preview(self) -> None:
        preview = self.query_one(ColorPreview)
        preview.display = self.controller.mode is not ControlMode.SYSTEM
        preview.show_color(self.controller.display_color, self.controller.is_on)

    def _sync_mode(self) -> None:
        mode = self.controller.mode
        self.query_one("#mode-switcher", ContentSwitcher).current = mode.value
        radio = self.query_one(f"#{_MODE_RADIO_IDS[mode]}", RadioButton)
        if not radio.value:
            radio.value = True

    def _sync_solid(self) -> None:
        self.query_one(SolidPanel).update_color(self.controller.solid_color, self.controller.is_on)

    def _sync_pattern(self) -> None:
        pattern = self.controller.pattern
        self.query_one(PatternPanel).update_pattern(pattern.steps, pattern.selected_index)

    def _sync_system(self) -> None:
        controller = self.controller
        self.query_one(SystemPanel).update_info(
            controller.device_info,
            controller.firmware_info,
            controller.update_available,
            updating=controller.is_updating,
            connected=controller.is_connected,
        )

    # =================================================================
    # Connection
    # =================================================================

    def action_connect(self) -> None:
        """Open the connection dialog (once)."""
        if self._connection_modal_open:
            return
        self._connection_modal_open = True

        error = self.controller.status.text if self.controller.status.is_error else ""

        def handle_address(address: Optional[str]) -> None:
            self._connection_modal_open = False
            if address:
                self._connect(address)

        self.push_screen(ConnectionModal(self.controller.last_address, error), handle_address)

    def _connect(self, address: str) -> None:
        self.run_worker(self._do_connect(address), group="connect", exclusive=True)

    @handle_action_errors("connect")
    async def _do_connect(self, address: str) -> None:
        if not await self.controller.connect(address):
            # Reopen the dialog with the failure message
            self.action_connect()

    def action_disconnect(self) -> None:
        self.controller.disconnect()

    # =================================================================
    # Mode & power
    # =================================================================

    def action_set_control_mode(self, mode: str) -> None:
        self.controller.change_mode(ControlMode(mode))

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        """Handle mode selection; a refused SYSTEM switch snaps the radio back."""
        for mode, radio_id in _MODE_RADIO_IDS.items():
            if event.pressed.id == radio_id:
                if not self.controller.change_mode(mode):
                    self._sync_mode()
                return

    def action_toggle_power(self) -> None:
        self.run_worker(self._toggle_power(), group="device")

    @handle_action_errors("toggle power")
    async def _toggle_power(self) -> None:
        await self.controller.toggle_power()

    # =================================================================
    # Solid mode
    # =================================================================

    def on_solid_panel_channel_changed(self, event: SolidPanel.ChannelChanged) -> None:
        self.controller.set_channel(event.channel, event.value)

    def on_solid_panel_preset_selected(self, event: SolidPanel.PresetSelected) -> None:
        self.controller.select_preset(event.color)

    def on_solid_panel_power_toggled(self, event: SolidPanel.PowerToggled) -> None:
        self.action_toggle_power()

    # =================================================================
    # Pattern mode
    # =================================================================

    def on_pattern_panel_step_selected(self, event: PatternPanel.StepSelected) -> None:
        self.controller.pattern.select(event.index)

    def on_pattern_panel_step_edited(self, event: PatternPanel.StepEdited) -> None:
        try:
            self.controller.pattern.update_selected(**event.changes)
        except ValidationError as e:
            first = e.errors()[0]
            self.notify(f"{first['loc'][0]}: {first['msg']}", severity="warning")
            self._sync_pattern()

    @handle_action_errors("add step")
    def action_add_step(self) -> None:
        if self.controller.pattern.add_step() is None:
            self.notify("A pattern can hold at most 256 steps", severity="warning")

    @handle_action_errors("delete step")
    def action_delete_step(self) -> None:
        try:
            self.controller.pattern.delete_step()
        except PatternEditError as e:
            self.notify(e.user_message, severity="warning")

    def action_clear_pattern(self) -> None:
        def handle_confirmation(confirmed: bool) -> None:
            if self.controller.pattern.clear(confirmed):
                self.notify("Pattern cleared")

        self.push_screen(
            ConfirmationModal(
                "Clear the whole pattern?",
                "All steps are replaced by a single default step.",
                confirm_label="Clear",
            ),
            handle_confirmation,
        )

    def action_send_pattern(self) -> None:
        self.run_worker(self._send_pattern(), group="device")

    @handle_action_errors("send pattern")
    async def _send_pattern(self) -> None:
        await self.controller.send_pattern()

    # =================================================================
    # System mode
    # =================================================================

    @handle_action_errors("read device info")
    async def _refresh_device_info(self) -> None:
        await self.controller.refresh_device_info()

    @handle_action_errors("check for updates")
    async def _check_for_update(self) -> None:
        await self.controller.check_for_update()

    def action_start_update(self) -> None:
        firmware = self.controller.firmware_info
        if firmware is None or not self.controller.update_available:
            return

        def handle_confirmation(confirmed: bool) -> None:
            if confirmed:
                self.run_worker(self._start_update(), group="device")

        self.push_screen(
            ConfirmationModal(
                f"Update to version {firmware.version}?",
                "The device restarts when the update is done.",
                confirm_label="Update",
            ),
            handle_confirmation,
        )

    @handle_action_errors("update firmware")
    async def _start_update(self) -> None:
        await self.controller.start_firmware_update()

    # =================================================================
    # Buttons
    # =================================================================

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dispatch panel buttons that bubbled up."""
        actions = {
            "add-step-btn": self.action_add_step,
            "delete-step-btn": self.action_delete_step,
            "clear-pattern-btn": self.action_clear_pattern,
            "rainbow-btn": self.controller.pattern.generate_rainbow,
            "random-btn": self.controller.pattern.generate_random,
            "send-pattern-btn": self.action_send_pattern,
            "update-btn": self.action_start_update,
            "check-update-btn": lambda: self.run_worker(self._check_for_update(), group="device"),
            "refresh-info-btn": lambda: self.run_worker(self._refresh_device_info(), group="device"),
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            event.stop()
            action()
