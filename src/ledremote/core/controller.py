"""Application controller: routes user intents to the device."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from ledremote.core.coalescer import UpdateCoalescer
from ledremote.core.state_machine import ConnectionStateMachine
from ledremote.device import client
from ledremote.exceptions import (
    ConfigurationError,
    DeviceError,
    InvalidAddressError,
    NotConnectedError,
)
from ledremote.model_manager import ObserverManager
from ledremote.models import (
    DEFAULT_COLOR,
    OFF_COLOR,
    AppConfig,
    Color,
    ConnectionState,
    ControlMode,
    DeviceInfo,
    FirmwareInfo,
    StatusMessage,
)
from ledremote.protocols import ConfigEvent, ConnectionEvent, ControllerEvent, ControllerObserver
from ledremote.services import ConfigService, PatternService
from ledremote.utils import normalize_address

logger = logging.getLogger(__name__)


class RemoteController:
    """
    Holds the remote's state and turns intents into device requests.

    State: control mode, power flag, solid color, the pattern store,
    the current status message, and the device/firmware info shown in
    the system panel. The connection itself lives in a
    ConnectionStateMachine.

    Policies:
        - Solid color changes are debounced; only the last value of a
          burst is sent, and only while connected, powered on and in
          SOLID mode.
        - Sending a pattern, entering SYSTEM mode and firmware
          operations require a connection. Without one the controller
          emits CONNECTION_REQUIRED and sends nothing.
        - A network-level failure while connected drops the connection.
          There is no retry.
        - The firmware update command never reports an error; the
          device reboots mid-request.

    Threading:
        Runs on a single asyncio event loop. State changes happen when
        awaited requests complete; the last write wins.
    """

    def __init__(
        self,
        config_service: ConfigService[AppConfig],
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the controller.

        Args:
            config_service: Configuration (debounce delay, last address, firmware URL)
            session: Optional shared HTTP session for all device requests
        """
        self.config_service = config_service
        self._session = session

        self.connection = ConnectionStateMachine()
        self.connection.register_observer(self)
        self.pattern = PatternService()

        self._mode = ControlMode.SOLID
        self._is_on = True
        self._solid_color = DEFAULT_COLOR
        self._status = StatusMessage.idle()
        self._device_info: Optional[DeviceInfo] = None
        self._firmware_info: Optional[FirmwareInfo] = None
        self._updating = False
        self._status_reset: Optional[asyncio.TimerHandle] = None

        self._color_updates = UpdateCoalescer[Color](
            self.send_color,
            delay=config_service.get("debounce_delay"),
        )
        config_service.register_observer(self)
        self._observers = ObserverManager[ControllerObserver](observer_type_name="controller")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: ControllerObserver) -> None:
        """
        Register an observer to receive controller events.

        Args:
            observer: Object implementing ControllerObserver protocol
        """
        self._observers.register(observer)

    def unregister_observer(self, observer: ControllerObserver) -> None:
        self._observers.unregister(observer)

    def _notify(self, event: ControllerEvent, **kwargs: Any) -> None:
        self._observers.notify("on_controller_event", event, **kwargs)

    def on_connection_event(
        self,
        event: ConnectionEvent,
        previous: ConnectionState,
        current: ConnectionState,
        address: Optional[str],
    ) -> None:
        """Forward state machine transitions to controller observers."""
        if current is not ConnectionState.CONNECTED:
            self._color_updates.cancel()
        if current is ConnectionState.DISCONNECTED:
            self._updating = False
            self._set_device_info(None)
            self._set_firmware_info(None)
        self._notify(
            ControllerEvent.CONNECTION_CHANGED,
            connection_event=event,
            state=current,
            previous=previous,
            address=address,
        )

    def on_config_event(self, event: ConfigEvent, **kwargs: Any) -> None:
        """Apply a changed debounce delay to the next scheduled color send."""
        if event is ConfigEvent.CONFIG_UPDATED and "debounce_delay" in kwargs["values"]:
            delay = kwargs["values"]["debounce_delay"]
        elif event is ConfigEvent.CONFIG_RESET:
            delay = kwargs["config"].debounce_delay
        else:
            return
        if delay != self._color_updates.delay:
            logger.info(f"Debounce delay {self._color_updates.delay}s -> {delay}s")
            self._color_updates.delay = delay

    # =================================================================
    # State
    # =================================================================

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    @property
    def address(self) -> Optional[str]:
        """Active device address while connected."""
        return self.connection.address

    @property
    def last_address(self) -> str:
        """Address to offer in the connection dialog."""
        return self.config_service.get("last_address")

    @property
    def mode(self) -> ControlMode:
        return self._mode

    @property
    def is_on(self) -> bool:
        return self._is_on

    @property
    def solid_color(self) -> Color:
        return self._solid_color

    @property
    def status(self) -> StatusMessage:
        return self._status

    @property
    def device_info(self) -> Optional[DeviceInfo]:
        return self._device_info

    @property
    def firmware_info(self) -> Optional[FirmwareInfo]:
        return self._firmware_info

    @property
    def is_updating(self) -> bool:
        return self._updating

    @property
    def update_pending(self) -> bool:
        """True while a debounced color send is waiting."""
        return self._color_updates.pending

    @property
    def update_available(self) -> bool:
        """Both versions are known and differ."""
        return (
            self._device_info is not None
            and self._firmware_info is not None
            and self._device_info.version != self._firmware_info.version
        )

    @property
    def display_color(self) -> Color:
        """Color the preview shows: solid color, selected step color, or off."""
        if not self._is_on:
            return OFF_COLOR
        if self._mode is ControlMode.SOLID:
            return self._solid_color
        return self.pattern.selected_step.color

    # =================================================================
    # Status
    # =================================================================

    def _set_status(self, status: StatusMessage) -> None:
        self._status = status
        self._notify(ControllerEvent.STATUS_CHANGED, status=status)

    def _reset_status_later(self, status: StatusMessage) -> None:
        """Return to idle after status_reset_delay unless something overwrote `status`."""
        if self._status_reset is not None:
            self._status_reset.cancel()

        def reset() -> None:
            self._status_reset = None
            if self._status is status:
                self._set_status(StatusMessage.idle())

        self._status_reset = asyncio.get_running_loop().call_later(
            self.config_service.get("status_reset_delay"), reset
        )

    def _fail(self, error: DeviceError, generation: Optional[int] = None) -> None:
        """
        Show a device failure.

        Network failures drop the connection, but only if `generation`
        (read before the request) is still the live connection. A stale
        request never demotes a link probed after it started.
        """
        logger.error(error.technical_message)
        self._set_status(StatusMessage.error(error.user_message))
        if generation is None or not error.is_network_failure:
            return
        if self.connection.is_current(generation):
            logger.warning("Request failed at the network level, marking device disconnected")
            self.connection.disconnect()
        else:
            logger.info("Ignoring network failure of a request sent on an earlier connection")

    def _require_connection(self, operation: str) -> bool:
        if self.connection.is_connected:
            return True
        error = NotConnectedError(operation)
        logger.info(error.technical_message)
        self._notify(ControllerEvent.CONNECTION_REQUIRED, error=error)
        return False

    # =================================================================
    # Connection
    # =================================================================

    async def connect(self, address: str) -> bool:
        """
        Probe `address` and make it the active device on success.

        On success the address is persisted as `last_address` and the
        status shows a confirmation that fades back to idle.

        Returns:
            True if the device answered
        """
        try:
            address = normalize_address(address)
        except InvalidAddressError as e:
            self._set_status(StatusMessage.error(e.user_message))
            return False

        if self.connection.is_connecting:
            logger.warning(f"Already connecting to {self.connection.candidate_address}, ignoring {address}")
            return False

        self._color_updates.cancel()
        self.connection.begin_connect(address)
        self._set_status(StatusMessage.sending(f"Connecting to {address}..."))

        try:
            await client.check_connection(address, session=self._session)
        except DeviceError as e:
            logger.error(e.technical_message)
            if self.connection.is_connecting:
                self.connection.mark_failed()
            self._set_status(StatusMessage.error(e.user_message))
            return False

        if not self.connection.is_connecting:
            # Disconnected while the probe was in flight
            return False
        self.connection.mark_connected()
        self._remember_address(address)

        connected = StatusMessage.success("Connected!")
        self._set_status(connected)
        self._reset_status_later(connected)
        self._schedule_color()
        return True

    def _remember_address(self, address: str) -> None:
        try:
            self.config_service.set("last_address", address)
            self.config_service.save()
        except (OSError, ConfigurationError, ValueError) as e:
            # The connection stands even if the address can't be persisted
            logger.error(f"Could not save last address {address}: {e}")

    def disconnect(self) -> None:
        """Forget the device. No request is made."""
        self._color_updates.cancel()
        self.connection.disconnect()
        self._set_status(StatusMessage.idle("Not connected"))

    # =================================================================
    # Solid color
    # =================================================================

    def _schedule_color(self) -> None:
        if self._mode is ControlMode.SOLID and self._is_on and self.connection.is_connected:
            self._color_updates.schedule(self._solid_color)

    def set_solid_color(self, color: Color) -> None:
        """Change the solid color; the device is updated after the quiet period."""
        self._solid_color = color
        self._notify(ControllerEvent.COLOR_CHANGED, color=color)
        self._schedule_color()

    def set_channel(self, channel: str, value: float) -> Color:
        """
        Change one channel of the solid color, clamped to 0-255.

        Returns:
            The new solid color
        """
        color = self._solid_color.with_channel(channel, value)
        self.set_solid_color(color)
        return color

    def select_preset(self, color: Color) -> None:
        """Use a preset color; turns the light on if it was off."""
        if not self._is_on:
            self._is_on = True
            self._notify(ControllerEvent.POWER_CHANGED, is_on=True)
        self.set_solid_color(color)

    async def send_color(self, color: Color) -> bool:
        """
        Send a color immediately.

        Silently does nothing when not connected; the debounced path
        can fire after a disconnect.

        Returns:
            True if the request completed
        """
        address = self.connection.address
        if address is None:
            return False
        generation = self.connection.generation

        self._set_status(StatusMessage.sending("Sending color..."))
        try:
            await client.set_color(address, color, session=self._session)
        except DeviceError as e:
            self._fail(e, generation)
            return False

        self._set_status(StatusMessage.success("Color updated"))
        return True

    async def flush_color(self) -> None:
        """Wait for a pending debounced color send to complete."""
        await self._color_updates.flush()

    # =================================================================
    # Pattern
    # =================================================================

    async def send_pattern(self) -> bool:
        """
        Transmit the whole pattern. Never debounced.

        Returns:
            True if the request completed
        """
        if not self._require_connection("send a pattern"):
            return False

        steps = self.pattern.steps
        generation = self.connection.generation
        self._set_status(StatusMessage.sending("Sending pattern..."))
        try:
            await client.set_pattern(self.connection.address, steps, session=self._session)
        except DeviceError as e:
            self._fail(e, generation)
            return False

        self._set_status(StatusMessage.success(f"Pattern sent ({len(steps)} steps)"))
        return True

    # =================================================================
    # Mode and power
    # =================================================================

    def change_mode(self, mode: ControlMode) -> bool:
        """
        Switch control mode. SYSTEM needs a connection.

        Returns:
            True if the mode is now `mode`
        """
        if mode is ControlMode.SYSTEM and not self._require_connection("open the system panel"):
            return False
        if mode is self._mode:
            return True

        if self._mode is ControlMode.SOLID:
            self._color_updates.cancel()
        previous, self._mode = self._mode, mode
        logger.debug(f"Mode {previous.value} -> {mode.value}")
        self._notify(ControllerEvent.MODE_CHANGED, mode=mode, previous=previous)
        self._schedule_color()
        return True

    async def toggle_power(self) -> bool:
        """
        Flip the power flag and apply it to the device right away.

        Not connected: only the flag changes (and turning on asks for a
        connection). Connected: SOLID sends the color or OFF; PATTERN
        sends OFF or re-sends the pattern.

        Returns:
            The new power state
        """
        self._is_on = not self._is_on
        self._color_updates.cancel()
        self._notify(ControllerEvent.POWER_CHANGED, is_on=self._is_on)

        if not self.connection.is_connected:
            if self._is_on:
                self._require_connection("turn the light on")
            return self._is_on

        if self._mode is ControlMode.SOLID:
            await self.send_color(self._solid_color if self._is_on else OFF_COLOR)
        elif self._mode is ControlMode.PATTERN:
            if self._is_on:
                await self.send_pattern()
            else:
                await self.send_color(OFF_COLOR)
        return self._is_on

    # =================================================================
    # System panel
    # =================================================================

    def _set_device_info(self, info: Optional[DeviceInfo]) -> None:
        if info == self._device_info:
            return
        self._device_info = info
        self._notify(ControllerEvent.DEVICE_INFO_CHANGED, info=info)

    def _set_firmware_info(self, info: Optional[FirmwareInfo]) -> None:
        if info == self._firmware_info:
            return
        self._firmware_info = info
        self._notify(ControllerEvent.FIRMWARE_INFO_CHANGED, info=info)

    async def refresh_device_info(self) -> Optional[DeviceInfo]:
        """
        Read the device's firmware version.

        HTTP status and body errors prove the device is reachable and
        keep the connection; network failures drop it.
        """
        if not self._require_connection("read the device version"):
            return None

        generation = self.connection.generation
        self._set_status(StatusMessage.sending("Reading device info..."))
        try:
            info = await client.get_device_info(self.connection.address, session=self._session)
        except DeviceError as e:
            self._set_device_info(None)
            self._fail(e, generation)
            return None

        self._set_device_info(info)
        self._set_status(StatusMessage.success(f"Device firmware {info.version}"))
        return info

    async def check_for_update(self) -> Optional[FirmwareInfo]:
        """
        Fetch the latest firmware metadata.

        This talks to the firmware server, not the device, so a failure
        never affects the connection.
        """
        self._set_firmware_info(None)
        self._set_status(StatusMessage.sending("Checking for updates..."))
        try:
            firmware = await client.check_latest_firmware(
                self.config_service.get("firmware_metadata_url"),
                session=self._session,
            )
        except DeviceError as e:
            self._fail(e)
            return None

        self._set_firmware_info(firmware)
        if self.update_available:
            self._set_status(StatusMessage.success(f"Update available: {firmware.version}"))
        else:
            self._set_status(StatusMessage.success(f"Latest firmware is {firmware.version}"))
        return firmware

    async def start_firmware_update(self) -> bool:
        """
        Tell the device to flash the latest firmware, then disconnect.

        The request's outcome is ignored: the device reboots while
        handling it. After `update_notice_delay` UPDATE_SENT is emitted
        and the connection is dropped, unless the user already moved to
        a new connection during the wait.

        Returns:
            True if the update was triggered
        """
        if not self._require_connection("update the firmware"):
            return False
        firmware = self._firmware_info
        if firmware is None:
            logger.warning("Firmware update requested before checking for updates")
            self._set_status(StatusMessage.error("Check for updates first."))
            return False

        address = self.connection.address
        generation = self.connection.generation
        self._updating = True
        self._color_updates.cancel()
        self._notify(ControllerEvent.UPDATE_STARTED, version=firmware.version, address=address)
        self._set_status(StatusMessage.sending(f"Updating to {firmware.version}..."))

        sent = await client.trigger_update(address, firmware.url, session=self._session)
        logger.info(f"Update trigger for {address} completed={sent}; waiting for reboot")
        await asyncio.sleep(self.config_service.get("update_notice_delay"))

        self._notify(ControllerEvent.UPDATE_SENT, version=firmware.version, address=address)
        if self.connection.is_current(generation):
            self.disconnect()
        else:
            logger.info(f"Connection changed while {address} was updating, keeping it")
        return True

    # =================================================================
    # Lifecycle
    # =================================================================

    async def aclose(self) -> None:
        """Drop pending sends and timers; wait for in-flight sends."""
        if self._status_reset is not None:
            self._status_reset.cancel()
            self._status_reset = None
        await self._color_updates.aclose()
        self.config_service.unregister_observer(self)
        self._observers.clear()
        logger.debug("Controller closed")
