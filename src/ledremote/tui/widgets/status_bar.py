"""Status bar widget showing connection, mode and the latest status message."""

from typing import Optional

from textual.widgets import Static

from ledremote.models import ConnectionState, ControlMode, StatusKind, StatusMessage

_CONNECTION_TEXT = {
    ConnectionState.DISCONNECTED: "○ Not connected",
    ConnectionState.CONNECTING: "◌ Connecting",
    ConnectionState.CONNECTED: "● {address}",
}

_STATUS_MARKUP = {
    StatusKind.IDLE: "{text}",
    StatusKind.SENDING: "[yellow]{text}[/yellow]",
    StatusKind.SUCCESS: "[green]{text}[/green]",
    StatusKind.ERROR: "[bold red]{text}[/bold red]",
}


class StatusBar(Static):
    """
    Status bar displaying current application state.

    Shows:
    - Connection state and device address
    - Current control mode
    - The last status message (every operation overwrites it)
    """

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        color: $text;
        padding: 0 1;
    }

    StatusBar.connected {
        background: $success-darken-2;
    }

    StatusBar.error {
        background: $error-darken-2;
    }
    """

    def __init__(self) -> None:
        """Initialize status bar."""
        super().__init__()
        self._state = ConnectionState.DISCONNECTED
        self._address: Optional[str] = None
        self._mode = ControlMode.SOLID
        self._status = StatusMessage.idle()
        self._update_display()

    @property
    def text(self) -> str:
        """Plain status message text (for tests and logging)."""
        return self._status.text

    def update_state(
        self,
        state: ConnectionState,
        address: Optional[str],
        mode: ControlMode,
        status: StatusMessage,
    ) -> None:
        """
        Update all status information.

        Args:
            state: Connection state
            address: Active device address, if connected
            mode: Current control mode
            status: Latest status message
        """
        self._state = state
        self._address = address
        self._mode = mode
        self._status = status
        self._update_display()

    def _update_display(self) -> None:
        connection_text = _CONNECTION_TEXT[self._state].format(address=self._address)
        mode_text = self._mode.value.upper()
        status_text = _STATUS_MARKUP[self._status.kind].format(text=self._status.text)

        self.set_class(self._state is ConnectionState.CONNECTED, "connected")
        self.set_class(self._status.is_error, "error")
        self.update(" | ".join([connection_text, mode_text, status_text]))
