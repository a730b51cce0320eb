"""Modal dialog asking for the device address."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from ledremote.exceptions import InvalidAddressError
from ledremote.utils import normalize_address


class ConnectionModal(ModalScreen[Optional[str]]):
    """
    Ask for the device's IP address.

    Dismisses with the normalized address, or None when cancelled. The
    address is checked locally before the dialog closes; the probe
    itself is the controller's job.
    """

    DEFAULT_CSS = """
    ConnectionModal {
        align: center middle;
    }

    #dialog {
        width: 56;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        padding-bottom: 1;
    }

    #address-error {
        color: $error;
        height: auto;
    }

    #button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding-top: 1;
    }

    #button-container Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, default_address: str, error: str = "") -> None:
        """
        Initialize the modal.

        Args:
            default_address: Pre-filled address (the last one that worked)
            error: Message from a previous failed attempt
        """
        super().__init__()
        self.default_address = default_address
        self.error = error

    def compose(self) -> ComposeResult:
        """Create the modal content."""
        with Vertical(id="dialog"):
            yield Label("Connect to LED device", id="title")
            yield Label("IP address:")
            yield Input(value=self.default_address, placeholder="192.168.1.100", id="address-input")
            yield Label(self.error, id="address-error")
            with Horizontal(id="button-container"):
                yield Button("Connect", variant="primary", id="connect-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#address-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "connect-btn":
            event.stop()
            self._submit()
        elif event.button.id == "cancel-btn":
            event.stop()
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        raw = self.query_one("#address-input", Input).value
        try:
            address = normalize_address(raw)
        except InvalidAddressError as e:
            self.query_one("#address-error", Label).update(e.get_full_message())
            return
        self.dismiss(address)
