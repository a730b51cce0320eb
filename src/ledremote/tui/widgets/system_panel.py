"""System panel: device firmware version and updates."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, Static

from ledremote.models import DeviceInfo, FirmwareInfo


class SystemPanel(Vertical):
    """
    Panel for the SYSTEM mode.

    Shows the firmware version running on the device next to the latest
    published one, the changelog, and the update button (enabled only
    when the versions differ). Buttons bubble up to the app.
    """

    DEFAULT_CSS = """
    SystemPanel {
        height: auto;
        border: solid $primary;
        padding: 1;
    }

    SystemPanel .versions {
        height: 3;
        layout: horizontal;
    }

    SystemPanel .versions > Label {
        width: 1fr;
        content-align: center middle;
        border: round $panel-lighten-2;
    }

    SystemPanel #latest-version.available {
        border: round $success;
    }

    SystemPanel #changelog {
        height: auto;
        margin-top: 1;
        color: $text-muted;
    }

    SystemPanel #updating {
        height: auto;
        margin-top: 1;
        color: $warning;
    }

    SystemPanel Button {
        width: 100%;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Create the panel content."""
        with Horizontal(classes="versions"):
            yield Label("Current: N/A", id="current-version")
            yield Label("Latest: N/A", id="latest-version")
        yield Static("", id="changelog")
        yield Static("", id="updating")
        yield Button("Update now", variant="success", id="update-btn", disabled=True)
        yield Button("Check for updates", id="check-update-btn")
        yield Button("Reload device version", id="refresh-info-btn")

    def update_info(
        self,
        device_info: Optional[DeviceInfo],
        firmware_info: Optional[FirmwareInfo],
        update_available: bool,
        updating: bool = False,
        connected: bool = True,
    ) -> None:
        """Render versions, changelog and button states."""
        current = device_info.version if device_info else "N/A"
        latest = firmware_info.version if firmware_info else "N/A"
        self.query_one("#current-version", Label).update(f"Current: {current}")
        latest_label = self.query_one("#latest-version", Label)
        latest_label.update(f"Latest: {latest}")
        latest_label.set_class(update_available, "available")

        changelog = ""
        if firmware_info:
            changelog = f"Changes in v{firmware_info.version}:\n{firmware_info.changelog}"
        self.query_one("#changelog", Static).update(changelog)

        self.query_one("#updating", Static).update(
            "Updating... do not power off or disconnect the device." if updating else ""
        )

        update_btn = self.query_one("#update-btn", Button)
        update_btn.disabled = not (update_available and connected) or updating
        update_btn.label = f"Update now to v{latest}" if update_available else "Update now"
        self.query_one("#check-update-btn", Button).disabled = updating
        self.query_one("#refresh-info-btn", Button).disabled = updating or not connected
