"""Solid color editor: channel controls, presets and the power switch."""

from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label

from ledremote.models import PRESET_COLORS, Color

CHANNEL_STEP = 16
CHANNELS = (("r", "Red"), ("g", "Green"), ("b", "Blue"))


class SolidPanel(Vertical):
    """
    Panel for the SOLID mode.

    Each channel has an input and -/+ buttons that act like a coarse
    slider. Every change is posted immediately; the controller decides
    when to talk to the device.
    """

    DEFAULT_CSS = """
    SolidPanel {
        height: auto;
        border: solid $primary;
        padding: 1;
    }

    SolidPanel .channel-row {
        height: 3;
        layout: horizontal;
    }

    SolidPanel .channel-row > Label {
        width: 8;
        padding-top: 1;
    }

    SolidPanel .channel-row > Input {
        width: 12;
    }

    SolidPanel .channel-row > Button {
        min-width: 5;
        width: 5;
    }

    SolidPanel .preset-grid {
        grid-size: 4;
        grid-gutter: 1;
        height: auto;
        margin-top: 1;
    }

    SolidPanel .preset-grid Button {
        width: 100%;
    }

    SolidPanel #power-btn {
        width: 100%;
        margin-top: 1;
    }
    """

    class ChannelChanged(Message):
        """Message sent when a channel value is edited."""

        def __init__(self, channel: str, value: int) -> None:
            """
            Initialize message.

            Args:
                channel: 'r', 'g' or 'b'
                value: Requested value (clamped by the controller)
            """
            super().__init__()
            self.channel = channel
            self.value = value

    class PresetSelected(Message):
        """Message sent when a preset button is pressed."""

        def __init__(self, name: str, color: Color) -> None:
            super().__init__()
            self.name = name
            self.color = color

    class PowerToggled(Message):
        """Message sent when the power button is pressed."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._color = Color.off()

    def compose(self) -> ComposeResult:
        """Create the panel content."""
        for channel, name in CHANNELS:
            with Horizontal(classes="channel-row"):
                yield Label(name)
                yield Button("-", id=f"{channel}-dec")
                yield Input(value="0", type="integer", id=f"{channel}-input")
                yield Button("+", id=f"{channel}-inc")

        with Grid(classes="preset-grid"):
            for name in PRESET_COLORS:
                yield Button(name.title(), id=f"preset-{name}")

        yield Button("Power: ON", variant="success", id="power-btn")

    def update_color(self, color: Color, is_on: bool) -> None:
        """Show `color` in the inputs and the power state on the button."""
        self._color = color
        for channel, _ in CHANNELS:
            input_widget = self.query_one(f"#{channel}-input", Input)
            value = str(getattr(color, channel))
            if input_widget.value != value:
                input_widget.value = value

        power_btn = self.query_one("#power-btn", Button)
        power_btn.label = "Power: ON" if is_on else "Power: OFF"
        power_btn.variant = "success" if is_on else "default"

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle channel value submissions."""
        input_id = event.input.id or ""
        if not input_id.endswith("-input"):
            return
        event.stop()
        channel = input_id[0]
        try:
            value = int(event.value)
        except ValueError:
            # Restore the current value
            event.input.value = str(getattr(self._color, channel))
            return
        self.post_message(self.ChannelChanged(channel, value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses within the panel."""
        button_id = event.button.id or ""
        if button_id == "power-btn":
            event.stop()
            self.post_message(self.PowerToggled())
        elif button_id.startswith("preset-"):
            event.stop()
            name = button_id.removeprefix("preset-")
            self.post_message(self.PresetSelected(name, PRESET_COLORS[name]))
        elif button_id.endswith(("-dec", "-inc")):
            event.stop()
            channel = button_id[0]
            delta = CHANNEL_STEP if button_id.endswith("-inc") else -CHANNEL_STEP
            self.post_message(self.ChannelChanged(channel, getattr(self._color, channel) + delta))
