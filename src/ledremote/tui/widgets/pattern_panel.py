"""Pattern editor: step list, selected-step fields and pattern actions."""

from typing import Any

from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label, OptionList
from textual.widgets.option_list import Option

from ledremote.models import MAX_PATTERN_STEPS, Color, PatternStep

STEP_FIELDS = ("r", "g", "b", "duration", "brightness")


def _step_label(index: int, step: PatternStep) -> str:
    hex_color = step.color.to_hex()
    return (
        f"[{hex_color}]██[/] {index + 1:>3}  {hex_color}"
        f"  {step.duration:>4} ms  {step.brightness:>3} %"
    )


class PatternPanel(Vertical):
    """
    Panel for the PATTERN mode.

    Data-driven: `update_pattern()` redraws the list from the store, and
    edits are posted as messages for the app to apply. Action buttons
    (add, delete, clear, rainbow, random, send) bubble up to the app.
    """

    DEFAULT_CSS = """
    PatternPanel {
        height: auto;
        border: solid $primary;
        padding: 1;
    }

    PatternPanel #step-list {
        height: 10;
        margin-bottom: 1;
    }

    PatternPanel #step-count {
        color: $text-muted;
    }

    PatternPanel .field-row {
        height: 3;
        layout: horizontal;
    }

    PatternPanel .field-row > Label {
        width: 12;
        padding-top: 1;
    }

    PatternPanel .field-row > Input {
        width: 1fr;
    }

    PatternPanel .button-grid {
        grid-size: 3;
        grid-gutter: 1;
        height: auto;
        margin-top: 1;
    }

    PatternPanel .button-grid Button {
        width: 100%;
    }
    """

    class StepSelected(Message):
        """Message sent when a step is chosen in the list."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    class StepEdited(Message):
        """Message sent when a field of the selected step is edited."""

        def __init__(self, changes: dict[str, Any]) -> None:
            """
            Initialize message.

            Args:
                changes: PatternStep fields to replace (color, duration, brightness)
            """
            super().__init__()
            self.changes = changes

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._selected_step = PatternStep.default()

    def compose(self) -> ComposeResult:
        """Create the panel content."""
        yield Label("", id="step-count")
        yield OptionList(id="step-list")

        with Horizontal(classes="field-row"):
            yield Label("Color R/G/B")
            yield Input(type="integer", id="step-r")
            yield Input(type="integer", id="step-g")
            yield Input(type="integer", id="step-b")
        with Horizontal(classes="field-row"):
            yield Label("Duration ms")
            yield Input(type="integer", id="step-duration")
        with Horizontal(classes="field-row"):
            yield Label("Brightness %")
            yield Input(type="integer", id="step-brightness")

        with Grid(classes="button-grid"):
            yield Button("Add step", id="add-step-btn")
            yield Button("Delete step", id="delete-step-btn")
            yield Button("Clear", variant="error", id="clear-pattern-btn")
            yield Button("Rainbow", id="rainbow-btn")
            yield Button("Random", id="random-btn")
            yield Button("Send", variant="primary", id="send-pattern-btn")

    def update_pattern(self, steps: list[PatternStep], selected: int) -> None:
        """Redraw the step list and the selected step's fields."""
        step_list = self.query_one("#step-list", OptionList)
        step_list.clear_options()
        step_list.add_options([Option(_step_label(i, step)) for i, step in enumerate(steps)])
        step_list.highlighted = selected

        self.query_one("#step-count", Label).update(f"{len(steps)} / {MAX_PATTERN_STEPS} steps")
        self.query_one("#add-step-btn", Button).disabled = len(steps) >= MAX_PATTERN_STEPS
        self.query_one("#delete-step-btn", Button).disabled = len(steps) <= 1

        self._selected_step = steps[selected]
        self._show_step(self._selected_step)

    def _show_step(self, step: PatternStep) -> None:
        values = {
            "r": step.color.r,
            "g": step.color.g,
            "b": step.color.b,
            "duration": step.duration,
            "brightness": step.brightness,
        }
        for field, value in values.items():
            self.query_one(f"#step-{field}", Input).value = str(value)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.post_message(self.StepSelected(event.option_index))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Turn a field edit into a change of the selected step."""
        field = (event.input.id or "").removeprefix("step-")
        if field not in STEP_FIELDS:
            return
        event.stop()
        try:
            value = int(event.value)
        except ValueError:
            self._show_step(self._selected_step)
            return

        if field in ("r", "g", "b"):
            changes = {"color": self._selected_step.color.with_channel(field, value)}
        else:
            changes = {field: value}
        self.post_message(self.StepEdited(changes))

    @property
    def selected_color(self) -> Color:
        return self._selected_step.color
