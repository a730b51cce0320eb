"""Color swatch showing what the strip displays."""

from textual.widgets import Static

from ledremote.models import Color


class ColorPreview(Static):
    """Large swatch filled with the current display color."""

    DEFAULT_CSS = """
    ColorPreview {
        height: 5;
        width: 100%;
        content-align: center middle;
        text-style: bold;
        border: round $primary;
        margin-bottom: 1;
    }
    """

    def show_color(self, color: Color, is_on: bool) -> None:
        """Fill the swatch with `color`; black text on light colors."""
        r, g, b = color.to_rgb_tuple()
        luminance = 0.299 * r + 0.587 * g + 0.114 * b
        self.styles.background = color.to_hex()
        self.styles.color = "black" if luminance > 140 else "white"
        self.update(color.to_hex() if is_on else "OFF")
