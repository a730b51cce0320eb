"""Color model for LED control."""

import math

from pydantic import BaseModel, ConfigDict, Field


def _clamp_channel(value: float) -> int:
    # Half-up rounding; round() would round 0.5 to even
    return max(0, min(255, math.floor(value + 0.5)))


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


class Color(BaseModel):
    """Standard 8-bit RGB color model.

    This is the color representation the device speaks: three channels in
    0-255 and no alpha. Validation rejects out-of-range values; use
    `Color.clamped()` for raw user input such as slider positions.

    The model is frozen so a color can be shared between the solid-color
    state, pattern steps and presets without defensive copies.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def off(cls) -> "Color":
        """Create off (black) color."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def clamped(cls, r: float, g: float, b: float) -> "Color":
        """Create a color, clamping each channel into 0-255.

        Example:
            >>> Color.clamped(300, -5, 12.6)
            Color(r=255, g=0, b=13)
        """
        return cls(r=_clamp_channel(r), g=_clamp_channel(g), b=_clamp_channel(b))

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float) -> "Color":
        """Convert hue/saturation/lightness (each 0-1) to RGB.

        Used to generate rainbow patterns. Hue wraps around, so 0 and 1
        are both red.

        Example:
            >>> Color.from_hsl(0, 1, 0.5)
            Color(r=255, g=0, b=0)
            >>> Color.from_hsl(2 / 3, 1, 0.5)
            Color(r=0, g=0, b=255)
        """
        if s == 0:
            r = g = b = l
        else:
            q = l * (1 + s) if l < 0.5 else l + s - l * s
            p = 2 * l - q
            r = _hue_to_channel(p, q, h + 1 / 3)
            g = _hue_to_channel(p, q, h)
            b = _hue_to_channel(p, q, h - 1 / 3)
        return cls.clamped(r * 255, g * 255, b * 255)

    def with_channel(self, channel: str, value: float) -> "Color":
        """Return a copy with one channel ('r', 'g' or 'b') replaced and clamped."""
        if channel not in ("r", "g", "b"):
            raise ValueError(f"Unknown color channel: {channel!r}")
        channels = self.model_dump()
        channels[channel] = value
        return Color.clamped(**channels)

    def scaled(self, brightness: int) -> "Color":
        """Scale by a brightness percentage (0-100), as the device renders a step."""
        factor = max(0, min(100, brightness)) / 100
        return Color.clamped(self.r * factor, self.g * factor, self.b * factor)

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000').

        Example:
            >>> Color(r=255, g=0, b=0).to_hex()
            '#FF0000'
        """
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


OFF_COLOR = Color.off()
DEFAULT_COLOR = Color(r=239, g=68, b=68)

PRESET_COLORS: dict[str, Color] = {
    "red": Color(r=255, g=0, b=0),
    "green": Color(r=0, g=255, b=0),
    "blue": Color(r=0, g=0, b=255),
    "yellow": Color(r=255, g=255, b=0),
    "cyan": Color(r=0, g=255, b=255),
    "magenta": Color(r=255, g=0, b=255),
    "white": Color(r=255, g=255, b=255),
}
