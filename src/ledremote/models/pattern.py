"""Pattern models: timed color steps played by the device."""

import random
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .color import DEFAULT_COLOR, Color

MAX_PATTERN_STEPS = 256
MIN_STEP_DURATION = 50
MAX_STEP_DURATION = 2000
DEFAULT_STEP_DURATION = 500
DEFAULT_STEP_BRIGHTNESS = 100

RAINBOW_STEPS = 24
RAINBOW_STEP_DURATION = 100


class PatternStep(BaseModel):
    """One step of a pattern: a color held for a duration at a brightness."""

    model_config = ConfigDict(validate_assignment=True)

    color: Color = Field(default=DEFAULT_COLOR, description="Step color")
    duration: int = Field(
        default=DEFAULT_STEP_DURATION,
        ge=MIN_STEP_DURATION,
        le=MAX_STEP_DURATION,
        description="How long the step is shown (ms)",
    )
    brightness: int = Field(
        default=DEFAULT_STEP_BRIGHTNESS,
        ge=0,
        le=100,
        description="Brightness (%)",
    )

    @classmethod
    def default(cls) -> "PatternStep":
        """Create the step a fresh or cleared pattern starts with."""
        return cls()

    @property
    def preview_color(self) -> Color:
        """Color as it appears on the strip with brightness applied."""
        return self.color.scaled(self.brightness)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the device's step format."""
        return self.model_dump(mode="json")


def pattern_payload(steps: list[PatternStep]) -> dict[str, Any]:
    """Build the `/setpattern` request body."""
    return {"steps": [step.to_payload() for step in steps]}


def generate_rainbow(count: int = RAINBOW_STEPS) -> list[PatternStep]:
    """
    Sweep the full hue range at full saturation and half lightness.

    Step i gets hue i/count, so the sweep ends one step short of red and
    loops seamlessly on the device.

    Args:
        count: Number of steps (24 by default)

    Returns:
        List of steps, each 100 ms at 100 % brightness
    """
    return [
        PatternStep(
            color=Color.from_hsl(i / count, 1, 0.5),
            duration=RAINBOW_STEP_DURATION,
            brightness=100,
        )
        for i in range(count)
    ]


def generate_random(rng: Optional[random.Random] = None) -> list[PatternStep]:
    """
    Build a random pattern.

    Length is 8-17 steps; each step gets uniformly random channels,
    a duration in [200, 1700) ms and a brightness in [50, 100) %.

    Args:
        rng: Random source (a freshly seeded generator if None)

    Returns:
        List of random steps
    """
    rng = rng or random.Random()
    length = 8 + rng.randrange(10)
    return [
        PatternStep(
            color=Color(r=rng.randrange(256), g=rng.randrange(256), b=rng.randrange(256)),
            duration=200 + rng.randrange(1500),
            brightness=50 + rng.randrange(50),
        )
        for _ in range(length)
    ]
