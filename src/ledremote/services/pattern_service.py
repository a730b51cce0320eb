"""Pattern store: editing rules for the pattern being authored."""

import logging
import random
from threading import Lock
from typing import Any, Optional

from ledremote.exceptions import PatternEditError
from ledremote.model_manager import ObserverManager
from ledremote.models import (
    MAX_PATTERN_STEPS,
    PatternStep,
    generate_rainbow,
    generate_random,
    pattern_payload,
)
from ledremote.protocols import PatternEvent, PatternObserver

logger = logging.getLogger(__name__)


class PatternService:
    """
    Owns the pattern being edited and its selection cursor.

    Invariants:
        - The pattern always holds between 1 and 256 steps.
        - The selected index always points at an existing step.
        - Steps are copied on the way in and on the way out, so callers
          never alias a stored step.

    Threading:
        Called from the UI event loop. The lock protects the step list;
        it is released before observers are notified.
    """

    def __init__(self, steps: Optional[list[PatternStep]] = None):
        """
        Initialize the store.

        Args:
            steps: Initial steps (a single default step if None or empty)
        """
        self._lock = Lock()
        if steps:
            self._steps = [step.model_copy(deep=True) for step in steps[:MAX_PATTERN_STEPS]]
        else:
            self._steps = [PatternStep.default()]
        self._selected = 0
        self._observers = ObserverManager[PatternObserver](observer_type_name="pattern")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: PatternObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: PatternObserver) -> None:
        self._observers.unregister(observer)

    def _notify(self, event: PatternEvent, index: int) -> None:
        self._observers.notify("on_pattern_event", event, index)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def steps(self) -> list[PatternStep]:
        """Deep copy of all steps."""
        with self._lock:
            return [step.model_copy(deep=True) for step in self._steps]

    @property
    def selected_index(self) -> int:
        with self._lock:
            return self._selected

    @property
    def selected_step(self) -> PatternStep:
        """Copy of the selected step."""
        with self._lock:
            return self._steps[self._selected].model_copy(deep=True)

    @property
    def is_full(self) -> bool:
        return len(self) >= MAX_PATTERN_STEPS

    def __len__(self) -> int:
        with self._lock:
            return len(self._steps)

    def get_step(self, index: int) -> PatternStep:
        """
        Get a copy of one step.

        Raises:
            IndexError: If index is out of range
        """
        with self._lock:
            self._check_index(index)
            return self._steps[index].model_copy(deep=True)

    def to_payload(self) -> dict[str, Any]:
        """Request body for `/setpattern`."""
        with self._lock:
            return pattern_payload(self._steps)

    # =================================================================
    # Editing
    # =================================================================

    def select(self, index: int) -> None:
        """
        Move the selection cursor.

        Raises:
            IndexError: If index is out of range
        """
        with self._lock:
            self._check_index(index)
            changed = index != self._selected
            self._selected = index

        if changed:
            self._notify(PatternEvent.SELECTION_CHANGED, index)

    def add_step(self) -> Optional[int]:
        """
        Append a copy of the last step and select it.

        Returns:
            Index of the new step, or None if the pattern is already full
        """
        with self._lock:
            if len(self._steps) >= MAX_PATTERN_STEPS:
                logger.debug(f"Pattern already has {MAX_PATTERN_STEPS} steps, not adding")
                return None
            template = self._steps[-1] if self._steps else PatternStep.default()
            self._steps.append(template.model_copy(deep=True))
            index = len(self._steps) - 1
            self._selected = index

        logger.debug(f"Added step {index}")
        self._notify(PatternEvent.STEP_ADDED, index)
        return index

    def update_step(self, index: int, step: PatternStep) -> None:
        """
        Replace one step entirely.

        Raises:
            IndexError: If index is out of range
        """
        with self._lock:
            self._check_index(index)
            self._steps[index] = step.model_copy(deep=True)

        self._notify(PatternEvent.STEP_UPDATED, index)

    def update_selected(self, **changes: Any) -> PatternStep:
        """
        Change fields of the selected step (color, duration, brightness).

        Values are validated; an invalid value raises pydantic's
        ValidationError and leaves the step untouched.

        Returns:
            Copy of the updated step
        """
        with self._lock:
            index = self._selected
            updated = PatternStep.model_validate({**self._steps[index].model_dump(), **changes})
            self._steps[index] = updated

        self._notify(PatternEvent.STEP_UPDATED, index)
        return updated.model_copy(deep=True)

    def delete_step(self, index: Optional[int] = None) -> int:
        """
        Remove a step (the selected one by default).

        If the selection ends up past the end it moves to the new last step.

        Returns:
            The selected index after the deletion

        Raises:
            PatternEditError: If this is the only step left
            IndexError: If index is out of range
        """
        with self._lock:
            if index is None:
                index = self._selected
            self._check_index(index)
            if len(self._steps) <= 1:
                raise PatternEditError("A pattern needs at least one step")
            del self._steps[index]
            if self._selected >= len(self._steps):
                self._selected = len(self._steps) - 1
            selected = self._selected

        logger.debug(f"Deleted step {index}, selection now {selected}")
        self._notify(PatternEvent.STEP_DELETED, index)
        return selected

    def clear(self, confirmed: bool) -> bool:
        """
        Reset to a single default step.

        Args:
            confirmed: Must be True; the UI asks before clearing

        Returns:
            True if the pattern was cleared
        """
        if not confirmed:
            return False
        with self._lock:
            self._steps = [PatternStep.default()]
            self._selected = 0

        logger.info("Pattern cleared")
        self._notify(PatternEvent.PATTERN_CLEARED, 0)
        return True

    def generate_rainbow(self) -> None:
        """Replace the pattern with a 24-step hue sweep."""
        self._replace(generate_rainbow(), "rainbow")

    def generate_random(self, rng: Optional[random.Random] = None) -> None:
        """Replace the pattern with 8-17 random steps."""
        self._replace(generate_random(rng), "random")

    def _replace(self, steps: list[PatternStep], kind: str) -> None:
        with self._lock:
            self._steps = steps
            self._selected = 0

        logger.info(f"Generated {kind} pattern with {len(steps)} steps")
        self._notify(PatternEvent.PATTERN_REPLACED, 0)

    def _check_index(self, index: int) -> None:
        # Caller holds the lock
        if not 0 <= index < len(self._steps):
            raise IndexError(f"Step index {index} out of range (0-{len(self._steps) - 1})")
