"""
Pointer tracking from the index fingertip.
"""
from dataclasses import replace
from typing import Optional, Tuple

from .types import Frame, PointerState
from .landmarks import INDEX_TIP


class PointerTracker:
    """
    Maps the index fingertip to screen coordinates.

    The position is sticky: frames without a hand leave it unchanged so the
    pointer does not jump on momentary tracking loss.
    """

    def __init__(self, screen_wh: Tuple[int, int]):
        """Start the pointer at the screen center."""
        self.screen_wh = screen_wh
        width, height = screen_wh
        self._state = PointerState(x=width / 2, y=height / 2)

    @property
    def state(self) -> PointerState:
        """Copy of the current pointer state."""
        return replace(self._state)

    def update(self, landmarks: Optional[Frame]) -> PointerState:
        """
        Move the pointer to the index fingertip (no mirroring).

        Args:
            landmarks: Hand landmarks (None if no hand detected)

        Returns:
            Pointer state after the update
        """
        if landmarks is not None:
            width, height = self.screen_wh
            tip = landmarks[INDEX_TIP]
            self._state.x = width * tip.x
            self._state.y = height * tip.y
        return self.state

    def set_hand_flags(self, is_pointing: bool, is_pinching: bool) -> None:
        self._state.is_pointing = is_pointing
        self._state.is_pinching = is_pinching

    def reset_flags(self) -> None:
        self.set_hand_flags(False, False)
