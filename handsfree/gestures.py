"""
Gesture recognition that turns a landmark stream into discrete gesture events.
"""
import logging
from typing import Any, Optional

from .types import ArbiterState, Frame, GestureType
from .config import Cfg
from .landmarks import WRIST, finger_states, pinch_distance

logger = logging.getLogger(__name__)


def classify_gesture(landmarks: Frame, state: ArbiterState, t_now: float,
                     cfg: Cfg) -> Optional[GestureType]:
    """
    Classify a single frame into a static pose, including click-on-release.

    Precedence (first match wins): click, pinch, thumbs_up, point, fist, palm.

    Args:
        landmarks: List of 21 hand landmarks
        state: Arbiter state; the pinch latch, click timestamp and hand
            flags are updated in place
        t_now: Current timestamp in seconds
        cfg: Configuration with pinch threshold and click cooldown

    Returns:
        Gesture label, or None if no pose matched
    """
    fingers = finger_states(landmarks)
    is_pinch = pinch_distance(landmarks) < cfg.gestures.pinch.threshold

    state.is_pinching = is_pinch
    state.is_pointing = False

    # Click fires on pinch release, outside the cooldown window
    if state.was_pinching and not is_pinch:
        cooldown_s = cfg.gestures.pinch.click_cooldown_ms / 1000.0
        if state.last_click_time is None or t_now - state.last_click_time >= cooldown_s:
            state.last_click_time = t_now
            state.was_pinching = False
            return "click"
    state.was_pinching = is_pinch

    if is_pinch:
        return "pinch"

    if fingers.thumb and fingers.all_retracted:
        return "thumbs_up"

    if fingers.index and not (fingers.middle or fingers.ring or fingers.pinky):
        state.is_pointing = True
        return "point"

    if fingers.all_retracted:
        return "fist"

    if fingers.all_extended:
        return "palm"

    return None


def detect_swipe(current: Optional[Frame], previous: Optional[Frame],
                 threshold: float = 0.12) -> Optional[GestureType]:
    """
    Detect a directional swipe from the wrist displacement between two frames.

    Horizontal motion takes priority over vertical motion.

    Args:
        current: Current frame landmarks
        previous: Previous frame landmarks (None on the first frame)
        threshold: Minimum normalized wrist travel

    Returns:
        Swipe label, or None
    """
    if current is None or previous is None:
        return None

    delta_x = current[WRIST].x - previous[WRIST].x
    delta_y = current[WRIST].y - previous[WRIST].y

    if abs(delta_x) > threshold:
        return "swipe_right" if delta_x > 0 else "swipe_left"

    if abs(delta_y) > threshold:
        return "swipe_down" if delta_y > 0 else "swipe_up"

    return None


class GestureArbiter:
    """
    Per-frame state machine combining motion and pose classification.

    Features:
    - Swipe wins over a simultaneously detected static pose
    - Holding a pose emits it once, not once per frame
    - Emitted gesture reverts to none after a fixed dwell time
    - Dwell timer is an owned, cancellable handle
    """

    def __init__(self, cfg: Cfg, loop: Any):
        """
        Initialize the arbiter.

        Args:
            cfg: Configuration
            loop: Event loop (or compatible object) providing call_later()
        """
        self.cfg = cfg
        self.loop = loop
        self.state = ArbiterState()

    @property
    def current_gesture(self) -> Optional[GestureType]:
        return self.state.current_gesture

    def process_frame(self, landmarks: Frame, t_now: float) -> Optional[GestureType]:
        """
        Process one frame with a detected hand.

        Args:
            landmarks: List of 21 hand landmarks
            t_now: Current timestamp in seconds

        Returns:
            Newly emitted gesture label, or None when nothing transitions
        """
        swipe = detect_swipe(landmarks, self.state.previous_frame,
                             self.cfg.gestures.swipe.threshold)
        pose = classify_gesture(landmarks, self.state, t_now, self.cfg)
        self.state.previous_frame = landmarks

        detected = swipe or pose
        if detected is None or detected == self.state.current_gesture:
            return None

        self.state.current_gesture = detected
        self._schedule_clear()
        logger.debug(f"Gesture emitted: {detected}")
        return detected

    def close(self) -> None:
        """Cancel the pending dwell timer and reset the gesture state."""
        self._cancel_clear()
        self.state.current_gesture = None

    def _schedule_clear(self) -> None:
        self._cancel_clear()
        self.state.dwell_handle = self.loop.call_later(
            self.cfg.gestures.dwell_ms / 1000.0, self._clear_gesture
        )

    def _cancel_clear(self) -> None:
        if self.state.dwell_handle is not None:
            self.state.dwell_handle.cancel()
            self.state.dwell_handle = None

    def _clear_gesture(self) -> None:
        self.state.dwell_handle = None
        self.state.current_gesture = None
