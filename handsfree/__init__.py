"""
Hands-Free Gesture Control

Turns a MediaPipe hand-landmark stream into de-bounced gesture events
(swipes, pinch, click, point, fist, palm, thumbs up), a screen pointer and
synthetic click-through for web pages.
"""

__version__ = "0.1.0"

from .types import (
    GestureType, Landmark, PointerState, ArbiterState, ControllerProto, UIElement,
    LandmarkSourceProto, ActivationError, CameraPermissionError, CameraUnavailableError,
)
from .config import load_config, Cfg
from .landmarks import coerce_frame, finger_states, pinch_distance
from .gestures import classify_gesture, detect_swipe, GestureArbiter
from .pointer import PointerTracker
from .dispatcher import ActionDispatcher, is_activatable, find_activatable
from .controller_mock import MockController, MockElement
from .session import GestureSession

__all__ = [
    "GestureType",
    "Landmark",
    "PointerState",
    "ArbiterState",
    "ControllerProto",
    "UIElement",
    "LandmarkSourceProto",
    "ActivationError",
    "CameraPermissionError",
    "CameraUnavailableError",
    "load_config",
    "Cfg",
    "coerce_frame",
    "finger_states",
    "pinch_distance",
    "classify_gesture",
    "detect_swipe",
    "GestureArbiter",
    "PointerTracker",
    "ActionDispatcher",
    "is_activatable",
    "find_activatable",
    "MockController",
    "MockElement",
    "GestureSession",
]
