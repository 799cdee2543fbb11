"""
Type definitions for the hands-free gesture control engine.
"""
from dataclasses import dataclass
from typing import (
    Any, Awaitable, Callable, List, Literal, NamedTuple, Optional, Protocol, Tuple,
    runtime_checkable,
)


GestureType = Literal[
    "swipe_left",
    "swipe_right",
    "swipe_up",
    "swipe_down",
    "pinch",
    "click",
    "point",
    "fist",
    "palm",
    "thumbs_up",
]


class Landmark(NamedTuple):
    """A tracked hand point in normalized [0..1] camera space."""
    x: float
    y: float
    z: float = 0.0


# Exactly 21 landmarks, or None when no hand is visible
Frame = List[Landmark]


@dataclass
class PointerState:
    """Synthetic pointer position in screen pixels plus hand flags."""
    x: float
    y: float
    is_pointing: bool = False
    is_pinching: bool = False


@dataclass
class ArbiterState:
    """
    Per-activation state of the gesture engine.

    Owned by a single GestureArbiter and passed by reference to the
    classifier and the dispatcher. Discarded on deactivation.
    """
    previous_frame: Optional[Frame] = None
    current_gesture: Optional[GestureType] = None
    was_pinching: bool = False
    is_pinching: bool = False
    is_pointing: bool = False
    last_scroll_time: Optional[float] = None
    last_click_time: Optional[float] = None
    dwell_handle: Optional[Any] = None  # asyncio.TimerHandle or compatible


class ActivationError(RuntimeError):
    """Gesture control could not be activated."""

    reason = "activation-failed"


class CameraPermissionError(ActivationError):
    """The camera exists but access to it was denied."""

    reason = "camera-permission-denied"


class CameraUnavailableError(ActivationError):
    """No usable camera could be opened."""

    reason = "camera-unavailable"


@runtime_checkable
class UIElement(Protocol):
    """Abstract element of the controlled UI, as seen by click-through."""

    tag_name: str
    parent: Optional["UIElement"]

    @property
    def has_click_handler(self) -> bool:
        """True when a native click handler is attached."""
        ...

    def get_attribute(self, name: str) -> Optional[str]:
        ...

    def has_class(self, name: str) -> bool:
        ...

    async def activate(self) -> None:
        """Invoke the element's default activation (a click)."""
        ...

    async def show_press_feedback(self, duration_ms: int) -> None:
        """Briefly scale the element down as visual press feedback."""
        ...


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for controllers that execute gesture actions."""

    async def scroll(self, dy_px: int) -> None:
        """Smoothly scroll the page by the given pixel delta."""
        ...

    async def element_at(self, x: float, y: float) -> Optional[UIElement]:
        """Return the topmost element at the screen coordinates, if any."""
        ...

    async def viewport_size(self) -> Optional[Tuple[int, int]]:
        """Return (width, height) of the controlled screen, if known."""
        ...


FrameCallback = Callable[[Optional[Frame]], Awaitable[None]]


@runtime_checkable
class LandmarkSourceProto(Protocol):
    """Producer of per-frame hand landmarks."""

    def open(self) -> None:
        """Acquire the camera. Raises an ActivationError subclass on failure."""
        ...

    def start(self, on_frame: FrameCallback) -> None:
        """Begin delivering frames; calls to on_frame are serialized."""
        ...

    async def stop(self) -> None:
        ...

    def release(self) -> None:
        """Release the camera stream."""
        ...
