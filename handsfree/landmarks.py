"""
Hand landmark frame model and geometry helpers.

Landmark indices follow MediaPipe Hands:
0 = wrist, 4 = thumb tip, 5/8 = index MCP/tip, 9/12 = middle MCP/tip,
13/16 = ring MCP/tip, 17/20 = pinky MCP/tip.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np

from .types import Frame, Landmark


NUM_LANDMARKS = 21

WRIST = 0
THUMB_TIP = 4
INDEX_MCP, INDEX_TIP = 5, 8
MIDDLE_MCP, MIDDLE_TIP = 9, 12
RING_MCP, RING_TIP = 13, 16
PINKY_MCP, PINKY_TIP = 17, 20


@dataclass(frozen=True)
class FingerStates:
    """Extended/retracted state of each finger for one frame."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def all_retracted(self) -> bool:
        """Index, middle, ring and pinky all retracted (thumb ignored)."""
        return not (self.index or self.middle or self.ring or self.pinky)

    @property
    def all_extended(self) -> bool:
        """Index, middle, ring and pinky all extended (thumb ignored)."""
        return self.index and self.middle and self.ring and self.pinky


def _to_landmark(point: Any) -> Landmark:
    if isinstance(point, Landmark):
        return point
    if hasattr(point, "x") and hasattr(point, "y"):
        return Landmark(float(point.x), float(point.y), float(getattr(point, "z", 0.0)))
    z = point[2] if len(point) > 2 else 0.0
    return Landmark(float(point[0]), float(point[1]), float(z))


def coerce_frame(raw: Optional[Sequence[Any]]) -> Optional[Frame]:
    """
    Normalize raw landmark input into a Frame.

    Accepts Landmark tuples, plain (x, y[, z]) sequences or objects with
    x/y/z attributes (MediaPipe NormalizedLandmark).

    Returns:
        List of 21 Landmarks, or None if the input is absent or malformed
    """
    if raw is None:
        return None
    try:
        if len(raw) != NUM_LANDMARKS:
            return None
        return [_to_landmark(point) for point in raw]
    except (TypeError, ValueError, IndexError):
        return None


def finger_states(landmarks: Frame) -> FingerStates:
    """
    Compute which fingers are extended.

    A finger is extended when its tip is above its MCP joint (camera y grows
    downward). The thumb is extended when its tip is left of the wrist.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        FingerStates for the frame
    """
    return FingerStates(
        thumb=landmarks[THUMB_TIP].x < landmarks[WRIST].x,
        index=landmarks[INDEX_TIP].y < landmarks[INDEX_MCP].y,
        middle=landmarks[MIDDLE_TIP].y < landmarks[MIDDLE_MCP].y,
        ring=landmarks[RING_TIP].y < landmarks[RING_MCP].y,
        pinky=landmarks[PINKY_TIP].y < landmarks[PINKY_MCP].y,
    )


def pinch_distance(landmarks: Frame) -> float:
    """Normalized 2-D distance between thumb tip and index tip."""
    thumb = landmarks[THUMB_TIP]
    index = landmarks[INDEX_TIP]
    return float(np.hypot(thumb.x - index.x, thumb.y - index.y))
