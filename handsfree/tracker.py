"""
Camera landmark source using OpenCV capture and MediaPipe Hands.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from .types import (
    ActivationError, CameraPermissionError, CameraUnavailableError, Frame,
    FrameCallback, Landmark,
)
from .config import Cfg

logger = logging.getLogger(__name__)


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.7, min_tracking_conf: float = 0.7):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: MediaPipe model complexity (0 or 1)
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
        self.mp_drawing = mp.solutions.drawing_utils

    def process(self, frame_bgr: np.ndarray) -> Optional[Frame]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            List of 21 landmarks in [0..1] range, or None if no hand detected
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)

        if results.multi_hand_landmarks:
            # Only the first hand drives the engine
            hand_landmarks = results.multi_hand_landmarks[0]
            return [Landmark(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark]

        return None

    def draw_landmarks(self, frame: np.ndarray, landmarks: Frame) -> np.ndarray:
        """Draw landmark dots and indices on the frame."""
        height, width = frame.shape[:2]
        for i, lm in enumerate(landmarks):
            px = int(lm.x * width)
            py = int(lm.y * height)
            cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)
            cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)
        return frame

    def close(self) -> None:
        self.hands.close()


def camera_failure(index: int) -> ActivationError:
    """
    Classify why a camera could not be opened.

    A device node that exists but cannot be read means access was denied;
    anything else is reported as unavailable.
    """
    device = Path(f"/dev/video{index}")
    if device.exists() and not os.access(device, os.R_OK):
        return CameraPermissionError(f"Permission denied for camera {index} ({device})")
    return CameraUnavailableError(f"Failed to open camera {index}")


class CameraLandmarkSource:
    """
    Landmark source reading webcam frames and running MediaPipe Hands.

    If the MediaPipe model cannot be created, the camera stays open (preview
    still works) but no frames are delivered: gesture processing is inactive.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg
        self.cap: Optional[cv2.VideoCapture] = None
        self.tracker: Optional[HandsTracker] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def info(self) -> str:
        mode = "tracking" if self.tracker is not None else "degraded"
        return (f"camera {self.cfg.camera.index} "
                f"{self.cfg.camera.width}x{self.cfg.camera.height}@{self.cfg.camera.fps}fps ({mode})")

    @property
    def is_degraded(self) -> bool:
        return self.cap is not None and self.tracker is None

    def open(self) -> None:
        """Open the camera and load the landmark model."""
        cap = cv2.VideoCapture(self.cfg.camera.index)
        if not cap.isOpened():
            cap.release()
            raise camera_failure(self.cfg.camera.index)

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.cfg.camera.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.cfg.camera.height)
        cap.set(cv2.CAP_PROP_FPS, self.cfg.camera.fps)
        self.cap = cap

        try:
            self.tracker = HandsTracker(
                max_num_hands=self.cfg.mediapipe.max_num_hands,
                model_complexity=self.cfg.mediapipe.model_complexity,
                min_detection_conf=self.cfg.mediapipe.min_detection_confidence,
                min_tracking_conf=self.cfg.mediapipe.min_tracking_confidence
            )
            logger.info("✅ MediaPipe Hands loaded")
        except Exception as e:
            logger.error(f"❌ Error loading MediaPipe Hands, gestures inactive: {e}")
            self.tracker = None

    def start(self, on_frame: FrameCallback) -> None:
        """Start delivering frames to the callback on the running event loop."""
        if self.cap is None:
            raise CameraUnavailableError("Camera not opened")
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run(on_frame))

    async def _run(self, on_frame: FrameCallback) -> None:
        while True:
            try:
                await self._read_and_deliver(on_frame)
            except Exception as e:
                logger.error(f"❌ Error processing camera frame: {e}")
                await asyncio.sleep(0.05)
                continue

            # Yield to other tasks between frames
            await asyncio.sleep(0)

    async def _read_and_deliver(self, on_frame: FrameCallback) -> None:
        # Capture and inference block for tens of ms; keep them off the event loop
        ret, frame = await asyncio.to_thread(self.cap.read)
        if not ret:
            logger.warning("Failed to read frame from camera")
            await asyncio.sleep(0.05)
            return

        landmarks = None
        if self.tracker is not None:
            landmarks = await asyncio.to_thread(self.tracker.process, frame)
            await on_frame(landmarks)

        if self.cfg.display.show_preview:
            self._show_preview(frame, landmarks)

    def _show_preview(self, frame: np.ndarray, landmarks: Optional[Frame]) -> None:
        if landmarks and self.tracker is not None and self.cfg.display.show_landmarks:
            frame = self.tracker.draw_landmarks(frame, landmarks)
        cv2.imshow(self.cfg.display.window_name, frame)
        cv2.waitKey(1)

    async def stop(self) -> None:
        """Stop frame delivery and close the landmark model."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"❌ Frame loop ended with error: {e}")
            self._task = None
        if self.tracker is not None:
            self.tracker.close()
            self.tracker = None

    def release(self) -> None:
        """Release the camera stream."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if self.cfg.display.show_preview:
            cv2.destroyAllWindows()
