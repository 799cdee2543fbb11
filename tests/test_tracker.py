"""
Test cases for the camera landmark source with OpenCV and MediaPipe mocked out.
"""
import asyncio
import unittest
import sys
from pathlib import Path
from unittest import mock

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsfree import tracker
from handsfree.tracker import CameraLandmarkSource, camera_failure
from handsfree.types import CameraPermissionError, CameraUnavailableError, Landmark
from handsfree.config import Cfg


def fake_capture(opened=True):
    cap = mock.MagicMock()
    cap.isOpened.return_value = opened
    cap.read.return_value = (True, object())
    return cap


async def wait_for(condition, timeout=2.0):
    """Yield to the frame loop until the condition holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


class TestCameraFailure(unittest.TestCase):
    """Test classification of camera open failures."""

    def test_unreadable_device_is_permission_error(self):
        with mock.patch.object(tracker.Path, "exists", return_value=True), \
                mock.patch.object(tracker.os, "access", return_value=False):
            error = camera_failure(0)
        self.assertIsInstance(error, CameraPermissionError)
        self.assertEqual(error.reason, "camera-permission-denied")

    def test_missing_device_is_unavailable(self):
        with mock.patch.object(tracker.Path, "exists", return_value=False):
            error = camera_failure(3)
        self.assertIsInstance(error, CameraUnavailableError)


class TestCameraLandmarkSource(unittest.IsolatedAsyncioTestCase):
    """Test open/start/stop/release of the camera source."""

    def setUp(self):
        self.cfg = Cfg()

    def test_open_failure_raises_and_releases(self):
        cap = fake_capture(opened=False)
        with mock.patch.object(tracker.cv2, "VideoCapture", return_value=cap), \
                mock.patch.object(tracker.Path, "exists", return_value=False):
            source = CameraLandmarkSource(self.cfg)
            with self.assertRaises(CameraUnavailableError):
                source.open()
        cap.release.assert_called_once()
        self.assertIsNone(source.cap)

    def test_model_failure_is_degraded_mode(self):
        """Camera stays open when the landmark model cannot load."""
        cap = fake_capture()
        with mock.patch.object(tracker.cv2, "VideoCapture", return_value=cap), \
                mock.patch.object(tracker, "HandsTracker", side_effect=RuntimeError("no model")):
            source = CameraLandmarkSource(self.cfg)
            source.open()

        self.assertTrue(source.is_degraded)
        self.assertIn("degraded", source.info)
        source.release()
        cap.release.assert_called_once()

    async def test_frames_delivered_until_stopped(self):
        cap = fake_capture()
        hands = mock.MagicMock()
        hands.process.return_value = [Landmark(0.5, 0.5)] * 21
        received = []

        async def on_frame(landmarks):
            received.append(landmarks)

        with mock.patch.object(tracker.cv2, "VideoCapture", return_value=cap), \
                mock.patch.object(tracker, "HandsTracker", return_value=hands):
            source = CameraLandmarkSource(self.cfg)
            source.open()
            source.start(on_frame)
            await wait_for(lambda: received)
            await source.stop()

        self.assertGreater(len(received), 0)
        self.assertEqual(len(received[0]), 21)
        hands.close.assert_called_once()

        count = len(received)
        await asyncio.sleep(0.02)
        self.assertEqual(len(received), count)

        source.release()
        cap.release.assert_called_once()

    async def test_frame_errors_keep_loop_alive(self):
        """A failing landmark model is logged per frame and stop() still tears down."""
        cap = fake_capture()
        hands = mock.MagicMock()
        hands.process.side_effect = RuntimeError("mediapipe graph failure")
        received = []

        async def on_frame(landmarks):
            received.append(landmarks)

        with mock.patch.object(tracker.cv2, "VideoCapture", return_value=cap), \
                mock.patch.object(tracker, "HandsTracker", return_value=hands):
            source = CameraLandmarkSource(self.cfg)
            source.open()
            with self.assertLogs("handsfree.tracker", level="ERROR"):
                source.start(on_frame)
                await wait_for(lambda: hands.process.call_count >= 2)
            await source.stop()

        self.assertEqual(received, [])
        self.assertIsNone(source._task)
        hands.close.assert_called_once()

        source.release()
        cap.release.assert_called_once()


if __name__ == '__main__':
    unittest.main()
