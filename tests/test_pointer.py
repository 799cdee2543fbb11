"""
Test cases for pointer tracking.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsfree.pointer import PointerTracker
from handsfree.types import Landmark
from tests.fakes import make_frame


def frame_with_index_tip(x, y):
    frame = make_frame(index=True)
    frame[8] = Landmark(x, y, 0.0)
    return frame


class TestPointerTracker(unittest.TestCase):
    """Test fingertip-to-screen mapping."""

    def setUp(self):
        self.tracker = PointerTracker((1280, 720))

    def test_starts_at_center(self):
        state = self.tracker.state
        self.assertEqual((state.x, state.y), (640, 360))
        self.assertFalse(state.is_pointing)

    def test_direct_mapping(self):
        """Index tip (0.5, 0.5) on 1280x720 maps to (640, 360)."""
        state = self.tracker.update(frame_with_index_tip(0.5, 0.5))
        self.assertEqual((state.x, state.y), (640.0, 360.0))

    def test_no_mirroring(self):
        state = self.tracker.update(frame_with_index_tip(0.25, 0.1))
        self.assertEqual((state.x, state.y), (320.0, 72.0))

    def test_sticky_on_hand_loss(self):
        """A frame without a hand keeps the last position."""
        self.tracker.update(frame_with_index_tip(0.1, 0.2))
        state = self.tracker.update(None)
        self.assertEqual((state.x, state.y), (128.0, 144.0))

        state = self.tracker.update(frame_with_index_tip(0.9, 0.9))
        self.assertEqual((state.x, state.y), (1152.0, 648.0))

    def test_state_is_a_copy(self):
        state = self.tracker.state
        state.x = -1
        self.assertEqual(self.tracker.state.x, 640)

    def test_hand_flags(self):
        self.tracker.set_hand_flags(True, False)
        self.assertTrue(self.tracker.state.is_pointing)
        self.tracker.reset_flags()
        self.assertFalse(self.tracker.state.is_pointing)
        self.assertFalse(self.tracker.state.is_pinching)


if __name__ == '__main__':
    unittest.main()
