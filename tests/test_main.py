"""
Test cases for the command-line application wiring.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsfree.main import HandsFreeApp, parse_args
from handsfree.controller_mock import MockController


class TestMain(unittest.TestCase):
    """Test argument parsing and app construction."""

    def test_parse_args(self):
        args = parse_args(["--browser", "--url", "https://example.com"])
        self.assertTrue(args.browser)
        self.assertEqual(args.url, "https://example.com")
        self.assertFalse(parse_args([]).browser)

    def test_default_app_uses_mock_controller(self):
        app = HandsFreeApp()
        self.assertIsInstance(app.controller, MockController)
        self.assertEqual(app.session.on_gesture, app.on_gesture)
        self.assertFalse(app.session.is_active)

    def test_gesture_logging(self):
        app = HandsFreeApp()
        with self.assertLogs("handsfree.main", level="INFO") as logs:
            app.on_gesture("thumbs_up")
        self.assertIn("thumbs_up at (640, 360)", logs.output[0])


if __name__ == '__main__':
    unittest.main()
