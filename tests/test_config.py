"""
Test cases for YAML configuration loading.
"""
import tempfile
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsfree.config import load_config, Cfg


class TestLoadConfig(unittest.TestCase):
    """Test configuration loading."""

    def test_default_file(self):
        """The shipped default file matches the built-in defaults."""
        cfg = load_config()
        self.assertEqual(cfg, Cfg())
        self.assertEqual(cfg.gestures.pinch.threshold, 0.08)
        self.assertEqual(cfg.gestures.swipe.threshold, 0.12)
        self.assertEqual(cfg.gestures.dwell_ms, 800)
        self.assertEqual(cfg.gestures.scroll.throttle_ms, 400)
        self.assertEqual(cfg.pointer.max_ancestor_depth, 5)
        self.assertTrue(cfg.control.enabled)
        self.assertTrue(cfg.pointer.enabled)

    def test_partial_file_keeps_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("gestures:\n  dwell_ms: 1000\n  scroll:\n    amount_px: 300\npointer:\n  enabled: false\n")
            cfg = load_config(str(path))

        self.assertEqual(cfg.gestures.dwell_ms, 1000)
        self.assertEqual(cfg.gestures.scroll.amount_px, 300)
        self.assertEqual(cfg.gestures.scroll.throttle_ms, 400)
        self.assertFalse(cfg.pointer.enabled)
        self.assertEqual(cfg.camera.width, 640)

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("")
            self.assertEqual(load_config(str(path)), Cfg())

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/handsfree.yaml")


if __name__ == '__main__':
    unittest.main()
