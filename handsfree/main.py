"""
Command-line application for hands-free gesture control.
"""
import argparse
import asyncio
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

from .types import ActivationError, GestureType
from .config import load_config
from .controller_mock import MockController
from .session import GestureSession

logger = logging.getLogger(__name__)


class HandsFreeApp:
    """Main application class for hands-free gesture control."""

    def __init__(self, config_path: Optional[str] = None, use_browser: bool = False,
                 cdp_url: Optional[str] = None, start_url: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)

        # Choose controller type
        if use_browser:
            from .controller_browser import BrowserController
            self.controller = BrowserController(
                cdp_url=cdp_url,
                start_url=start_url,
                viewport=(self.config.screen.width, self.config.screen.height)
            )
            logger.info("🌐 Using browser controller")
        else:
            self.controller = MockController((self.config.screen.width, self.config.screen.height))

        self.session = GestureSession(self.config, self.controller, on_gesture=self.on_gesture)

    def on_gesture(self, gesture: GestureType) -> None:
        pointer = self.session.pointer
        logger.info(f"✋ {gesture} at ({pointer.x:.0f}, {pointer.y:.0f})")

    async def run(self) -> None:
        """Activate gesture control and run until cancelled."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("🎯 Gestures:")
        logger.info("  - Swipe up/down = Scroll")
        logger.info("  - Point to aim, pinch and release = Click")
        logger.info("  - Swipe left/right, fist, palm, thumbs up = forwarded to the app")
        logger.info("Press Ctrl+C to quit")

        await self.session.activate()
        try:
            await asyncio.Event().wait()
        finally:
            await self.session.deactivate()
            if hasattr(self.controller, 'close'):
                await self.controller.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hands-free gesture control")
    parser.add_argument("--config", default=os.getenv("HANDSFREE_CONFIG"),
                        help="Path to YAML config (default: config.default.yaml)")
    parser.add_argument("--browser", action="store_true",
                        help="Drive a Chromium page through Playwright")
    parser.add_argument("--cdp-url", default=os.getenv("HANDSFREE_CDP_URL"),
                        help="Attach to a running browser over CDP instead of launching one")
    parser.add_argument("--url", default=os.getenv("HANDSFREE_START_URL"),
                        help="Page to open in browser mode")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    args = parse_args(argv)

    app = HandsFreeApp(
        config_path=args.config,
        use_browser=args.browser,
        cdp_url=args.cdp_url,
        start_url=args.url
    )
    try:
        await app.run()
    except ActivationError as e:
        logger.error(f"❌ Gesture control unavailable ({e.reason}): {e}")
        return 1
    return 0


def cli() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    cli()
