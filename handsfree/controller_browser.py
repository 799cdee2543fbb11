"""
Playwright-backed controller that scrolls and clicks inside a real browser page.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from playwright.async_api import async_playwright, Browser, Page, Playwright

logger = logging.getLogger(__name__)


# Snapshot the hit element and its ancestors in one round trip
HIT_TEST_JS = """
([x, y, maxDepth]) => {
    const chain = [];
    let el = document.elementFromPoint(x, y);
    while (el && chain.length < maxDepth) {
        const attributes = {};
        for (const attr of Array.from(el.attributes)) {
            attributes[attr.name] = attr.value;
        }
        chain.push({
            tag: el.tagName,
            attributes: attributes,
            classes: Array.from(el.classList),
            onclick: typeof el.onclick === 'function',
        });
        el = el.parentElement;
    }
    return chain;
}
"""

RESOLVE_JS = """
    let el = document.elementFromPoint(x, y);
    for (let i = 0; el && i < depth; i++) {
        el = el.parentElement;
    }
"""

ACTIVATE_JS = """
([x, y, depth]) => {
""" + RESOLVE_JS + """
    if (!el) return false;
    el.click();
    return true;
}
"""

PRESS_FEEDBACK_JS = """
([x, y, depth, durationMs]) => {
""" + RESOLVE_JS + """
    if (!el || !el.style) return false;
    el.style.transform = 'scale(0.95)';
    setTimeout(() => { el.style.transform = ''; }, durationMs);
    return true;
}
"""

SCROLL_JS = "(dy) => window.scrollBy({ top: dy, behavior: 'smooth' })"


class BrowserElement:
    """
    Snapshot of a DOM element under the pointer.

    The element is addressed by the hit point and its distance from the hit
    element, so activation re-resolves it inside the page.
    """

    def __init__(self, page: Page, point: Tuple[float, float], depth: int,
                 descriptor: Dict[str, Any], parent: Optional["BrowserElement"] = None):
        self.page = page
        self.point = point
        self.depth = depth
        self.tag_name: str = descriptor.get("tag", "")
        self.attributes: Dict[str, str] = descriptor.get("attributes", {})
        self.classes = set(descriptor.get("classes", []))
        self.onclick = bool(descriptor.get("onclick", False))
        self.parent = parent

    @property
    def has_click_handler(self) -> bool:
        return self.onclick

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    async def activate(self) -> None:
        x, y = self.point
        await self.page.evaluate(ACTIVATE_JS, [x, y, self.depth])

    async def show_press_feedback(self, duration_ms: int) -> None:
        x, y = self.point
        await self.page.evaluate(PRESS_FEEDBACK_JS, [x, y, self.depth, duration_ms])

    def __repr__(self) -> str:
        return f"BrowserElement({self.tag_name}, depth={self.depth})"


def build_element_chain(page: Page, point: Tuple[float, float],
                        descriptors: List[Dict[str, Any]]) -> Optional[BrowserElement]:
    """Link hit-test descriptors (hit element first) into parent-linked elements."""
    parent: Optional[BrowserElement] = None
    for depth in range(len(descriptors) - 1, -1, -1):
        parent = BrowserElement(page, point, depth, descriptors[depth], parent)
    return parent


class BrowserController:
    """
    Controller that drives a Chromium page through Playwright.

    Either launches its own browser or attaches to a running one over CDP.
    """

    def __init__(self, cdp_url: Optional[str] = None, start_url: Optional[str] = None,
                 headless: bool = False, viewport: Tuple[int, int] = (1280, 720),
                 snapshot_depth: int = 16):
        self.cdp_url = cdp_url
        self.start_url = start_url
        self.headless = headless
        self.viewport = viewport
        self.snapshot_depth = snapshot_depth

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def start(self) -> Page:
        """Launch or attach to the browser and return the controlled page."""
        if self.page is not None:
            return self.page

        self._playwright = await async_playwright().start()
        if self.cdp_url:
            logger.info(f"🔌 Connecting to browser over CDP: {self.cdp_url}")
            self._browser = await self._playwright.chromium.connect_over_cdp(self.cdp_url)
            context = self._browser.contexts[0] if self._browser.contexts else await self._browser.new_context()
            self.page = context.pages[0] if context.pages else await context.new_page()
        else:
            logger.info("🌐 Launching Chromium")
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            width, height = self.viewport
            self.page = await self._browser.new_page(viewport={"width": width, "height": height})

        if self.start_url:
            await self.page.goto(self.start_url)
        logger.info("✅ Browser controller ready")
        return self.page

    async def scroll(self, dy_px: int) -> None:
        page = await self.start()
        await page.evaluate(SCROLL_JS, dy_px)

    async def element_at(self, x: float, y: float) -> Optional[BrowserElement]:
        page = await self.start()
        descriptors = await page.evaluate(HIT_TEST_JS, [x, y, self.snapshot_depth])
        if not descriptors:
            return None
        return build_element_chain(page, (x, y), descriptors)

    async def viewport_size(self) -> Optional[Tuple[int, int]]:
        page = await self.start()
        size = page.viewport_size
        if size:
            return size["width"], size["height"]
        # Pages attached over CDP may not report a fixed viewport
        inner = await page.evaluate("() => [window.innerWidth, window.innerHeight]")
        return inner[0], inner[1]

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        try:
            if self._browser is not None:
                await self._browser.close()
        except Exception as e:
            logger.error(f"⚠️ Error closing browser: {e}")
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._browser = None
            self._playwright = None
            self.page = None
            logger.info("✅ Browser controller closed")
