"""
Mock controller implementation for testing gesture actions.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .types import UIElement

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class MockElement:
    """In-memory UI element that records activations."""
    tag_name: str
    parent: Optional["MockElement"] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    classes: Set[str] = field(default_factory=set)
    onclick: bool = False
    activation_count: int = 0
    press_feedback_count: int = 0

    @property
    def has_click_handler(self) -> bool:
        return self.onclick

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    async def activate(self) -> None:
        self.activation_count += 1

    async def show_press_feedback(self, duration_ms: int) -> None:
        self.press_feedback_count += 1


class MockController:
    """Mock controller that logs actions instead of executing them."""

    def __init__(self, viewport: Tuple[int, int] = (1280, 720)):
        """Initialize the mock controller."""
        self.viewport = viewport
        self.scroll_count = 0
        self.scroll_offset = 0
        self.hit_test_count = 0
        self._regions: List[Tuple[Tuple[float, float, float, float], UIElement]] = []

    def add_element(self, element: UIElement, rect: Tuple[float, float, float, float]) -> UIElement:
        """
        Place an element on the mock page. Later elements are on top.

        Args:
            element: Element to place
            rect: (left, top, width, height) in screen pixels
        """
        self._regions.append((rect, element))
        return element

    async def scroll(self, dy_px: int) -> None:
        """Log scroll command instead of executing it."""
        self.scroll_count += 1
        self.scroll_offset += dy_px
        logger.info(f"[MockController] Scroll: dy_px={dy_px} (call #{self.scroll_count})")

    async def element_at(self, x: float, y: float) -> Optional[UIElement]:
        """Return the topmost element whose rect contains the point."""
        for (left, top, width, height), element in reversed(self._regions):
            if left <= x < left + width and top <= y < top + height:
                self.hit_test_count += 1
                logger.info(f"[MockController] Hit test at ({x:.0f}, {y:.0f}): {element.tag_name}")
                return element
        return None

    async def viewport_size(self) -> Optional[Tuple[int, int]]:
        return self.viewport
