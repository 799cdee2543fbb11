"""
Action dispatcher that turns emitted gestures into scroll and click actions.
"""
import logging
from typing import Optional

from .types import ArbiterState, ControllerProto, GestureType, PointerState, UIElement
from .config import Cfg

logger = logging.getLogger(__name__)


ACTIVATABLE_TAGS = {"BUTTON", "A", "INPUT", "SELECT", "LABEL"}
ACTIVATABLE_ROLE = "button"
CLICKABLE_ATTRIBUTE = "data-clickable"
POINTER_CLASS = "cursor-pointer"


def is_activatable(element: UIElement) -> bool:
    """
    Check whether an element accepts activation by a pointer click.

    Matches interactive tags, role="button", a data-clickable marker,
    the cursor-pointer class or a native click handler.
    """
    return (
        element.tag_name.upper() in ACTIVATABLE_TAGS
        or element.get_attribute("role") == ACTIVATABLE_ROLE
        or element.get_attribute(CLICKABLE_ATTRIBUTE) is not None
        or element.has_class(POINTER_CLASS)
        or bool(element.has_click_handler)
    )


def find_activatable(element: Optional[UIElement], max_depth: int = 5) -> Optional[UIElement]:
    """
    Walk up from an element to the nearest activatable ancestor.

    The element itself counts as depth 0, so at most max_depth elements
    are examined.
    """
    current = element
    depth = 0
    while current is not None and depth < max_depth:
        if is_activatable(current):
            return current
        current = current.parent
        depth += 1
    return None


class ActionDispatcher:
    """
    Performs built-in side effects for gesture transitions.

    Features:
    - swipe_up / swipe_down scroll the page, throttled
    - click activates the element under the pointer
    - all other gestures have no built-in effect
    """

    def __init__(self, controller: ControllerProto, cfg: Cfg):
        """Initialize the dispatcher with a controller."""
        self.controller = controller
        self.cfg = cfg

    async def dispatch(self, gesture: GestureType, state: ArbiterState,
                       pointer: PointerState, t_now: float,
                       enable_pointer: bool = True) -> None:
        """
        Run the built-in action for a gesture transition.

        Args:
            gesture: Newly emitted gesture
            state: Arbiter state holding the scroll throttle timestamp
            pointer: Current pointer state
            t_now: Current timestamp in seconds
            enable_pointer: Whether click-through is allowed
        """
        if gesture == "swipe_up":
            await self.scroll("up", state, t_now)
        elif gesture == "swipe_down":
            await self.scroll("down", state, t_now)
        elif gesture == "click" and enable_pointer:
            await self.click_at(pointer.x, pointer.y)

    async def scroll(self, direction: str, state: ArbiterState, t_now: float) -> bool:
        """
        Scroll up or down unless a scroll happened within the throttle window.

        Returns:
            True if a scroll was performed
        """
        throttle_s = self.cfg.gestures.scroll.throttle_ms / 1000.0
        if state.last_scroll_time is not None and t_now - state.last_scroll_time < throttle_s:
            return False

        state.last_scroll_time = t_now
        amount = self.cfg.gestures.scroll.amount_px
        await self.controller.scroll(amount if direction == "down" else -amount)
        logger.info(f"Scrolling {direction}")
        return True

    async def click_at(self, x: float, y: float) -> bool:
        """
        Activate the element under the pointer.

        Returns:
            True if an activatable element was found and clicked, False if
            nothing was there or the fallback click on the hit element was used
        """
        logger.debug(f"Attempting click at: {x:.0f}, {y:.0f}")
        element = await self.controller.element_at(x, y)
        if element is None:
            logger.debug("No element found at pointer position")
            return False

        target = find_activatable(element, self.cfg.pointer.max_ancestor_depth)
        if target is not None:
            logger.info(f"🖱️  Clicking {target.tag_name}")
            await target.show_press_feedback(self.cfg.pointer.press_feedback_ms)
            await target.activate()
            return True

        logger.debug(f"No clickable ancestor, clicking {element.tag_name} directly")
        await element.activate()
        return False
