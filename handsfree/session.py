"""
Gesture control session: activation lifecycle and per-frame wiring.
"""
import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Sequence

from .types import ActivationError, ControllerProto, GestureType, LandmarkSourceProto, PointerState
from .config import Cfg
from .landmarks import coerce_frame
from .gestures import GestureArbiter
from .pointer import PointerTracker
from .dispatcher import ActionDispatcher

logger = logging.getLogger(__name__)


GestureCallback = Callable[[GestureType], Any]


def default_source_factory(cfg: Cfg) -> LandmarkSourceProto:
    """Build the OpenCV/MediaPipe camera source."""
    from .tracker import CameraLandmarkSource
    return CameraLandmarkSource(cfg)


class GestureSession:
    """
    One camera session of hands-free gesture control.

    Data flow per frame: landmark source -> pointer tracker -> arbiter
    (classifier + motion) -> action dispatcher -> on_gesture callback.
    Arbiter state lives from activate() to deactivate() only.
    """

    def __init__(self, cfg: Cfg, controller: ControllerProto,
                 on_gesture: Optional[GestureCallback] = None,
                 source_factory: Callable[[Cfg], LandmarkSourceProto] = default_source_factory):
        """
        Initialize the session.

        Args:
            cfg: Configuration
            controller: Controller executing scroll and click actions
            on_gesture: Application callback, sync or async, called once per
                emitted gesture
            source_factory: Builds the landmark source on activation
        """
        self.cfg = cfg
        self.controller = controller
        self.on_gesture = on_gesture
        self.source_factory = source_factory
        self.dispatcher = ActionDispatcher(controller, cfg)

        self.enabled = cfg.control.enabled
        self.enable_pointer = cfg.pointer.enabled

        self.source: Optional[LandmarkSourceProto] = None
        self.arbiter: Optional[GestureArbiter] = None
        self.pointer_tracker = PointerTracker((cfg.screen.width, cfg.screen.height))
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        # Serializes activate/deactivate so overlapping calls share one camera
        self._lifecycle_lock = asyncio.Lock()

    @property
    def is_active(self) -> bool:
        return self.source is not None

    @property
    def current_gesture(self) -> Optional[GestureType]:
        return self.arbiter.current_gesture if self.arbiter is not None else None

    @property
    def pointer(self) -> PointerState:
        return self.pointer_tracker.state

    async def activate(self) -> LandmarkSourceProto:
        """
        Open the camera and start gesture processing.

        Returns:
            The running landmark source (the stream handle)

        Raises:
            CameraPermissionError: camera access was denied
            CameraUnavailableError: no camera could be opened
        """
        async with self._lifecycle_lock:
            if self.source is not None:
                return self.source

            source = self.source_factory(self.cfg)
            try:
                source.open()
            except ActivationError as e:
                logger.error(f"❌ Error accessing camera ({e.reason}): {e}")
                raise

            self._loop = asyncio.get_running_loop()
            viewport = None
            try:
                viewport = await self.controller.viewport_size()
            except Exception as e:
                logger.warning(f"Could not read viewport size, using configured screen: {e}")
            if viewport:
                self.pointer_tracker.screen_wh = viewport

            self.arbiter = GestureArbiter(self.cfg, self._loop)
            self.source = source
            source.start(self.handle_frame)
            logger.info("✅ Gesture control activated")
            return source

    async def deactivate(self) -> None:
        """Stop the source, cancel the dwell timer, then release the camera."""
        async with self._lifecycle_lock:
            if self.source is None:
                return

            source = self.source
            self.source = None
            try:
                await source.stop()
            except Exception as e:
                logger.error(f"❌ Error stopping landmark source: {e}")
            finally:
                if self.arbiter is not None:
                    self.arbiter.close()
                    self.arbiter = None
                source.release()
                self.pointer_tracker.reset_flags()
            logger.info("🛑 Gesture control deactivated")

    async def handle_frame(self, raw_landmarks: Optional[Sequence[Any]]) -> Optional[GestureType]:
        """
        Process one frame from the landmark source.

        Args:
            raw_landmarks: Landmarks of the detected hand, or None

        Returns:
            Emitted gesture, or None
        """
        if not self.enabled or self.arbiter is None:
            return None

        landmarks = coerce_frame(raw_landmarks)
        if landmarks is None:
            # No hand (or malformed data): pointer stays where it was
            return None

        t_now = self._loop.time()
        if self.enable_pointer:
            self.pointer_tracker.update(landmarks)

        arbiter = self.arbiter
        gesture = arbiter.process_frame(landmarks, t_now)
        self.pointer_tracker.set_hand_flags(arbiter.state.is_pointing, arbiter.state.is_pinching)
        if gesture is None:
            return None

        try:
            await self.dispatcher.dispatch(gesture, arbiter.state, self.pointer_tracker.state,
                                           t_now, self.enable_pointer)
        except Exception as e:
            logger.error(f"❌ Gesture action failed for {gesture}: {e}")

        if self.on_gesture is not None:
            try:
                result = self.on_gesture(gesture)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"❌ Gesture callback failed for {gesture}: {e}")

        return gesture
