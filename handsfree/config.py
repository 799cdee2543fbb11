"""
Configuration management for the hands-free gesture control engine.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int = 1
    model_complexity: int = 1
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7


@dataclass
class PinchConfig:
    """Pinch and click-on-release configuration."""
    threshold: float = 0.08  # normalized thumb-index distance
    click_cooldown_ms: int = 300


@dataclass
class SwipeConfig:
    """Swipe gesture configuration."""
    threshold: float = 0.12  # normalized wrist travel between two frames


@dataclass
class ScrollConfig:
    """Scroll action configuration."""
    amount_px: int = 250
    throttle_ms: int = 400


@dataclass
class GesturesConfig:
    """Gesture recognition configuration."""
    pinch: PinchConfig = field(default_factory=PinchConfig)
    swipe: SwipeConfig = field(default_factory=SwipeConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    dwell_ms: int = 800  # emitted gesture reverts to none after this


@dataclass
class PointerConfig:
    """Pointer tracking and click-through configuration."""
    enabled: bool = True
    max_ancestor_depth: int = 5
    press_feedback_ms: int = 150


@dataclass
class ScreenConfig:
    """Fallback screen size when the controller cannot report one."""
    width: int = 1280
    height: int = 720


@dataclass
class ControlConfig:
    """Global gesture control switches."""
    enabled: bool = True


@dataclass
class DisplayConfig:
    """Debug preview settings."""
    show_preview: bool = False
    show_landmarks: bool = True
    window_name: str = "Hands-Free Gesture Control"


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GesturesConfig = field(default_factory=GesturesConfig)
    pointer: PointerConfig = field(default_factory=PointerConfig)
    screen: ScreenConfig = field(default_factory=ScreenConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"
        if not path.exists():
            # Installed without the source tree: built-in defaults
            return Cfg()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object. Missing keys keep their defaults."""
    cfg = Cfg()

    camera_data = data.get('camera', {})
    camera = CameraConfig(
        index=camera_data.get('index', cfg.camera.index),
        width=camera_data.get('width', cfg.camera.width),
        height=camera_data.get('height', cfg.camera.height),
        fps=camera_data.get('fps', cfg.camera.fps)
    )

    mp_data = data.get('mediapipe', {})
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data.get('max_num_hands', cfg.mediapipe.max_num_hands),
        model_complexity=mp_data.get('model_complexity', cfg.mediapipe.model_complexity),
        min_detection_confidence=mp_data.get('min_detection_confidence', cfg.mediapipe.min_detection_confidence),
        min_tracking_confidence=mp_data.get('min_tracking_confidence', cfg.mediapipe.min_tracking_confidence)
    )

    gestures_data = data.get('gestures', {})
    pinch_data = gestures_data.get('pinch', {})
    pinch = PinchConfig(
        threshold=pinch_data.get('threshold', cfg.gestures.pinch.threshold),
        click_cooldown_ms=pinch_data.get('click_cooldown_ms', cfg.gestures.pinch.click_cooldown_ms)
    )
    swipe = SwipeConfig(
        threshold=gestures_data.get('swipe', {}).get('threshold', cfg.gestures.swipe.threshold)
    )
    scroll_data = gestures_data.get('scroll', {})
    scroll = ScrollConfig(
        amount_px=scroll_data.get('amount_px', cfg.gestures.scroll.amount_px),
        throttle_ms=scroll_data.get('throttle_ms', cfg.gestures.scroll.throttle_ms)
    )
    gestures = GesturesConfig(
        pinch=pinch,
        swipe=swipe,
        scroll=scroll,
        dwell_ms=gestures_data.get('dwell_ms', cfg.gestures.dwell_ms)
    )

    pointer_data = data.get('pointer', {})
    pointer = PointerConfig(
        enabled=pointer_data.get('enabled', cfg.pointer.enabled),
        max_ancestor_depth=pointer_data.get('max_ancestor_depth', cfg.pointer.max_ancestor_depth),
        press_feedback_ms=pointer_data.get('press_feedback_ms', cfg.pointer.press_feedback_ms)
    )

    screen_data = data.get('screen', {})
    screen = ScreenConfig(
        width=screen_data.get('width', cfg.screen.width),
        height=screen_data.get('height', cfg.screen.height)
    )

    control = ControlConfig(
        enabled=data.get('control', {}).get('enabled', cfg.control.enabled)
    )

    display_data = data.get('display', {})
    display = DisplayConfig(
        show_preview=display_data.get('show_preview', cfg.display.show_preview),
        show_landmarks=display_data.get('show_landmarks', cfg.display.show_landmarks),
        window_name=display_data.get('window_name', cfg.display.window_name)
    )

    server_data = data.get('server', {})
    server = ServerConfig(
        host=server_data.get('host', cfg.server.host),
        port=server_data.get('port', cfg.server.port)
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        gestures=gestures,
        pointer=pointer,
        screen=screen,
        control=control,
        display=display,
        server=server
    )
