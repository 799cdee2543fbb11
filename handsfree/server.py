#!/usr/bin/env python3
"""
Hands-free gesture control - FastAPI server
Exposes activation, pointer/gesture state and a live gesture event stream
"""

import inspect
import os
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from dotenv import load_dotenv

from .types import CameraPermissionError, CameraUnavailableError, GestureType
from .config import Cfg, load_config
from .controller_mock import MockController
from .session import GestureCallback, GestureSession

logger = logging.getLogger(__name__)


class PointerModel(BaseModel):
    x: float
    y: float
    is_pointing: bool
    is_pinching: bool


class StatusResponse(BaseModel):
    active: bool
    enabled: bool
    enable_pointer: bool
    current_gesture: Optional[str] = None
    pointer: PointerModel
    timestamp: str


class ActivateResponse(BaseModel):
    success: bool
    source: str
    timestamp: str


class OptionsRequest(BaseModel):
    enabled: Optional[bool] = None
    enable_pointer: Optional[bool] = None


class GestureEventHub:
    """Fans emitted gestures out to connected WebSocket clients"""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()
        self.session: Optional[GestureSession] = None

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"🔌 Client connected for gesture events ({len(self.active_connections)} active)")
        await websocket.send_json({"type": "status", "connected": True})

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        logger.info(f"🔌 Client disconnected from gesture events ({len(self.active_connections)} active)")

    async def broadcast(self, gesture: GestureType):
        """Send one gesture event to every client; drop clients that fail"""
        event: Dict[str, Any] = {
            "type": "gesture",
            "gesture": gesture,
            "timestamp": datetime.now().isoformat(),
        }
        if self.session is not None:
            event["pointer"] = pointer_payload(self.session)

        disconnected = set()
        for connection in list(self.active_connections):
            try:
                await connection.send_json(event)
            except Exception as e:
                logger.warning(f"Dropping gesture client: {e}")
                disconnected.add(connection)

        for conn in disconnected:
            self.active_connections.discard(conn)


def pointer_payload(session: GestureSession) -> Dict[str, Any]:
    pointer = session.pointer
    return {
        "x": pointer.x,
        "y": pointer.y,
        "is_pointing": pointer.is_pointing,
        "is_pinching": pointer.is_pinching,
    }


def chain_callbacks(existing: Optional[GestureCallback], broadcast: GestureCallback) -> GestureCallback:
    """Keep a session's own gesture callback and add the event broadcast after it."""
    if existing is None:
        return broadcast

    async def on_gesture(gesture: GestureType):
        try:
            result = existing(gesture)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"❌ Gesture callback failed for {gesture}: {e}")
        await broadcast(gesture)

    return on_gesture


def create_app(cfg: Optional[Cfg] = None, session: Optional[GestureSession] = None) -> FastAPI:
    """
    Build the FastAPI app around one gesture session.

    Args:
        cfg: Configuration (loaded from HANDSFREE_CONFIG or the default file if None)
        session: Prebuilt session; a mock-controller session is created if None
    """
    if cfg is None:
        cfg = session.cfg if session is not None else load_config(os.getenv("HANDSFREE_CONFIG"))

    hub = GestureEventHub()
    if session is None:
        session = GestureSession(cfg, MockController((cfg.screen.width, cfg.screen.height)))
    session.on_gesture = chain_callbacks(session.on_gesture, hub.broadcast)
    hub.session = session

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting gesture control server...")
        yield
        logger.info("🧹 Shutting down server...")
        try:
            await session.deactivate()
        except Exception as e:
            logger.error(f"⚠️ Error deactivating gesture session: {e}")

    app = FastAPI(title="Hands-Free Gesture Control", lifespan=lifespan)
    app.state.session = session
    app.state.hub = hub

    @app.get("/")
    async def root():
        return {
            "service": "handsfree",
            "endpoints": ["/status", "/gesture/activate", "/gesture/deactivate",
                          "/gesture/options", "/ws/gestures"],
        }

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        """Current activation state, gesture and pointer"""
        return StatusResponse(
            active=session.is_active,
            enabled=session.enabled,
            enable_pointer=session.enable_pointer,
            current_gesture=session.current_gesture,
            pointer=PointerModel(**pointer_payload(session)),
            timestamp=datetime.now().isoformat(),
        )

    @app.post("/gesture/activate", response_model=ActivateResponse)
    async def activate():
        try:
            source = await session.activate()
        except CameraPermissionError as e:
            raise HTTPException(status_code=403, detail={"reason": e.reason, "message": str(e)})
        except CameraUnavailableError as e:
            raise HTTPException(status_code=503, detail={"reason": e.reason, "message": str(e)})

        return ActivateResponse(
            success=True,
            source=str(getattr(source, "info", type(source).__name__)),
            timestamp=datetime.now().isoformat(),
        )

    @app.post("/gesture/deactivate")
    async def deactivate():
        await session.deactivate()
        return {"success": True, "timestamp": datetime.now().isoformat()}

    @app.post("/gesture/options")
    async def set_options(request: OptionsRequest):
        if request.enabled is not None:
            session.enabled = request.enabled
        if request.enable_pointer is not None:
            session.enable_pointer = request.enable_pointer
        logger.info(f"⚙️  Options: enabled={session.enabled}, enable_pointer={session.enable_pointer}")
        return {"enabled": session.enabled, "enable_pointer": session.enable_pointer}

    @app.websocket("/ws/gestures")
    async def gesture_events(websocket: WebSocket):
        await hub.connect(websocket)
        try:
            while True:
                # Clients only listen; incoming text keeps the socket alive
                await websocket.receive_text()
        except WebSocketDisconnect:
            hub.disconnect(websocket)

    return app


if __name__ == "__main__":
    import uvicorn

    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    config = load_config(os.getenv("HANDSFREE_CONFIG"))
    logger.info(f"📚 API documentation available at http://{config.server.host}:{config.server.port}/docs")
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        reload=False,
        log_level="info"
    )
