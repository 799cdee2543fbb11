"""
Test cases for the FastAPI surface.
"""
import unittest
import sys
from pathlib import Path

from fastapi.testclient import TestClient

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsfree.server import GestureEventHub, create_app
from handsfree.session import GestureSession
from handsfree.controller_mock import MockController
from handsfree.config import Cfg
from tests.fakes import FakeSource, palm_frame


def build_client(fail_with=None):
    cfg = Cfg()
    session = GestureSession(cfg, MockController((1280, 720)),
                             source_factory=lambda cfg: FakeSource(fail_with))
    return TestClient(create_app(cfg, session)), session


class TestServer(unittest.TestCase):
    """Test HTTP endpoints."""

    def test_status_inactive(self):
        client, _ = build_client()
        with client:
            response = client.get("/status")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["active"])
        self.assertTrue(body["enabled"])
        self.assertIsNone(body["current_gesture"])
        self.assertEqual(body["pointer"]["x"], 640)

    def test_activate_and_deactivate(self):
        client, session = build_client()
        with client:
            response = client.post("/gesture/activate")
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["source"], "fake camera")
            self.assertTrue(client.get("/status").json()["active"])

            response = client.post("/gesture/deactivate")
            self.assertEqual(response.status_code, 200)
            self.assertFalse(session.is_active)

    def test_permission_denied(self):
        client, session = build_client("permission")
        with client:
            response = client.post("/gesture/activate")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"]["reason"], "camera-permission-denied")
        self.assertFalse(session.is_active)

    def test_camera_unavailable(self):
        client, _ = build_client("unavailable")
        with client:
            response = client.post("/gesture/activate")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"]["reason"], "camera-unavailable")

    def test_options(self):
        client, session = build_client()
        with client:
            response = client.post("/gesture/options", json={"enable_pointer": False})
        self.assertEqual(response.json(), {"enabled": True, "enable_pointer": False})
        self.assertFalse(session.enable_pointer)
        self.assertTrue(session.enabled)

    def test_gesture_events_stream(self):
        """Emitted gestures are pushed to WebSocket clients."""
        client, session = build_client()
        with client:
            client.post("/gesture/activate")
            with client.websocket_connect("/ws/gestures") as websocket:
                self.assertEqual(websocket.receive_json(), {"type": "status", "connected": True})

                client.portal.call(session.handle_frame, palm_frame())
                event = websocket.receive_json()

        self.assertEqual(event["type"], "gesture")
        self.assertEqual(event["gesture"], "palm")
        self.assertIn("pointer", event)


class FakeSocket:
    """Gesture client that records events; may let another client join mid-send."""

    def __init__(self, hub, joiner=None):
        self.hub = hub
        self.joiner = joiner
        self.sent = []

    async def send_json(self, event):
        self.sent.append(event)
        if self.joiner is not None:
            self.hub.active_connections.add(self.joiner)


class TestGestureEventHub(unittest.IsolatedAsyncioTestCase):
    """Test event fan-out and callback chaining."""

    async def test_client_joining_during_broadcast(self):
        hub = GestureEventHub()
        newcomer = FakeSocket(hub)
        clients = [FakeSocket(hub, joiner=newcomer), FakeSocket(hub), FakeSocket(hub)]
        hub.active_connections.update(clients)

        await hub.broadcast("palm")

        for client in clients:
            self.assertEqual([event["gesture"] for event in client.sent], ["palm"])
        self.assertIn(newcomer, hub.active_connections)

    async def test_existing_session_callback_kept(self):
        received = []
        session = GestureSession(Cfg(), MockController((1280, 720)),
                                 on_gesture=received.append,
                                 source_factory=lambda cfg: FakeSource())
        app = create_app(session=session)
        client = FakeSocket(app.state.hub)
        app.state.hub.active_connections.add(client)

        await session.on_gesture("fist")

        self.assertEqual(received, ["fist"])
        self.assertEqual(client.sent[0]["gesture"], "fist")



if __name__ == '__main__':
    unittest.main()
