"""
listdesk Test Suite — Server
============================
REST routes and the WebSocket change stream, via FastAPI's TestClient.

Usage:
    python -m pytest tests/test_server.py -v
"""
import sys
import os
import asyncio
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from listkeeper import ItemStore
from listdesk.config import DeskConfig
from listdesk.server import _settle_receiver, create_app


class ServerTestCase(unittest.TestCase):

    def setUp(self):
        self.store = ItemStore(["milk"])
        self.app = create_app(self.store, DeskConfig())
        self.client = TestClient(self.app)


class TestRestRoutes(ServerTestCase):

    def test_list(self):
        resp = self.client.get("/api/items")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"items": ["milk"], "count": 1})

    def test_create(self):
        resp = self.client.post("/api/items", json={"text": "eggs"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["index"], 1)
        self.assertEqual(self.store.read_all(), ("milk", "eggs"))

    def test_create_empty_rejected(self):
        resp = self.client.post("/api/items", json={"text": ""})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(len(self.store), 1)

    def test_update(self):
        resp = self.client.put("/api/items/0", json={"text": "oat milk"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["items"], ["oat milk"])

    def test_update_out_of_range(self):
        for index in ("1", "-1"):
            resp = self.client.put(f"/api/items/{index}", json={"text": "x"})
            self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.store.read_all(), ("milk",))

    def test_delete(self):
        resp = self.client.delete("/api/items/0")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"items": [], "count": 0})

    def test_delete_out_of_range(self):
        resp = self.client.delete("/api/items/3")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("No record at index 3", resp.json()["detail"])

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.json(), {"status": "ok", "count": 1, "listeners": 0})

    def test_store_is_shared_not_global(self):
        other = create_app(ItemStore(), DeskConfig())
        self.client.post("/api/items", json={"text": "eggs"})
        resp = TestClient(other).get("/api/items")
        self.assertEqual(resp.json()["count"], 0)
        self.assertIs(self.app.state.store, self.store)


class TestWebSocket(ServerTestCase):

    def test_snapshot_on_connect_and_change(self):
        with self.client.websocket_connect("/ws/items") as ws:
            first = ws.receive_json()
            self.assertEqual(first, {"type": "snapshot", "items": ["milk"], "count": 1})

            self.client.post("/api/items", json={"text": "eggs"})
            self.assertEqual(ws.receive_json()["items"], ["milk", "eggs"])

            self.client.delete("/api/items/0")
            self.assertEqual(ws.receive_json()["items"], ["eggs"])

    def test_direct_store_changes_are_streamed(self):
        with self.client.websocket_connect("/ws/items") as ws:
            ws.receive_json()
            self.store.update(0, "cream")
            self.assertEqual(ws.receive_json()["items"], ["cream"])

    def test_failed_mutation_sends_nothing(self):
        with self.client.websocket_connect("/ws/items") as ws:
            ws.receive_json()
            self.client.put("/api/items/9", json={"text": "x"})
            self.client.post("/api/items", json={"text": "eggs"})
            # The next message is the create, not the ignored update
            self.assertEqual(ws.receive_json()["items"], ["milk", "eggs"])

    def test_disconnect_unsubscribes(self):
        with self.client.websocket_connect("/ws/items") as ws:
            ws.receive_json()
            self.assertEqual(self.store.listener_count, 1)
        self.assertEqual(self.store.listener_count, 0)


class TestReceiverCleanup(unittest.TestCase):

    def test_failed_receiver_error_is_collected(self):
        async def failing_receive():
            raise RuntimeError("socket closed")

        async def scenario():
            task = asyncio.create_task(failing_receive())
            await asyncio.wait({task})
            _settle_receiver(task)
            return task

        with self.assertLogs("listdesk.server", level="DEBUG") as logs:
            task = asyncio.run(scenario())
        self.assertIsInstance(task.exception(), RuntimeError)
        self.assertIn("socket closed", logs.output[-1])

    def test_pending_receiver_is_cancelled(self):
        async def scenario():
            task = asyncio.create_task(asyncio.sleep(60))
            await asyncio.sleep(0)
            _settle_receiver(task)
            await asyncio.sleep(0)
            return task

        self.assertTrue(asyncio.run(scenario()).cancelled())

if __name__ == "__main__":
    unittest.main()
