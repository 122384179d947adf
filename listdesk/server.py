"""
listdesk Server — HTTP and WebSocket views of an ItemStore
==========================================================
FastAPI application wrapping one ItemStore.

Launch:
    python -m listdesk.cli serve --port 8000

Endpoints:
    GET    /api/items           → All records
    POST   /api/items           → Append a record
    PUT    /api/items/{index}   → Replace record at index
    DELETE /api/items/{index}   → Delete record at index
    GET    /api/health          → Record and listener counts
    WS     /ws/items            → Snapshot on connect, then one per change

The store is handed to create_app(); routes reach it through
app.state.store.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from listkeeper import ItemStore
from listdesk.config import DeskConfig, parse_log_level

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  Request Models
# ─────────────────────────────────────────────────────────────

class ItemText(BaseModel):
    text: str = Field(..., min_length=1)


def _items_payload(items) -> dict:
    return {"items": list(items), "count": len(items)}


def _snapshot_message(items) -> dict:
    return {"type": "snapshot", **_items_payload(items)}


# ─────────────────────────────────────────────────────────────
#  App Factory
# ─────────────────────────────────────────────────────────────

def create_app(store: ItemStore, config: Optional[DeskConfig] = None) -> FastAPI:
    """Build the FastAPI app around an existing store."""
    app = FastAPI(title="listdesk", version="0.1.0")
    app.state.store = store
    app.state.config = config or DeskConfig()

    # ─── REST API ─────────────────────────────────────────

    @app.get("/api/items")
    async def api_list(request: Request):
        """Return every record, in order."""
        return JSONResponse(_items_payload(request.app.state.store.read_all()))

    @app.post("/api/items", status_code=201)
    async def api_create(body: ItemText, request: Request):
        """Append a record."""
        store = request.app.state.store
        store.create(body.text)
        items = store.read_all()
        return JSONResponse({"index": len(items) - 1, **_items_payload(items)}, status_code=201)

    @app.put("/api/items/{index}")
    async def api_update(index: int, body: ItemText, request: Request):
        """Replace the record at index."""
        store = request.app.state.store
        if not store.try_update(index, body.text):
            raise HTTPException(status_code=404, detail=f"No record at index {index}")
        return JSONResponse(_items_payload(store.read_all()))

    @app.delete("/api/items/{index}")
    async def api_delete(index: int, request: Request):
        """Delete the record at index."""
        store = request.app.state.store
        if not store.try_delete(index):
            raise HTTPException(status_code=404, detail=f"No record at index {index}")
        return JSONResponse(_items_payload(store.read_all()))

    @app.get("/api/health")
    async def api_health(request: Request):
        store = request.app.state.store
        return JSONResponse({
            "status": "ok",
            "count": len(store),
            "listeners": store.listener_count,
        })

    # ─── WebSocket (change stream) ────────────────────────

    @app.websocket("/ws/items")
    async def ws_items(websocket: WebSocket):
        """Stream store snapshots.

        Server sends:
            {"type": "snapshot", "items": [...], "count": n}
        once on connect and once after every change. Client messages
        are ignored.
        """
        await websocket.accept()
        store = websocket.app.state.store
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        # Mutations may run on another thread's loop (e.g. sync callers)
        def _on_change():
            loop.call_soon_threadsafe(queue.put_nowait, store.read_all())

        subscription = store.subscribe(_on_change)
        log.debug("WebSocket client subscribed (%d listener(s))", store.listener_count)
        disconnected = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            await websocket.send_json(_snapshot_message(store.read_all()))
            while True:
                next_snapshot = asyncio.create_task(queue.get())
                done, _ = await asyncio.wait(
                    {next_snapshot, disconnected},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if disconnected in done:
                    next_snapshot.cancel()
                    break
                await websocket.send_json(_snapshot_message(next_snapshot.result()))
        except WebSocketDisconnect:
            pass
        finally:
            _settle_receiver(disconnected)
            store.unsubscribe(subscription)
            log.debug("WebSocket client unsubscribed")

    return app


def _settle_receiver(task: asyncio.Task) -> None:
    """Cancel the receive task, or collect how it ended."""
    if not task.done():
        task.cancel()
        return
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log.debug("WebSocket receive ended with %r", error)


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


# ─────────────────────────────────────────────────────────────
#  Startup
# ─────────────────────────────────────────────────────────────

def run_server(config: DeskConfig, store: Optional[ItemStore] = None) -> None:
    """Serve `store` (or a new one seeded from config) with uvicorn."""
    import uvicorn

    if store is None:
        store = ItemStore(config.seed)
    app = create_app(store, config)

    print(f"\n─── listdesk ───")
    print(f"  http://{config.host}:{config.port}")
    print(f"  Press Ctrl+C to stop\n")

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=parse_log_level(config.log_level).lower(),
    )
