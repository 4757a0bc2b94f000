from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simulation import Dispatcher, FleetConfig, InvalidFloorError, UnknownElevatorError
from simulation.events import Event

logger = logging.getLogger(__name__)


class FloorRequest(BaseModel):
    floor: int


class DispatchManager:
    """Owns the dispatcher and fans its events out to WebSocket clients."""

    def __init__(self, config: Optional[FleetConfig] = None) -> None:
        self.config = config or FleetConfig()
        self.dispatcher = self._build_dispatcher()
        self._closed = False
        self.clients: Set[WebSocket] = set()
        self._events: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            if self._closed:
                self.dispatcher = self._build_dispatcher()
                self._closed = False
            self._loop = asyncio.get_running_loop()
            self._events = asyncio.Queue()
            self._task = asyncio.create_task(self._pump())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._loop = None
        self._events = None
        if not self._closed:
            self.dispatcher.shutdown()
            self._closed = True

    def _build_dispatcher(self) -> Dispatcher:
        dispatcher = Dispatcher(self.config)
        dispatcher.on_event(self._on_dispatch_event)
        return dispatcher

    def _on_dispatch_event(self, event: Event) -> None:
        # Called from request handlers and from movement worker threads.
        loop, events = self._loop, self._events
        if loop is None or events is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(events.put_nowait, asdict(event))

    async def _pump(self) -> None:
        events = self._events
        if events is None:
            return
        while True:
            event = await events.get()
            await self.broadcast({"event": event, "state": self.current_state()})

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
            except Exception as exc:
                logger.warning("Dropping stream client after failed send: %s", exc)
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        logger.info("Stream client connected (%d connected)", len(self.clients))
        await websocket.send_text(json.dumps({"event": None, "state": self.current_state()}))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
            logger.info("Stream client disconnected (%d connected)", len(self.clients))
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        dispatcher = self.dispatcher
        return {
            "elevators": [asdict(status) for status in dispatcher.statuses()],
            "pending": dispatcher.pending_count,
            "can_dispatch": dispatcher.has_pending,
            "dispatched": dispatcher.dispatched_count,
            "config": asdict(dispatcher.config),
        }

    async def submit(self, floor: int) -> dict:
        async with self._lock:
            request = self.dispatcher.submit_request(floor)
            return {
                "accepted": True,
                "floor": request.target_floor,
                "created_at": request.created_at,
                "pending": self.dispatcher.pending_count,
            }

    async def dispatch(self) -> dict:
        async with self._lock:
            events = self.dispatcher.dispatch_pending()
            return {
                "events": [asdict(event) for event in events],
                "state": self.current_state(),
            }

    async def reset(self) -> dict:
        async with self._lock:
            self.dispatcher.reset()
            return self.current_state()


manager = DispatchManager()
app = FastAPI(title="Elevator Dispatch API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/requests")
async def submit_request(request: FloorRequest) -> dict:
    try:
        return await manager.submit(request.floor)
    except InvalidFloorError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/dispatch")
async def dispatch_pending() -> dict:
    return await manager.dispatch()


@app.post("/reset")
async def reset() -> dict:
    return await manager.reset()


@app.get("/elevators/{elevator_id}")
async def get_elevator(elevator_id: int) -> dict:
    try:
        return asdict(manager.dispatcher.elevator_status(elevator_id))
    except UnknownElevatorError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
