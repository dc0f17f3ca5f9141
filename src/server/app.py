from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from typing import AsyncIterator, Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dispatch import get_dispatcher
from elevator import CarConfig, ElevatorCore

logger = logging.getLogger(__name__)


class FloorRequest(BaseModel):
    floor: int


class PolicySelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class SimulationManager:
    """Owns one car and the asyncio task that steps it."""

    def __init__(self, core: ElevatorCore, tick_interval: float = 0.6, policy_name: str = "scan") -> None:
        self.core = core
        self.tick_interval = tick_interval
        self.policy_name = policy_name.lower()
        self.ticks: int = 0
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls, config: CarConfig) -> "SimulationManager":
        return cls(config.build_core(), tick_interval=config.tick_interval, policy_name=config.policy)

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Stepper task started (interval %.2fs)", self.tick_interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("Stepper task stopped after %d ticks", self.ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.core.step()
            self.ticks += 1
            await self.broadcast(self.current_state())

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.core.state().to_dict()
        state["tick"] = self.ticks
        state["policy"] = self.policy_name
        state["bounds"] = {
            "min_floor": self.core.bounds.min_floor,
            "max_floor": self.core.bounds.max_floor,
        }
        return state

    def add_request(self, floor: int) -> dict:
        accepted = self.core.add_request(floor)
        state = self.current_state()
        state["accepted"] = accepted
        return state

    def set_policy(self, name: str, options: Dict[str, object]) -> dict:
        self.core.set_dispatcher(get_dispatcher(name, **options))
        self.policy_name = name.lower()
        logger.info("Dispatch policy set to %s %s", self.policy_name, options)
        return self.current_state()


def create_app(manager: SimulationManager) -> FastAPI:
    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await manager.start()
        try:
            yield
        finally:
            await manager.stop()

    app = FastAPI(title="LiftCore Elevator API", lifespan=lifespan)
    app.state.manager = manager
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.post("/requests")
    async def add_request(request: FloorRequest) -> dict:
        return manager.add_request(request.floor)

    @app.post("/policy")
    async def set_policy(selection: PolicySelection) -> dict:
        try:
            return manager.set_policy(selection.name, selection.options)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


def create_app_from_env() -> FastAPI:
    """Application factory for uvicorn, configured from LIFT_* variables."""
    logging.basicConfig(
        level=os.environ.get("LIFT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return create_app(SimulationManager.from_config(CarConfig.from_env()))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:create_app_from_env", factory=True, host="0.0.0.0", port=8000, reload=False)
