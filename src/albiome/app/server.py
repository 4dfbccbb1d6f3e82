from __future__ import annotations

import argparse
import asyncio
import io
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple

import pygame
import uvicorn
from fastapi import Body, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse, Response

from ..config import SimulationConfig
from ..errors import InvalidConfiguration
from ..logging_utils import configure_logging
from ..render.canvas import BiomeCanvas
from ..sim.core.world import World
from ..sim.types.snapshot import Snapshot

logger = logging.getLogger("albiome.server")

MIN_SPEED = 0.1
MAX_SPEED = 5.0


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


def snapshot_message(snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "type": "snapshot",
        "tick": snapshot.tick,
        "payload": {
            "tick": snapshot.tick,
            "metrics": asdict(snapshot.metrics) if snapshot.metrics is not None else None,
            "entities": snapshot.entities,
            "world": asdict(snapshot.world),
            "metadata": asdict(snapshot.metadata),
        },
    }


def parse_point(payload: Any) -> Tuple[float, float]:
    if not isinstance(payload, dict):
        raise InvalidConfiguration(f"Click payload must be an object, got {payload!r}")
    try:
        return float(payload["x"]), float(payload["y"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Click payload needs numeric x and y, got {payload!r}") from exc


class SimulationController:
    """Runs one world on the event loop and streams its snapshots.

    Snapshots stay queued until a client acknowledges their tick; each
    connected socket keeps a cursor of the last tick it was sent so a
    reconnecting or slow client catches up from the queue.
    """

    def __init__(self, config: SimulationConfig, broadcast_interval: int = 1, start_paused: bool = False):
        self.config = config
        self.start_paused = start_paused
        self.world = World(config, BiomeCanvas.from_config(config.canvas))
        self.broadcast_interval = max(1, broadcast_interval)
        self.running = False
        self.speed_multiplier = 1.0
        self._cursors: Dict[WebSocket, int] = {}
        self._snapshot_queue: Deque[QueuedSnapshot] = deque()
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._tick_task: Optional[asyncio.Task] = None

    @property
    def tick(self) -> int:
        return self.world.tick

    @property
    def client_count(self) -> int:
        return len(self._cursors)

    @property
    def queued_count(self) -> int:
        return len(self._snapshot_queue)

    async def start(self) -> None:
        if self._tick_task is None:
            self._tick_task = asyncio.create_task(self._run())
        self.running = not self.start_paused

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        self.running = True

    def set_speed(self, multiplier: float) -> float:
        self.speed_multiplier = max(MIN_SPEED, min(MAX_SPEED, float(multiplier)))
        return self.speed_multiplier

    async def shutdown(self) -> None:
        self.running = False
        task, self._tick_task = self._tick_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Tick task cancelled at tick %d", self.tick)

    async def reset(self) -> None:
        async with self._lock:
            self.world.reset()
        async with self._queue_lock:
            self._snapshot_queue.clear()
        self._cursors = dict.fromkeys(self._cursors, -1)
        logger.info("World reset")
        await self.publish()

    async def register_click(self, x: float, y: float) -> None:
        async with self._lock:
            self.world.register_click((x, y))

    async def advance(self) -> None:
        async with self._lock:
            self.world.advance_one_tick()
        if self.tick % self.broadcast_interval == 0:
            await self.publish()

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(1.0 / (self.config.fps * self.speed_multiplier))
                if self.running:
                    await self.advance()
        except Exception:
            logger.exception("Simulation loop stopped at tick %d", self.tick)
            self.running = False
            raise

    async def acknowledge(self, tick: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].tick <= tick:
                self._snapshot_queue.popleft()

    async def handle_message(self, message: Dict[str, Any]) -> None:
        kind = message.get("type")
        if kind == "ack":
            tick = message.get("tick")
            if isinstance(tick, int):
                await self.acknowledge(tick)
        elif kind == "click":
            x, y = parse_point(message)
            await self.register_click(x, y)
        else:
            logger.debug("Ignoring message of type %r", kind)

    async def render_frame_png(self) -> bytes:
        buffer = io.BytesIO()
        async with self._lock:
            pygame.image.save(self.world.canvas.surface, buffer, "frame.png")
        return buffer.getvalue()

    async def connect(self, client: WebSocket) -> None:
        self._cursors[client] = -1
        await self._deliver(client)

    def disconnect(self, client: WebSocket) -> None:
        self._cursors.pop(client, None)

    async def publish(self) -> None:
        snapshot = self.world.snapshot()
        queued = QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(snapshot_message(snapshot)))
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
        for client in list(self._cursors):
            try:
                await self._deliver(client)
            except WebSocketDisconnect:
                self.disconnect(client)

    async def queued_ticks(self) -> List[int]:
        async with self._queue_lock:
            return [item.tick for item in self._snapshot_queue]

    async def _deliver(self, client: WebSocket) -> None:
        cursor = self._cursors.get(client, -1)
        async with self._queue_lock:
            backlog = [item for item in self._snapshot_queue if item.tick > cursor]
        for item in backlog:
            await client.send_text(item.payload)
            cursor = item.tick
        self._cursors[client] = cursor


def create_app(controller: Optional[SimulationController] = None) -> FastAPI:
    controller = controller or SimulationController(SimulationConfig())
    app = FastAPI(title="ALBiome Simulation")
    app.state.controller = controller

    @app.on_event("startup")
    async def _startup() -> None:
        await controller.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await controller.shutdown()

    @app.get("/api/status")
    async def status() -> JSONResponse:
        metrics = controller.world.metrics
        return JSONResponse(
            {
                "running": controller.running,
                "tick": controller.tick,
                "population": len(controller.world.entities),
                "clients": controller.client_count,
                "queued": controller.queued_count,
                "metrics": asdict(metrics) if metrics is not None else None,
            }
        )

    @app.post("/api/click")
    async def click(payload: Any = Body(default=None)) -> JSONResponse:
        try:
            x, y = parse_point(payload)
            await controller.register_click(x, y)
        except InvalidConfiguration as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return JSONResponse({"pending": [x, y]})

    @app.get("/api/frame.png")
    async def frame() -> Response:
        return Response(content=await controller.render_frame_png(), media_type="image/png")

    @app.post("/api/control/{action}")
    async def control(action: str, payload: Optional[Dict[str, Any]] = Body(default=None)) -> JSONResponse:
        if action == "start":
            controller.resume()
        elif action == "stop":
            controller.pause()
        elif action == "reset":
            await controller.reset()
        elif action == "step":
            await controller.advance()
        elif action == "speed":
            multiplier = (payload or {}).get("multiplier", 1.0)
            try:
                controller.set_speed(multiplier)
            except (TypeError, ValueError) as exc:
                raise HTTPException(status_code=422, detail=f"Bad multiplier {multiplier!r}") from exc
        else:
            raise HTTPException(status_code=404, detail=f"Unknown control action {action!r}")
        return JSONResponse(
            {"running": controller.running, "tick": controller.tick, "multiplier": controller.speed_multiplier}
        )

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        await controller.connect(websocket)
        try:
            while True:
                text = await websocket.receive_text()
                try:
                    message = json.loads(text)
                except json.JSONDecodeError:
                    logger.warning("Dropping malformed socket message")
                    continue
                if not isinstance(message, dict):
                    continue
                try:
                    await controller.handle_message(message)
                except InvalidConfiguration as exc:
                    logger.warning("Ignoring click message: %s", exc)
        except WebSocketDisconnect:
            controller.disconnect(websocket)

    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the biome simulation over HTTP/WebSocket")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--broadcast-interval", type=int, default=2)
    parser.add_argument("--paused", action="store_true", help="Wait for /api/control/start before ticking")
    args = parser.parse_args(argv)

    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    configure_logging(config.log_level)
    controller = SimulationController(config, broadcast_interval=args.broadcast_interval, start_paused=args.paused)
    logger.info("Serving biome on http://%s:%d", args.host, args.port)
    uvicorn.run(create_app(controller), host=args.host, port=args.port)


__all__ = ["SimulationController", "create_app", "main"]
