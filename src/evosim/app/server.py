from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World

logger = logging.getLogger(__name__)


class SimulationController:
    """Maps control commands onto a world's clock and serves polled reads.

    Ticks and reads share one lock, so a reader never sees a half-applied tick.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.world = World(config)
        self.speed_multiplier = 1.0
        self._lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.world.clock.running

    def ensure_loop(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._loop())

    async def start(self) -> None:
        async with self._lock:
            self.world.clock.start()
        self.ensure_loop()
        logger.info("Simulation started at frame %d", self.world.clock.world_frame)

    async def stop(self) -> None:
        async with self._lock:
            self.world.clock.stop()
        logger.info("Simulation stopped at frame %d", self.world.clock.world_frame)

    async def step(self) -> Optional[Dict[str, Any]]:
        async with self._lock:
            if self.world.clock.running:
                return None
            self.world.clock.step()
            metrics = self.world.step()
        return None if metrics is None else asdict(metrics)

    async def reset(self) -> None:
        async with self._lock:
            self.world.reset()

    async def status(self) -> Dict[str, Any]:
        async with self._lock:
            clock = self.world.clock
            metrics = self.world.latest_metrics()
            return {
                "state": clock.state.value,
                "mode": clock.mode.value,
                "world_frame": clock.world_frame,
                "neural_frame": clock.neural_frame,
                "population": len(self.world.agents),
                "metrics": asdict(metrics),
            }

    async def snapshot(self) -> Dict[str, Any]:
        async with self._lock:
            snapshot = self.world.snapshot()
        return {
            "world_frame": snapshot.world_frame,
            "neural_frame": snapshot.neural_frame,
            "state": snapshot.state,
            "mode": snapshot.mode,
            "metrics": asdict(snapshot.metrics),
            "agents": snapshot.agents,
            "world": asdict(snapshot.world),
            "metadata": asdict(snapshot.metadata),
            "tiles": snapshot.tiles,
        }

    async def inspect(self, agent_id: int) -> Optional[Dict[str, Any]]:
        async with self._lock:
            return self.world.inspect(agent_id)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.time_step / self.speed_multiplier)
            if not self.running:
                continue
            async with self._lock:
                self.world.step()


app = FastAPI(title="Evosim Control Surface")
controller = SimulationController(SimulationConfig())


@app.on_event("startup")
async def _startup() -> None:
    controller.ensure_loop()


@app.get("/api/status")
async def status() -> JSONResponse:
    return JSONResponse(await controller.status())


@app.get("/api/snapshot")
async def snapshot() -> JSONResponse:
    return JSONResponse(await controller.snapshot())


@app.get("/api/agents/{agent_id}")
async def inspect_agent(agent_id: int) -> JSONResponse:
    payload = await controller.inspect(agent_id)
    if payload is None:
        raise HTTPException(status_code=404, detail=f"No agent with id {agent_id}")
    return JSONResponse(payload)


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": controller.running})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": controller.running})


@app.post("/api/control/step")
async def step_simulation() -> JSONResponse:
    metrics = await controller.step()
    return JSONResponse({"running": controller.running, "metrics": metrics})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "world_frame": controller.world.clock.world_frame})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


__all__ = ["app", "controller", "SimulationController"]
