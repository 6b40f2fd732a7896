import asyncio

import pytest
from fastapi import HTTPException

from evosim.app import server
from evosim.app.server import SimulationController
from evosim.sim.core.config import SimulationConfig, TerrainConfig


def _controller() -> SimulationController:
    return SimulationController(
        SimulationConfig(seed=2, initial_population=3, terrain=TerrainConfig(width=6, height=6))
    )


def test_step_command_runs_exactly_one_tick() -> None:
    controller = _controller()

    async def exercise() -> None:
        first = await controller.step()
        second = await controller.step()
        assert first["world_frame"] == 1
        assert second["world_frame"] == 2
        status = await controller.status()
        assert status["state"] == "Stopped"
        assert status["mode"] == "Single"
        assert status["world_frame"] == 2

    asyncio.run(exercise())
    assert not controller.running


def test_start_and_stop_toggle_clock() -> None:
    controller = _controller()

    async def exercise() -> None:
        await controller.start()
        assert controller.running
        assert controller.world.clock.mode.value == "Auto"
        await controller.stop()
        assert not controller.running

    asyncio.run(exercise())


def test_snapshot_and_inspect_reads() -> None:
    controller = _controller()

    async def exercise() -> None:
        await controller.step()
        payload = await controller.snapshot()
        assert payload["world_frame"] == 1
        assert len(payload["agents"]) == 3
        assert payload["world"] == {"width": 6, "height": 6}
        assert len(payload["tiles"]["types"]) == 36
        details = await controller.inspect(payload["agents"][0]["id"])
        assert details["layer_sizes"] == [4, 6, 2]
        assert await controller.inspect(42) is None

    asyncio.run(exercise())


def test_reset_returns_to_frame_zero() -> None:
    controller = _controller()

    async def exercise() -> None:
        await controller.step()
        await controller.reset()
        status = await controller.status()
        assert status["world_frame"] == 0
        assert status["metrics"]["population"] == 3

    asyncio.run(exercise())


def test_unknown_agent_endpoint_returns_404() -> None:
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(server.inspect_agent(10_000))

    assert excinfo.value.status_code == 404
