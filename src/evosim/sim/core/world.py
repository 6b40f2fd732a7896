from __future__ import annotations

import logging
import math
from time import perf_counter
from typing import Any, Dict, List, Optional

from pygame.math import Vector2

from .agent import Agent, AgentTraits
from .clock import SimClock
from .config import SimulationConfig
from .environment import WorldGrid
from .network import NeuralNetwork, construct_random, evaluate_layers, resolve_activation
from .rng import DeterministicRng, derive_stream_seed
from ..systems import brain, metrics as metrics_system, motion
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from ..utils.math2d import wrap_angle, wrap_coordinate

logger = logging.getLogger(__name__)

_TERRAIN_RNG_SALT = 0xC0A1F00D5EED1234
_BRAIN_RNG_SALT = 0xB4A1B5EED0000001
_TRAIT_RNG_SALT = 0x7BADCA11C0FFEE01


class World:
    def __init__(self, config: SimulationConfig):
        self._config = config
        self._activation = resolve_activation(config.brain.activation)
        self._rng = DeterministicRng(config.seed)
        self._terrain_rng = DeterministicRng(derive_stream_seed(config.seed, _TERRAIN_RNG_SALT))
        self._brain_rng = DeterministicRng(derive_stream_seed(config.seed, _BRAIN_RNG_SALT))
        self._trait_rng = DeterministicRng(derive_stream_seed(config.seed, _TRAIT_RNG_SALT))
        self._clock = SimClock(neural_period=config.neural_period)
        self._grid = WorldGrid.generate(config.terrain, self._terrain_rng)
        self._agents: Dict[int, Agent] = {}
        self._next_id = 0
        self._metrics: TickMetrics | None = None
        self._bootstrap_population()
        logger.info(
            "World ready: %d agents, %dx%d tiles, neural period %d frames",
            len(self._agents),
            self._grid.width,
            self._grid.height,
            self._clock.neural_period,
        )

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def clock(self) -> SimClock:
        return self._clock

    @property
    def grid(self) -> WorldGrid:
        return self._grid

    @property
    def activation(self):
        return self._activation

    @property
    def agents(self) -> List[Agent]:
        return list(self._agents.values())

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def get_agent(self, agent_id: int) -> Optional[Agent]:
        return self._agents.get(agent_id)

    def reset(self) -> None:
        self._agents.clear()
        self._rng.reset()
        self._terrain_rng.reset()
        self._brain_rng.reset()
        self._trait_rng.reset()
        self._clock.reset()
        self._grid = WorldGrid.generate(self._config.terrain, self._terrain_rng)
        self._next_id = 0
        self._metrics = None
        self._bootstrap_population()
        logger.info("World reset to seed %d", self._config.seed)

    def spawn_agent(
        self,
        position: Vector2,
        heading: float,
        traits: AgentTraits,
        network: Optional[NeuralNetwork] = None,
    ) -> Agent:
        if not (math.isfinite(position.x) and math.isfinite(position.y)):
            raise ValueError(f"agent position must be finite, got ({position.x}, {position.y})")
        if not math.isfinite(heading):
            raise ValueError(f"agent heading must be finite, got {heading}")
        for name in ("max_move_speed", "max_rot_speed"):
            value = getattr(traits, name)
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"agent trait {name} must be finite and non-negative, got {value}")
        if network is None:
            network = construct_random(
                self._config.brain.layer_sizes, self._brain_rng.next_seed(), self._config.brain.weight_range
            )
        agent = Agent(
            id=self._next_id,
            network=network,
            position=Vector2(
                wrap_coordinate(position.x, self._grid.width),
                wrap_coordinate(position.y, self._grid.height),
            ),
            heading=wrap_angle(heading),
            traits=traits,
        )
        self._agents[agent.id] = agent
        self._next_id += 1
        return agent

    def remove_agent(self, agent_id: int) -> bool:
        return self._agents.pop(agent_id, None) is not None

    def step(self) -> TickMetrics | None:
        """Run one frame: scheduler, neural evaluation on neural ticks, then motion.

        Returns ``None`` without touching any state when the clock is stopped.
        """
        if not self._clock.advance_tick():
            return None
        start = perf_counter()
        agents = list(self._agents.values())

        updated = 0
        failed = 0
        if self._clock.is_neural_tick_frame:
            updated, failed = brain.update_brains(self, agents)

        travelled = motion.integrate_motion(
            agents, self._config.time_step, self._grid.width, self._grid.height
        )

        elapsed_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(self._clock, agents, updated, failed, travelled, elapsed_ms)
        return self._metrics

    def latest_metrics(self) -> TickMetrics:
        return self._metrics if self._metrics is not None else self._snapshot_metrics_from_state()

    def snapshot(self) -> Snapshot:
        metrics = self.latest_metrics()
        metadata = SnapshotMetadata(
            sim_dt=self._config.time_step,
            tick_rate=0.0 if self._config.time_step <= 0 else 1.0 / self._config.time_step,
            neural_period=self._clock.neural_period,
            seed=self._config.seed,
            config_version=self._config.config_version,
        )
        return Snapshot(
            world_frame=self._clock.world_frame,
            neural_frame=self._clock.neural_frame,
            state=self._clock.state.value,
            mode=self._clock.mode.value,
            metrics=metrics,
            agents=[self._agent_snapshot(agent) for agent in self._agents.values()],
            world=SnapshotWorld(width=self._grid.width, height=self._grid.height),
            metadata=metadata,
            tiles=self._grid.export_tiles(),
        )

    def inspect(self, agent_id: int) -> Optional[Dict[str, Any]]:
        agent = self._agents.get(agent_id)
        if agent is None:
            return None
        payload: Dict[str, Any] = self._agent_snapshot(agent)
        payload["layer_sizes"] = agent.network.layer_sizes
        payload["age"] = agent.age
        payload["brain_errors"] = agent.brain_errors
        payload["inputs"] = list(agent.last_inputs)
        payload["activations"] = []
        if len(agent.last_inputs) == agent.network.num_inputs:
            payload["activations"] = evaluate_layers(agent.network, self._activation, agent.last_inputs)[1:]
        return payload

    def _bootstrap_population(self) -> None:
        for _ in range(self._config.initial_population):
            self.spawn_agent(
                position=self._rng.next_position(self._grid.width, self._grid.height),
                heading=self._rng.next_angle(),
                traits=self._sample_traits(),
            )

    def _sample_traits(self) -> AgentTraits:
        ranges = self._config.traits
        return AgentTraits(
            max_move_speed=self._sample_trait_range(ranges.max_move_speed),
            max_rot_speed=self._sample_trait_range(ranges.max_rot_speed),
        )

    def _sample_trait_range(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        if high < low:
            low, high = high, low
        return self._trait_rng.next_range(low, high)

    @staticmethod
    def _agent_snapshot(agent: Agent) -> Dict[str, Any]:
        return {
            "id": agent.id,
            "x": agent.position.x,
            "y": agent.position.y,
            "heading": agent.heading,
            "heading_deg": math.degrees(agent.heading),
            "move_amt": agent.brain.move_amt,
            "rot_amt": agent.brain.rot_amt,
            "max_move_speed": agent.traits.max_move_speed,
            "max_rot_speed": agent.traits.max_rot_speed,
        }

    def _snapshot_metrics_from_state(self) -> TickMetrics:
        return metrics_system.create_metrics(self._clock, self._agents.values(), 0, 0, 0.0, 0.0)
