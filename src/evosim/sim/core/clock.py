"""Fixed-cadence scheduler deciding which frames are neural ticks.

Cadence is counted in frames, not wall-clock time, so how often brains are
evaluated does not depend on how fast the host runs the loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_NEURAL_PERIOD = 60


class SimulationState(str, Enum):
    STOPPED = "Stopped"
    RUNNING = "Running"


class SimulationMode(str, Enum):
    SINGLE = "Single"
    AUTO = "Auto"


@dataclass(slots=True)
class SimClock:
    neural_period: int = DEFAULT_NEURAL_PERIOD
    world_frame: int = 0
    neural_frame: int = 0
    last_neural_tick_frame: int = 0
    is_neural_tick_frame: bool = False
    state: SimulationState = SimulationState.STOPPED
    mode: SimulationMode = SimulationMode.AUTO

    def __post_init__(self) -> None:
        if int(self.neural_period) < 1:
            raise ValueError(f"neural_period must be at least 1 frame (got {self.neural_period})")
        self.neural_period = int(self.neural_period)

    @property
    def running(self) -> bool:
        return self.state == SimulationState.RUNNING

    def start(self) -> None:
        self.mode = SimulationMode.AUTO
        self.state = SimulationState.RUNNING

    def stop(self) -> None:
        self.state = SimulationState.STOPPED

    def step(self) -> None:
        self.mode = SimulationMode.SINGLE
        self.state = SimulationState.RUNNING

    def advance_tick(self) -> bool:
        """Advance one frame if running. Returns whether a tick was admitted."""
        if self.state != SimulationState.RUNNING:
            return False
        self.world_frame += 1
        delta = self.world_frame - self.last_neural_tick_frame
        self.is_neural_tick_frame = delta >= self.neural_period
        if self.is_neural_tick_frame:
            self.neural_frame += 1
            self.last_neural_tick_frame = self.world_frame
        if self.mode == SimulationMode.SINGLE:
            self.state = SimulationState.STOPPED
        return True

    def reset(self) -> None:
        self.world_frame = 0
        self.neural_frame = 0
        self.last_neural_tick_frame = 0
        self.is_neural_tick_frame = False
        self.state = SimulationState.STOPPED
        self.mode = SimulationMode.AUTO
