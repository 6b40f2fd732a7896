from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    world_frame: int
    neural_frame: int
    neural_tick: bool
    population: int
    brain_updates: int
    brain_errors: int
    average_move: float
    average_rot: float
    distance_travelled: float
    tick_duration_ms: float = 0.0
