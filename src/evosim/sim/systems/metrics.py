from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

from ..types.metrics import TickMetrics

if TYPE_CHECKING:
    from ..core.agent import Agent
    from ..core.clock import SimClock


def create_metrics(
    clock: SimClock,
    agents: Iterable[Agent],
    brain_updates: int,
    brain_errors: int,
    distance_travelled: float,
    duration_ms: float,
) -> TickMetrics:
    population = 0
    move_sum = 0.0
    rot_sum = 0.0
    for agent in agents:
        population += 1
        move_sum += agent.brain.move_amt
        rot_sum += agent.brain.rot_amt
    return TickMetrics(
        world_frame=clock.world_frame,
        neural_frame=clock.neural_frame,
        neural_tick=clock.is_neural_tick_frame,
        population=population,
        brain_updates=brain_updates,
        brain_errors=brain_errors,
        average_move=0.0 if population == 0 else move_sum / population,
        average_rot=0.0 if population == 0 else rot_sum / population,
        distance_travelled=distance_travelled,
        tick_duration_ms=duration_ms,
    )
