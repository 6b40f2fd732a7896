from __future__ import annotations

import logging
import math
from typing import Iterable, TYPE_CHECKING

from ..core.agent import BrainOutput
from ..core.network import InputSizeMismatchError, evaluate
from . import sensing

if TYPE_CHECKING:
    from ..core.agent import Agent
    from ..core.world import World

logger = logging.getLogger(__name__)


class InvalidBrainOutputError(ValueError):
    pass


def _to_brain_output(outputs: list) -> BrainOutput:
    if len(outputs) < 2:
        raise InvalidBrainOutputError(f"network produced {len(outputs)} outputs, need move and rotation")
    move_amt, rot_amt = float(outputs[0]), float(outputs[1])
    if not (math.isfinite(move_amt) and math.isfinite(rot_amt)):
        raise InvalidBrainOutputError(f"network produced non-finite output ({move_amt}, {rot_amt})")
    return BrainOutput(move_amt=move_amt, rot_amt=rot_amt)


def think(world: World, agent: Agent) -> None:
    """Sense and evaluate one agent, caching the result on it."""
    inputs = sensing.collect_inputs(world, agent)
    outputs = evaluate(agent.network, world.activation, inputs)
    agent.brain = _to_brain_output(outputs)
    agent.last_inputs = inputs


def update_brains(world: World, agents: Iterable[Agent]) -> tuple[int, int]:
    """Neural-tick phase. A failing agent keeps its previous output."""
    updated = 0
    failed = 0
    for agent in agents:
        try:
            think(world, agent)
        except (InputSizeMismatchError, InvalidBrainOutputError) as exc:
            agent.brain_errors += 1
            failed += 1
            logger.debug("Agent %d kept its previous brain output: %s", agent.id, exc)
            continue
        except Exception:
            agent.brain_errors += 1
            failed += 1
            logger.debug("Agent %d brain evaluation raised, previous output kept", agent.id, exc_info=True)
            continue
        updated += 1
    if failed:
        logger.warning(
            "Neural frame %d: %d of %d agents failed evaluation and kept their previous output",
            world.clock.neural_frame,
            failed,
            updated + failed,
        )
    return updated, failed
