from __future__ import annotations

import logging
import math
from typing import Iterable, TYPE_CHECKING

from ..utils.math2d import forward_vector, wrap_angle, wrap_coordinate

if TYPE_CHECKING:
    from ..core.agent import Agent

logger = logging.getLogger(__name__)


class InvalidMotionError(ValueError):
    pass


def integrate_agent(agent: Agent, dt: float, width: float, height: float) -> None:
    """Advance one agent. Nothing is committed when the result is not finite."""
    brain = agent.brain
    traits = agent.traits
    # 0.5 means no turn
    rot_req = brain.rot_amt * 2.0 - 1.0
    heading = wrap_angle(agent.heading + rot_req * traits.max_rot_speed * dt)

    # move_amt is not remapped, agents only ever move forward
    fx, fy = forward_vector(heading)
    distance = brain.move_amt * traits.max_move_speed * dt
    x = wrap_coordinate(agent.position.x + fx * distance, width)
    y = wrap_coordinate(agent.position.y + fy * distance, height)
    if not (math.isfinite(heading) and math.isfinite(x) and math.isfinite(y)):
        raise InvalidMotionError(f"agent {agent.id} moved to a non-finite state ({x}, {y}, {heading})")
    agent.position.update(x, y)
    agent.heading = heading


def integrate_motion(agents: Iterable[Agent], dt: float, width: float, height: float) -> float:
    """Move every agent by its cached brain output. Returns the summed distance travelled."""
    travelled = 0.0
    stalled = 0
    for agent in agents:
        try:
            integrate_agent(agent, dt, width, height)
        except InvalidMotionError as exc:
            stalled += 1
            logger.debug("Agent %d held in place: %s", agent.id, exc)
        else:
            travelled += abs(agent.brain.move_amt * agent.traits.max_move_speed * dt)
        agent.age += dt
    if stalled:
        logger.warning("%d agents produced non-finite motion and were held in place", stalled)
    return travelled
