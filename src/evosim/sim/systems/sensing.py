from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

from pygame.math import Vector2

from ..core.environment import Tile, TileType
from ..utils.math2d import forward_vector, wrap_coordinate

if TYPE_CHECKING:
    from ..core.agent import Agent
    from ..core.world import World

INPUT_COUNT = 4


def _food_fraction(tile: Optional[Tile]) -> float:
    if tile is None or tile.max_food <= 0.0:
        return 0.0
    return tile.food / tile.max_food


def _land_flag(tile: Optional[Tile]) -> float:
    if tile is None:
        return 0.0
    return 1.0 if tile.tile_type == TileType.LAND else 0.0


def look_ahead_position(world: World, agent: Agent, distance: float) -> Vector2:
    fx, fy = forward_vector(agent.heading)
    grid = world.grid
    return Vector2(
        wrap_coordinate(agent.position.x + fx * distance, grid.width),
        wrap_coordinate(agent.position.y + fy * distance, grid.height),
    )


def collect_inputs(world: World, agent: Agent) -> List[float]:
    grid = world.grid
    here = grid.tile_at_position(agent.position)
    ahead = grid.tile_at_position(look_ahead_position(world, agent, world.config.sensing.look_ahead))
    return [_food_fraction(here), _land_flag(here), _food_fraction(ahead), _land_flag(ahead)]
