from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional

from pygame.math import Vector2

from .config import TerrainConfig
from .rng import DeterministicRng
from ..utils.noise import value_noise

logger = logging.getLogger(__name__)


class TileType(str, Enum):
    LAND = "Land"
    WATER = "Water"


@dataclass(slots=True)
class Tile:
    tile_type: TileType = TileType.LAND
    food: float = 0.0
    max_food: float = 0.0


class OutOfBoundsError(IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"tile ({x}, {y}) is outside a {width}x{height} world")
        self.x = x
        self.y = y


class WorldGrid:
    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"world must be at least 1x1 tiles (got {width}x{height})")
        self._width = int(width)
        self._height = int(height)
        self._tiles: List[Tile] = [Tile() for _ in range(self._width * self._height)]

    @classmethod
    def generate(cls, config: TerrainConfig, rng: DeterministicRng) -> "WorldGrid":
        grid = cls(config.width, config.height)
        terrain_seed = config.terrain_seed if config.terrain_seed is not None else rng.next_seed()
        food_seed = config.food_seed if config.food_seed is not None else rng.next_seed()
        terrain = value_noise(
            grid.width, grid.height, config.terrain_scale, terrain_seed, config.octaves, config.persistence
        )
        food = value_noise(grid.width, grid.height, config.food_scale, food_seed, config.octaves, config.persistence)
        max_food = max(0.0, float(config.max_food))
        for y in range(grid.height):
            for x in range(grid.width):
                tile = grid._tiles[grid._index(x, y)]
                tile.tile_type = TileType.WATER if terrain[y, x] < config.water_level else TileType.LAND
                tile.max_food = min(max_food, max(0.0, float(food[y, x]) * max_food))
                tile.food = tile.max_food
        logger.info(
            "Generated %dx%d world (terrain_seed=%d, food_seed=%d, land=%d tiles)",
            grid.width,
            grid.height,
            terrain_seed,
            food_seed,
            grid.count(TileType.LAND),
        )
        return grid

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def tile_at(self, x: int, y: int) -> Tile:
        return replace(self.tile_mut(x, y))

    def tile_mut(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self._width, self._height)
        return self._tiles[self._index(x, y)]

    def tile_at_position(self, position: Vector2) -> Optional[Tile]:
        if not (math.isfinite(position.x) and math.isfinite(position.y)):
            return None
        try:
            return self.tile_mut(math.floor(position.x), math.floor(position.y))
        except OutOfBoundsError:
            return None

    def set_food(self, x: int, y: int, amount: float) -> float:
        tile = self.tile_mut(x, y)
        tile.food = max(0.0, min(tile.max_food, amount))
        return tile.food

    def count(self, tile_type: TileType) -> int:
        return sum(1 for tile in self._tiles if tile.tile_type == tile_type)

    def export_tiles(self) -> Dict[str, object]:
        return {
            "width": self._width,
            "height": self._height,
            "types": [tile.tile_type.value for tile in self._tiles],
            "food": [tile.food for tile in self._tiles],
            "max_food": [tile.max_food for tile in self._tiles],
        }

    def _index(self, x: int, y: int) -> int:
        return y * self._width + x
