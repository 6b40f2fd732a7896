from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


@dataclass
class BrainConfig:
    layer_sizes: List[int] = field(default_factory=lambda: [4, 6, 2])
    weight_range: float = 0.5
    activation: str = "sigmoid"


@dataclass
class TraitRangeConfig:
    max_move_speed: tuple[float, float] = (1.0, 3.0)
    max_rot_speed: tuple[float, float] = (math.pi / 2.0, math.pi)


@dataclass
class TerrainConfig:
    width: int = 25
    height: int = 25
    max_food: float = 10.0
    water_level: float = 0.35
    terrain_scale: float = 8.0
    food_scale: float = 5.0
    octaves: int = 3
    persistence: float = 0.5
    terrain_seed: Optional[int] = None
    food_seed: Optional[int] = None


@dataclass
class SensingConfig:
    look_ahead: float = 1.0


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 60.0
    neural_period: int = 60
    initial_population: int = 20
    seed: int = 42
    config_version: str = "v1"
    brain: BrainConfig = field(default_factory=BrainConfig)
    traits: TraitRangeConfig = field(default_factory=TraitRangeConfig)
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    sensing: SensingConfig = field(default_factory=SensingConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> SimulationConfig:
    default_traits = TraitRangeConfig()
    traits_raw = raw.get("traits", {})

    def _pair(value: tuple[float, float] | list[float] | None, default: tuple[float, float]) -> tuple[float, float]:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            low, high = float(value[0]), float(value[1])
            return (low, high) if low <= high else (high, low)
        return default

    brain_raw = dict(raw.get("brain", {}))
    if "layer_sizes" in brain_raw:
        brain_raw["layer_sizes"] = [int(size) for size in brain_raw["layer_sizes"]]
    brain = BrainConfig(**brain_raw)
    traits = TraitRangeConfig(
        max_move_speed=_pair(traits_raw.get("max_move_speed"), default_traits.max_move_speed),
        max_rot_speed=_pair(traits_raw.get("max_rot_speed"), default_traits.max_rot_speed),
    )
    terrain = TerrainConfig(**raw.get("terrain", {}))
    sensing = SensingConfig(**raw.get("sensing", {}))
    sim_values = {k: v for k, v in raw.items() if k not in {"brain", "traits", "terrain", "sensing"}}
    return SimulationConfig(brain=brain, traits=traits, terrain=terrain, sensing=sensing, **sim_values)
