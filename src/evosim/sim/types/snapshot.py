from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    world_frame: int
    neural_frame: int
    state: str
    mode: str
    metrics: TickMetrics
    agents: List[Dict[str, Any]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"
    tiles: Dict[str, Any]


@dataclass(slots=True)
class SnapshotWorld:
    width: int
    height: int


@dataclass(slots=True)
class SnapshotMetadata:
    sim_dt: float
    tick_rate: float
    neural_period: int
    seed: int
    config_version: str
