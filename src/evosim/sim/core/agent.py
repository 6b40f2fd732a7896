from __future__ import annotations

from dataclasses import dataclass, field

from pygame.math import Vector2

from .network import NeuralNetwork


@dataclass(slots=True)
class AgentTraits:
    max_move_speed: float = 1.0
    max_rot_speed: float = 1.0


@dataclass(slots=True)
class BrainOutput:
    move_amt: float = 0.0
    rot_amt: float = 0.5


@dataclass(slots=True)
class Agent:
    id: int
    network: NeuralNetwork
    position: Vector2
    heading: float
    traits: AgentTraits = field(default_factory=AgentTraits)
    brain: BrainOutput = field(default_factory=BrainOutput)
    last_inputs: list[float] = field(default_factory=list)
    age: float = 0.0
    brain_errors: int = 0
