from __future__ import annotations

import math

TAU = 2.0 * math.pi


def wrap_angle(angle: float) -> float:
    if angle < 0.0:
        angle += TAU
    elif angle >= TAU:
        angle -= TAU
    if not 0.0 <= angle < TAU:
        # large steps or float rounding at the boundary
        angle %= TAU
        if angle >= TAU:
            angle = 0.0
    return angle


def wrap_coordinate(value: float, extent: float) -> float:
    if value < 0.0:
        value += extent
    elif value >= extent:
        value -= extent
    if not 0.0 <= value < extent:
        value %= extent
        if value >= extent:
            value = 0.0
    return value


def forward_vector(heading: float) -> tuple[float, float]:
    return math.cos(heading), math.sin(heading)
