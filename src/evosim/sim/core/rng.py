from __future__ import annotations

import math
import random

from pygame.math import Vector2

_STREAM_MASK = 0xFFFFFFFFFFFFFFFF


def derive_stream_seed(seed: int, salt: int) -> int:
    return (int(seed) ^ int(salt)) & _STREAM_MASK


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_seed(self) -> int:
        return self._random.getrandbits(63)

    def next_angle(self) -> float:
        # uniform() may return the upper bound, headings live in [0, 2pi)
        return self._random.uniform(0.0, 2.0 * math.pi) % (2.0 * math.pi)

    def next_position(self, width: float, height: float) -> Vector2:
        return Vector2(
            self._random.uniform(0.0, width) % width,
            self._random.uniform(0.0, height) % height,
        )
