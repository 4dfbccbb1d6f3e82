from __future__ import annotations

import math
import random
from typing import Optional


class SimulationRng:
    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_sign(self) -> int:
        return 1 if self._random.random() > 0.5 else -1

    def next_signed(self) -> float:
        """Uniform magnitude in [0, 1) with an independently chosen sign."""
        sign = self.next_sign()
        return sign * self._random.random()

    def next_offset(self, spread: float) -> float:
        return self.next_sign() * spread * self._random.random()

    def next_angle(self) -> float:
        return self._random.random() * 2 * math.pi
