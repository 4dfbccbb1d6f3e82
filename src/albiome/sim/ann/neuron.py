from __future__ import annotations

from typing import Sequence

import numpy as np

from ...errors import InvalidConfiguration, ShapeMismatchError
from ...rng import SimulationRng


class Neuron:
    """Weighted sum of its inputs squashed through ``tanh``.

    The weight vector is fixed for the neuron's lifetime.
    """

    __slots__ = ("_weights",)

    def __init__(self, weights: Sequence[float]):
        try:
            vector = np.array(weights, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Neuron weights must be numbers, got {weights!r}") from exc
        if vector.ndim != 1 or vector.size == 0:
            raise InvalidConfiguration(f"Neuron weights must be a non-empty flat sequence, got {weights!r}")
        if not np.all(np.isfinite(vector)):
            raise InvalidConfiguration(f"Neuron weights must be finite, got {weights!r}")
        vector.flags.writeable = False
        self._weights = vector

    @classmethod
    def random(cls, arity: int, rng: SimulationRng) -> "Neuron":
        if int(arity) != arity or arity < 1:
            raise InvalidConfiguration(f"Neuron arity must be a positive integer, got {arity!r}")
        return cls([rng.next_range(-1.0, 1.0) for _ in range(int(arity))])

    @property
    def arity(self) -> int:
        return int(self._weights.size)

    @property
    def weights(self) -> list[float]:
        return self._weights.tolist()

    def activate(self, inputs: Sequence[float]) -> float:
        values = np.asarray(inputs, dtype=np.float64)
        if values.shape != self._weights.shape:
            raise ShapeMismatchError(
                f"Neuron expects {self._weights.size} inputs, got {values.size}"
            )
        return float(np.tanh(np.dot(self._weights, values)))
