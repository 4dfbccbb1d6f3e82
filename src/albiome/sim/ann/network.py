from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ...errors import InvalidConfiguration, ShapeMismatchError
from ...rng import SimulationRng
from .neuron import Neuron

WeightMatrix = Sequence[Sequence[float]]


class Network:
    """Fixed-weight feed-forward network used for inference only.

    ``layer_sizes`` lists neuron counts from the input layer to the output
    layer. Input neurons take a single value each, acting as a per-input
    gain; every later neuron reads the whole output vector of the layer
    before it. ``weights`` may supply one matrix per layer (or ``None`` for a
    random layer), one row per neuron.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        weights: Optional[Sequence[Optional[WeightMatrix]]] = None,
        rng: Optional[SimulationRng] = None,
    ):
        sizes = list(layer_sizes)
        if len(sizes) < 2:
            raise InvalidConfiguration(f"Network needs an input and an output layer, got sizes {sizes!r}")
        for size in sizes:
            if isinstance(size, bool) or int(size) != size or size < 1:
                raise InvalidConfiguration(f"Layer sizes must be positive integers, got {sizes!r}")
        if weights is not None and len(weights) != len(sizes):
            raise InvalidConfiguration(
                f"Expected weights for {len(sizes)} layers, got {len(weights)}"
            )

        rng = rng or SimulationRng()
        self._layers: List[List[Neuron]] = []
        for index, size in enumerate(sizes):
            arity = 1 if index == 0 else int(sizes[index - 1])
            matrix = weights[index] if weights is not None else None
            self._layers.append(self._build_layer(index, int(size), arity, matrix, rng))

    @staticmethod
    def _build_layer(
        index: int, size: int, arity: int, matrix: Optional[WeightMatrix], rng: SimulationRng
    ) -> List[Neuron]:
        if matrix is None:
            return [Neuron.random(arity, rng) for _ in range(size)]
        if len(matrix) != size:
            raise InvalidConfiguration(f"Layer {index} has {size} neurons but {len(matrix)} weight rows")
        layer = []
        for row in matrix:
            if len(row) != arity:
                raise InvalidConfiguration(
                    f"Layer {index} weight rows must hold {arity} values, got {len(row)}"
                )
            layer.append(Neuron(row))
        return layer

    @property
    def layer_sizes(self) -> List[int]:
        return [len(layer) for layer in self._layers]

    @property
    def input_size(self) -> int:
        return len(self._layers[0])

    @property
    def output_size(self) -> int:
        return len(self._layers[-1])

    @property
    def hidden_layer_count(self) -> int:
        return len(self._layers) - 2

    def predict(self, inputs: Sequence[float]) -> List[float]:
        if len(inputs) != self.input_size:
            raise ShapeMismatchError(
                f"Network expects {self.input_size} inputs, got {len(inputs)}"
            )
        values = [neuron.activate([value]) for neuron, value in zip(self._layers[0], inputs)]
        for layer in self._layers[1:]:
            values = [neuron.activate(values) for neuron in layer]
        return values

    def to_layers(self) -> List[Dict[str, Any]]:
        return [
            {"neurons": len(layer), "weights": [neuron.weights for neuron in layer]}
            for layer in self._layers
        ]

    @classmethod
    def from_layers(cls, layers: Sequence[Dict[str, Any]]) -> "Network":
        """Rebuild from ``to_layers()`` output.

        Each entry must carry both keys; ``"weights": None`` asks for a random
        layer, a missing ``"weights"`` key is an error.
        """
        try:
            sizes = [layer["neurons"] for layer in layers]
            weights = [layer["weights"] for layer in layers]
        except (KeyError, TypeError) as exc:
            raise InvalidConfiguration("Every layer entry needs 'neurons' and 'weights' keys") from exc
        return cls(sizes, weights)

    def to_dict(self) -> Dict[str, Any]:
        return {"layers": self.to_layers()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Network":
        if "layers" not in data:
            raise InvalidConfiguration("Network description needs a 'layers' list")
        return cls.from_layers(data["layers"])

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "Network":
        return cls.from_dict(json.loads(payload))
