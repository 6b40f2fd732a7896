"""Generic feed-forward neural network used as an agent's brain.

A network is a list of layers. Each layer is a 2D array with one row per node;
column 0 holds the node's bias and the remaining columns line up with the
previous layer's outputs (the raw inputs for the first computed layer).
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

DEFAULT_WEIGHT_RANGE = 0.5


class NetworkConstructionError(ValueError):
    """Raised when a network cannot be built from the given topology or weights."""


class TooFewLayersError(NetworkConstructionError):
    def __init__(self, count: int):
        super().__init__(
            f"neural network must have at least an input layer and output layer (got {count} layer sizes)"
        )
        self.count = count


class EmptyLayerError(NetworkConstructionError):
    def __init__(self, layer_index: int):
        super().__init__(f"each layer of neural network must have at least one node (layer {layer_index} is empty)")
        self.layer_index = layer_index


class InputSizeMismatchError(ValueError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"network expects {expected} inputs, got {actual}")
        self.expected = expected
        self.actual = actual


def _sigmoid(values):
    # tanh form, stays finite for any input magnitude
    x = np.asarray(values, dtype=np.float64)
    result = 0.5 * (1.0 + np.tanh(0.5 * x))
    return result if result.ndim else float(result)


class Activation(str, Enum):
    SIGMOID = "sigmoid"

    def perform(self, value):
        return _TRANSFORMS[self](value)

    @classmethod
    def from_name(cls, name: str) -> "Activation":
        try:
            return cls(name.strip().lower())
        except ValueError:
            known = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown activation: {name!r} (expected one of: {known})") from None


_TRANSFORMS = {
    Activation.SIGMOID: _sigmoid,
}


def _is_finite_number(value) -> bool:
    return isinstance(value, numbers.Real) and math.isfinite(value)


def _as_layer(raw, index: int, prev_size: int) -> np.ndarray:
    try:
        layer = np.asarray(raw)
    except ValueError as exc:
        raise NetworkConstructionError(f"layer {index} is ragged: {exc}") from None
    if layer.size == 0:
        raise EmptyLayerError(index)
    if layer.ndim != 2 or layer.shape[1] != prev_size + 1:
        raise NetworkConstructionError(
            f"layer {index} has shape {layer.shape}, expected (nodes, {prev_size + 1})"
        )
    if layer.dtype == object:
        if not all(_is_finite_number(weight) for weight in layer.flat):
            raise NetworkConstructionError(f"layer {index} holds a non-numeric or non-finite weight")
    elif not np.issubdtype(layer.dtype, np.number) or not np.all(np.isfinite(layer)):
        raise NetworkConstructionError(f"layer {index} holds a non-numeric or non-finite weight")
    return layer


@dataclass(frozen=True, eq=False)
class NeuralNetwork:
    layers: List[np.ndarray]
    num_inputs: int

    def __post_init__(self) -> None:
        if self.num_inputs < 1:
            raise EmptyLayerError(0)
        if len(self.layers) == 0:
            raise TooFewLayersError(1)
        layers = []
        prev_size = self.num_inputs
        for index, raw in enumerate(self.layers, start=1):
            layer = _as_layer(raw, index, prev_size)
            layers.append(layer)
            prev_size = layer.shape[0]
        object.__setattr__(self, "layers", layers)

    @property
    def dtype(self) -> np.dtype:
        return self.layers[0].dtype

    @property
    def layer_sizes(self) -> List[int]:
        return [self.num_inputs] + [int(layer.shape[0]) for layer in self.layers]


def _validate_layer_sizes(layer_sizes: Sequence[int]) -> List[int]:
    sizes = [int(size) for size in layer_sizes]
    if len(sizes) < 2:
        raise TooFewLayersError(len(sizes))
    for index, size in enumerate(sizes):
        if size < 1:
            raise EmptyLayerError(index)
    return sizes


def _layer_shapes(sizes: List[int]) -> List[tuple[int, int]]:
    return [(size, prev + 1) for prev, size in zip(sizes[:-1], sizes[1:])]


def construct_random(
    layer_sizes: Sequence[int],
    seed=None,
    weight_range: float = DEFAULT_WEIGHT_RANGE,
    dtype=np.float64,
) -> NeuralNetwork:
    """Build a network with every weight (bias included) drawn uniformly from
    ``[-weight_range, weight_range]``.

    The first size is the input count, the last the output count. ``seed`` is
    anything ``np.random.default_rng`` accepts (an int or a ``Generator``); a
    fresh unseeded generator is used when omitted. ``dtype=object`` keeps the
    weights as Python numbers.
    """
    sizes = _validate_layer_sizes(layer_sizes)
    generator = np.random.default_rng(seed)
    bound = abs(weight_range)
    layers = [generator.uniform(-bound, bound, size=shape).astype(dtype) for shape in _layer_shapes(sizes)]
    return NeuralNetwork(layers=layers, num_inputs=sizes[0])


def construct_filled(layer_sizes: Sequence[int], value: float, dtype=None) -> NeuralNetwork:
    sizes = _validate_layer_sizes(layer_sizes)
    layers = [np.full(shape, value, dtype=dtype) for shape in _layer_shapes(sizes)]
    return NeuralNetwork(layers=layers, num_inputs=sizes[0])


def evaluate_layers(network: NeuralNetwork, activation, inputs: Sequence[float]) -> List[list]:
    """Run the forward pass and return the inputs followed by every layer's outputs."""
    if len(inputs) != network.num_inputs:
        raise InputSizeMismatchError(network.num_inputs, len(inputs))
    previous = np.asarray(inputs, dtype=network.dtype)
    results: List[list] = [list(inputs)]
    for layer in network.layers:
        previous = np.asarray(activation.perform(layer[:, 0] + layer[:, 1:] @ previous))
        results.append(previous.tolist())
    return results


def evaluate(network: NeuralNetwork, activation, inputs: Sequence[float]) -> list:
    return evaluate_layers(network, activation, inputs)[-1]


def resolve_activation(activation: Optional[object]) -> object:
    if activation is None:
        return Activation.SIGMOID
    if isinstance(activation, str):
        return Activation.from_name(activation)
    return activation
