from __future__ import annotations

from fractions import Fraction

import numpy as np
import pytest
from pytest import approx

from evosim.sim.core.network import (
    Activation,
    EmptyLayerError,
    InputSizeMismatchError,
    NetworkConstructionError,
    NeuralNetwork,
    TooFewLayersError,
    construct_filled,
    construct_random,
    evaluate,
    evaluate_layers,
)


class _Identity:
    def perform(self, value):
        return value


@pytest.mark.parametrize("sizes", [[], [3], [1]])
def test_construct_rejects_fewer_than_two_layers(sizes):
    with pytest.raises(TooFewLayersError):
        construct_random(sizes)


@pytest.mark.parametrize("sizes", [[0, 2], [2, 0], [3, 4, 0, 1], [0]])
def test_construct_rejects_empty_layers(sizes):
    expected = TooFewLayersError if len(sizes) < 2 else EmptyLayerError
    with pytest.raises(expected):
        construct_random(sizes)


def test_construction_errors_are_value_errors():
    assert issubclass(TooFewLayersError, NetworkConstructionError)
    assert issubclass(EmptyLayerError, NetworkConstructionError)
    assert issubclass(NetworkConstructionError, ValueError)


@pytest.mark.parametrize("sizes", [[1, 1], [2, 3, 2], [4, 6, 2], [5, 1, 1, 3]])
def test_random_network_shape_and_weight_range(sizes):
    network = construct_random(sizes, 5)

    assert network.num_inputs == sizes[0]
    assert network.layer_sizes == sizes
    assert len(network.layers) == len(sizes) - 1
    for layer, prev, size in zip(network.layers, sizes[:-1], sizes[1:]):
        assert layer.shape == (size, prev + 1)
        assert np.all(np.abs(layer) <= 0.5)


def test_random_network_respects_weight_range_and_seed():
    first = construct_random([3, 4, 2], 9, weight_range=0.1)
    second = construct_random([3, 4, 2], 9, weight_range=0.1)

    assert all(np.array_equal(a, b) for a, b in zip(first.layers, second.layers))
    assert all(np.all(np.abs(layer) <= 0.1) for layer in first.layers)


def test_random_network_accepts_a_generator():
    generator = np.random.default_rng(4)
    first = construct_random([2, 2], generator)
    second = construct_random([2, 2], generator)

    assert not np.array_equal(first.layers[0], second.layers[0])


@pytest.mark.parametrize("sizes", [[2, 3, 2], [4, 1], [3, 5, 5, 7]])
def test_evaluate_returns_one_value_per_output_node(sizes):
    network = construct_random(sizes, 1)
    outputs = evaluate(network, Activation.SIGMOID, [0.3] * sizes[0])

    assert len(outputs) == sizes[-1]
    assert all(0.0 < value < 1.0 for value in outputs)


def test_evaluate_is_deterministic():
    network = construct_random([4, 6, 2], 2)
    inputs = [0.1, -0.7, 1.0, 0.25]

    assert evaluate(network, Activation.SIGMOID, inputs) == evaluate(network, Activation.SIGMOID, inputs)


@pytest.mark.parametrize("inputs", [[0.0, 0.0], [1.0, -1.0], [123.0, -4.5]])
def test_zero_weights_give_sigmoid_of_zero(inputs):
    network = construct_filled([2, 3, 2], 0.0)

    assert evaluate(network, Activation.SIGMOID, inputs) == [0.5, 0.5]


def test_evaluate_rejects_wrong_input_count():
    network = construct_filled([2, 3, 2], 0.0)

    with pytest.raises(InputSizeMismatchError) as excinfo:
        evaluate(network, Activation.SIGMOID, [1.0, 2.0, 3.0])

    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 3


def test_bias_comes_first_and_weights_align_with_inputs():
    network = NeuralNetwork(layers=[[[0.5, 1.0, -1.0]]], num_inputs=2)

    assert evaluate(network, _Identity(), [2.0, 1.0]) == [approx(1.5)]
    assert evaluate(network, Activation.SIGMOID, [2.0, 1.0]) == [approx(Activation.SIGMOID.perform(1.5))]


def test_evaluate_layers_exposes_every_layer():
    network = NeuralNetwork(
        layers=[
            [[1.0, 1.0], [0.0, 2.0]],
            [[0.0, 1.0, 1.0]],
        ],
        num_inputs=1,
    )

    layers = evaluate_layers(network, _Identity(), [3.0])

    assert layers == [[3.0], [4.0, 6.0], [10.0]]


def test_network_rejects_malformed_nodes():
    with pytest.raises(NetworkConstructionError):
        NeuralNetwork(layers=[[[0.0, 1.0]]], num_inputs=2)
    with pytest.raises(EmptyLayerError):
        NeuralNetwork(layers=[[]], num_inputs=2)


def test_sigmoid_handles_extreme_values():
    assert Activation.SIGMOID.perform(0.0) == 0.5
    assert Activation.SIGMOID.perform(1000.0) == approx(1.0)
    assert Activation.SIGMOID.perform(-1000.0) == approx(0.0)


def test_activation_lookup_by_name():
    assert Activation.from_name("Sigmoid") is Activation.SIGMOID
    with pytest.raises(ValueError):
        Activation.from_name("relu")


def test_sigmoid_is_applied_elementwise():
    values = Activation.SIGMOID.perform(np.array([-1000.0, 0.0, 1000.0]))

    assert values.tolist() == approx([0.0, 0.5, 1.0])


def test_engine_works_with_exact_fractions():
    network = construct_filled([2, 2, 1], Fraction(1, 2), dtype=object)

    outputs = evaluate(network, _Identity(), [Fraction(1, 3), Fraction(2, 7)])

    assert isinstance(outputs[0], Fraction)
    # hidden = 1/2 + 1/2 * (1/3 + 2/7), output = 1/2 + 1/2 * 2 * hidden
    assert outputs[0] == Fraction(1, 2) + 2 * Fraction(1, 2) * (Fraction(1, 2) + Fraction(1, 2) * Fraction(13, 21))


def test_random_weights_can_be_kept_as_python_numbers():
    network = construct_random([2, 3, 1], 8, dtype=object)

    assert network.dtype == object
    assert all(isinstance(weight, float) for layer in network.layers for weight in layer.flat)
    assert 0.0 < evaluate(network, Activation.SIGMOID, [0.2, 0.4])[0] < 1.0


@pytest.mark.parametrize(
    "weights",
    [
        [[None, 1.0, 1.0]],
        [[float("nan"), 1.0, 1.0]],
        [[0.0, float("inf"), 1.0]],
        [["bias", 1.0, 1.0]],
    ],
)
def test_network_rejects_non_numeric_or_non_finite_weights(weights):
    with pytest.raises(NetworkConstructionError):
        NeuralNetwork(layers=[weights], num_inputs=2)


def test_network_rejects_ragged_layers():
    with pytest.raises(NetworkConstructionError):
        NeuralNetwork(layers=[[[0.0, 1.0, 1.0], [0.0, 1.0]]], num_inputs=2)
