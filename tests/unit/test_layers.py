import numpy as np
import pytest

from sgdnet.core.errors import InvalidSize, OutOfRange, SizeMismatch
from sgdnet.core.layers import DenseLayer, InputLayer


def test_input_layer_set_values_and_bounds():
    layer = InputLayer(3)
    layer.set_values([0.1, 0.2, 0.3])
    layer.set_value(2, 0.9)
    assert np.allclose(layer.outputs(), [0.1, 0.2, 0.9])
    assert layer.output(0) == pytest.approx(0.1)
    with pytest.raises(OutOfRange):
        layer.set_value(3, 1.0)
    with pytest.raises(OutOfRange):
        layer.set_value(-1, 1.0)
    with pytest.raises(SizeMismatch):
        layer.set_values([1.0, 2.0])


def test_layer_sizes_must_be_positive():
    with pytest.raises(InvalidSize):
        InputLayer(0)
    with pytest.raises(InvalidSize):
        DenseLayer(InputLayer(2), -1)


def test_dense_layer_starts_at_zero_and_init_is_reproducible():
    layer = DenseLayer(InputLayer(4), 3)
    assert layer.weights.shape == (3, 4)
    assert layer.biases.shape == (3,)
    assert not layer.weights.any() and not layer.biases.any()

    other = DenseLayer(InputLayer(4), 3)
    layer.init(np.random.default_rng(5))
    other.init(np.random.default_rng(5))
    assert np.array_equal(layer.weights, other.weights)
    assert np.array_equal(layer.biases, other.biases)
    assert layer.weights.std() > 0


def test_dense_forward_uses_predecessor_outputs():
    inputs = InputLayer(2)
    layer = DenseLayer(inputs, 1)
    layer.set_weights([[2.0, -1.0]])
    layer.set_biases([0.5])
    inputs.set_values([1.0, 3.0])
    out = layer.forward()
    z = 2.0 * 1.0 - 1.0 * 3.0 + 0.5
    assert out[0] == pytest.approx(1.0 / (1.0 + np.exp(-z)))
    assert out is layer.outputs()


def test_dense_parameter_arrays_are_live_and_shape_checked():
    layer = DenseLayer(InputLayer(2), 2)
    weights = layer.weights
    layer.set_weights(np.ones((2, 2)))
    assert weights is layer.weights
    assert weights.sum() == 4.0
    with pytest.raises(SizeMismatch):
        layer.set_weights(np.ones((2, 3)))
    with pytest.raises(SizeMismatch):
        layer.set_biases(np.ones(3))
    assert layer.zero_weights().shape == (2, 2)
    assert layer.zero_biases().shape == (2,)
    assert layer.zero_weights() is not layer.zero_weights()


@pytest.mark.parametrize("size", [float("nan"), 2.0, "3", None, True])
def test_layer_sizes_must_be_integers(size):
    with pytest.raises(InvalidSize):
        InputLayer(size)
    with pytest.raises(InvalidSize):
        DenseLayer(InputLayer(2), size)
