import numpy as np
import pytest

from sgdnet.core.activations import index_of_highest, sigmoid, sigmoid_prime
from sgdnet.core.errors import SizeMismatch
from sgdnet.core.linalg import (
    add_in_place,
    dot,
    matmul,
    multiply_in_place,
    outer,
    transpose,
)


def test_sigmoid_range_and_midpoint():
    xs = np.linspace(-30.0, 30.0, 121)
    values = sigmoid(xs)
    assert np.all(values > 0.0) and np.all(values < 1.0)
    assert sigmoid(0.0) == 0.5
    assert isinstance(sigmoid(1.0), float)


def test_sigmoid_prime_matches_definition_and_peaks_at_zero():
    xs = np.linspace(-6.0, 6.0, 49)
    s = sigmoid(xs)
    assert np.allclose(sigmoid_prime(xs), s * (1.0 - s))
    assert np.allclose(sigmoid_prime(xs), sigmoid_prime(-xs))
    assert sigmoid_prime(0.0) == 0.25
    assert np.all(sigmoid_prime(xs) <= 0.25)


def test_index_of_highest_first_maximum_wins():
    assert index_of_highest(np.array([0.5, 0.5, 0.2])) == 0
    assert index_of_highest(np.array([0.1, 0.7, 0.7, 0.2])) == 1
    with pytest.raises(SizeMismatch):
        index_of_highest(np.array([]))


def test_dot_identity_shaped():
    assert np.array_equal(dot([[3.0]], [4.0]), np.array([12.0]))


def test_dot_rejects_incompatible_shapes():
    with pytest.raises(SizeMismatch):
        dot(np.ones((2, 3)), np.ones(2))
    with pytest.raises(SizeMismatch):
        dot(np.ones(3), np.ones(3))


def test_matmul_outer_transpose():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    assert np.array_equal(matmul(a, np.eye(2)), a)
    with pytest.raises(SizeMismatch):
        matmul(a, np.ones((3, 1)))
    assert np.array_equal(outer([1.0, 2.0], [3.0, 4.0, 5.0]), [[3, 4, 5], [6, 8, 10]])
    t = transpose(np.arange(6.0).reshape(2, 3))
    assert t.shape == (3, 2)
    assert t[2, 1] == 5.0


def test_in_place_helpers_never_broadcast():
    a = np.array([1.0, 2.0])
    add_in_place(a, np.array([0.5, 0.5]))
    multiply_in_place(a, np.array([2.0, 3.0]))
    assert np.array_equal(a, [3.0, 7.5])
    with pytest.raises(SizeMismatch):
        add_in_place(a, np.array([1.0]))
    with pytest.raises(SizeMismatch):
        multiply_in_place(np.ones((2, 2)), np.ones(2))
