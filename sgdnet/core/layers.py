"""Layer primitives: the input layer and densely connected sigmoid layers."""

from __future__ import annotations

import numbers
from typing import Protocol

import numpy as np

from .activations import sigmoid
from .errors import InvalidSize, OutOfRange, SizeMismatch
from .linalg import add_in_place, dot
from .types import Array


class Layer(Protocol):
    """Anything producing a fixed-size vector of real-valued outputs."""

    size: int

    def outputs(self) -> Array:
        """Return the live output vector of length ``size``."""


def is_count(value: object) -> bool:
    """True for integral values other than ``bool``."""

    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_size(size: int) -> int:
    if not is_count(size) or size <= 0:
        raise InvalidSize(f"Layer size must be > 0, got {size!r}")
    return int(size)


class InputLayer:
    """Holds the raw input values fed to the first dense layer."""

    def __init__(self, size: int) -> None:
        self.size = check_size(size)
        self._values = np.zeros(self.size, dtype=np.float64)

    def outputs(self) -> Array:
        return self._values

    def output(self, index: int) -> float:
        return float(self._values[_check_index(index, self.size)])

    def set_value(self, index: int, value: float) -> None:
        self._values[_check_index(index, self.size)] = value

    def set_values(self, values: Array) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self.size,):
            raise SizeMismatch(
                f"Input layer expects {self.size} values, got shape {values.shape}"
            )
        self._values[...] = values

    def __repr__(self) -> str:
        return f"InputLayer(size={self.size})"


class DenseLayer:
    """Fully connected layer computing ``sigmoid(W @ inputs + b)``.

    ``weights``, ``biases`` and ``outputs()`` return the live arrays rather
    than copies. Callers must treat them as read-only except for the
    in-place parameter update performed during training; a returned
    ``outputs()`` vector is overwritten by the next :meth:`forward`.
    """

    def __init__(self, predecessor: Layer, size: int) -> None:
        if predecessor is None:
            raise TypeError("DenseLayer requires a predecessor layer")
        self.predecessor = predecessor
        self.size = check_size(size)
        self.input_size = int(predecessor.size)
        self._weights = self.zero_weights()
        self._biases = self.zero_biases()
        self._outputs = np.zeros(self.size, dtype=np.float64)

    def init(self, rng: np.random.Generator) -> None:
        """Draw every weight and bias from a standard normal distribution."""

        self._weights[...] = rng.standard_normal(self._weights.shape)
        self._biases[...] = rng.standard_normal(self._biases.shape)

    def forward(self) -> Array:
        """Recompute the outputs from the predecessor's current outputs."""

        z = dot(self._weights, self.predecessor.outputs())
        add_in_place(z, self._biases)
        self._outputs[...] = sigmoid(z)
        return self._outputs

    def outputs(self) -> Array:
        return self._outputs

    def output(self, index: int) -> float:
        return float(self._outputs[_check_index(index, self.size)])

    @property
    def weights(self) -> Array:
        return self._weights

    @property
    def biases(self) -> Array:
        return self._biases

    def set_weights(self, weights: Array) -> None:
        weights = np.asarray(weights, dtype=np.float64)
        if weights.shape != self._weights.shape:
            raise SizeMismatch(
                f"Weights must have shape {self._weights.shape}, got {weights.shape}"
            )
        self._weights[...] = weights

    def set_biases(self, biases: Array) -> None:
        biases = np.asarray(biases, dtype=np.float64)
        if biases.shape != self._biases.shape:
            raise SizeMismatch(
                f"Biases must have shape {self._biases.shape}, got {biases.shape}"
            )
        self._biases[...] = biases

    def zero_weights(self) -> Array:
        return np.zeros((self.size, self.input_size), dtype=np.float64)

    def zero_biases(self) -> Array:
        return np.zeros(self.size, dtype=np.float64)

    def parameter_count(self) -> int:
        return int(self._weights.size + self._biases.size)

    def __repr__(self) -> str:
        return f"DenseLayer(input_size={self.input_size}, size={self.size})"


def _check_index(index: int, size: int) -> int:
    if not 0 <= index < size:
        raise OutOfRange(f"Index {index} out of range for layer of size {size}")
    return index


__all__ = ["Layer", "InputLayer", "DenseLayer", "check_size", "is_count"]
