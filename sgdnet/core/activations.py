"""Activation utilities for sgdnet."""

from __future__ import annotations

import numpy as np

from .errors import SizeMismatch
from .types import Array


def sigmoid(x):
    """Return ``1 / (1 + exp(-x))`` for a scalar or elementwise for an array."""

    with np.errstate(over="ignore"):
        if np.ndim(x) == 0:
            return float(1.0 / (1.0 + np.exp(-float(x))))
        return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


def sigmoid_prime(x):
    """Derivative of :func:`sigmoid`, ``s * (1 - s)``."""

    s = sigmoid(x)
    return s * (1.0 - s)


def index_of_highest(values: Array) -> int:
    """Return the index of the largest value; the first maximum wins on ties."""

    arr = np.asarray(values)
    if arr.ndim != 1 or arr.size == 0:
        raise SizeMismatch(f"Expected a non-empty vector, got shape {arr.shape}")
    return int(np.argmax(arr))
