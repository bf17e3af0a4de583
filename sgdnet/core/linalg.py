"""Shape-checked linear algebra helpers used by backpropagation.

Every helper validates its operands explicitly and raises
:class:`~sgdnet.core.errors.SizeMismatch` instead of relying on numpy
broadcasting, so a wrongly shaped gradient can never be silently stretched.
"""

from __future__ import annotations

import numpy as np

from .errors import SizeMismatch, size_mismatch
from .types import Array


def _matrix(a: Array, name: str) -> Array:
    a = np.asarray(a, dtype=np.float64)
    if a.ndim != 2:
        raise SizeMismatch(f"{name} must be a matrix, got shape {a.shape}")
    return a


def _vector(a: Array, name: str) -> Array:
    a = np.asarray(a, dtype=np.float64)
    if a.ndim != 1:
        raise SizeMismatch(f"{name} must be a vector, got shape {a.shape}")
    return a


def dot(matrix: Array, vector: Array) -> Array:
    """Matrix-vector product returning a new vector of length ``rows``."""

    matrix = _matrix(matrix, "matrix")
    vector = _vector(vector, "vector")
    if matrix.shape[1] != vector.shape[0]:
        raise size_mismatch(matrix.shape[1], vector.shape[0])
    return matrix @ vector


def matmul(a: Array, b: Array) -> Array:
    """Matrix-matrix product."""

    a = _matrix(a, "a")
    b = _matrix(b, "b")
    if a.shape[1] != b.shape[0]:
        raise SizeMismatch(f"Arrays must be compatible ({a.shape[1]} != {b.shape[0]})")
    return a @ b


def outer(a: Array, b: Array) -> Array:
    """Outer product ``a ⊗ b`` with shape ``(len(a), len(b))``."""

    return np.outer(_vector(a, "a"), _vector(b, "b"))


def transpose(matrix: Array) -> Array:
    """Return a transposed copy of ``matrix``."""

    return np.ascontiguousarray(_matrix(matrix, "matrix").T)


def add_in_place(a: Array, b: Array) -> Array:
    """``a += b`` elementwise; shapes must match exactly."""

    if np.shape(a) != np.shape(b):
        raise size_mismatch(np.shape(a), np.shape(b))
    a += b
    return a


def multiply_in_place(a: Array, b: Array) -> Array:
    """``a *= b`` elementwise; shapes must match exactly."""

    if np.shape(a) != np.shape(b):
        raise size_mismatch(np.shape(a), np.shape(b))
    a *= b
    return a


__all__ = ["dot", "matmul", "outer", "transpose", "add_in_place", "multiply_in_place"]
