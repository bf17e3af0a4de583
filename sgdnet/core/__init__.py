"""Core numerical primitives for sgdnet."""

from . import activations, errors, layers, linalg, network, types

__all__ = ["activations", "errors", "layers", "linalg", "network", "types"]
