"""Pure in-memory synthetic datasets."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .registry import DatasetSpec, register_dataset
from .sources import ArrayDataSource, SubsetDataSource

_XOR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
_XOR_LABELS = np.array([0, 1, 1, 0])


def _xor_factory(
    repeat: int = 25,
    *,
    cache_dir: str | Path | None = None,
    **_: object,
) -> DatasetSpec:
    inputs = np.tile(_XOR_INPUTS, (repeat, 1))
    labels = np.tile(_XOR_LABELS, repeat)
    train = ArrayDataSource.from_labels(inputs, labels, num_classes=2)
    test = ArrayDataSource.from_labels(_XOR_INPUTS, _XOR_LABELS, num_classes=2)
    return DatasetSpec(
        name="xor",
        train=train,
        test=test,
        input_size=2,
        output_size=2,
        provenance={"type": "synthetic", "repeat": repeat},
    )


def make_blobs(
    n_points: int, num_classes: int, seed: int, spread: float = 0.15
) -> tuple[np.ndarray, np.ndarray]:
    """Gaussian clusters with centres spaced evenly on a circle in ``[0, 1]^2``."""

    rng = np.random.default_rng(seed)
    angles = 2.0 * np.pi * np.arange(num_classes) / num_classes
    centres = 0.5 + 0.35 * np.stack([np.cos(angles), np.sin(angles)], axis=1)
    labels = np.arange(n_points) % num_classes
    inputs = centres[labels] + spread * rng.standard_normal((n_points, 2))
    order = rng.permutation(n_points)
    return inputs[order], labels[order]


def _blobs_factory(
    n_points: int = 300,
    num_classes: int = 3,
    seed: int = 0,
    test_split: float = 0.2,
    *,
    cache_dir: str | Path | None = None,
    **_: object,
) -> DatasetSpec:
    if not 0 <= test_split < 1:
        raise ValueError("test_split must be in [0, 1)")
    inputs, labels = make_blobs(n_points, num_classes, seed)
    source = ArrayDataSource.from_labels(inputs, labels, num_classes=num_classes)
    n_test = int(round(n_points * test_split))
    n_train = n_points - n_test
    train = SubsetDataSource(source, 0, n_train)
    test = SubsetDataSource(source, n_train, n_test) if n_test else None
    return DatasetSpec(
        name="blobs",
        train=train,
        test=test,
        input_size=2,
        output_size=num_classes,
        provenance={
            "type": "synthetic",
            "n_points": n_points,
            "num_classes": num_classes,
            "seed": seed,
            "test_split": test_split,
        },
    )


register_dataset("xor", _xor_factory)
register_dataset("blobs", _blobs_factory)
