"""Training data sources and the zero-copy views used by SGD."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

import numpy as np

from ..core.errors import InvalidRange, OutOfRange, SizeMismatch
from ..core.types import Array, TrainingSample


class TrainingDataSource(ABC):
    """An indexable, sized collection of :class:`TrainingSample` objects."""

    @abstractmethod
    def size(self) -> int:
        """Return the number of samples."""

    @abstractmethod
    def get(self, index: int) -> TrainingSample:
        """Return sample ``index``; raise :class:`OutOfRange` outside ``[0, size)``."""

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> TrainingSample:
        return self.get(index)

    def __iter__(self) -> Iterator[TrainingSample]:
        for index in range(self.size()):
            yield self.get(index)

    def _check_index(self, index: int) -> int:
        size = self.size()
        if not 0 <= index < size:
            raise OutOfRange(f"Index {index} not in range [0, {size})")
        return index


class ArrayDataSource(TrainingDataSource):
    """In-memory source over row-aligned ``inputs`` and ``outputs`` arrays."""

    def __init__(self, inputs: Array, outputs: Array, labels: Array | None = None) -> None:
        inputs = np.asarray(inputs, dtype=np.float64)
        outputs = np.asarray(outputs, dtype=np.float64)
        if inputs.ndim != 2 or outputs.ndim != 2:
            raise SizeMismatch("inputs and outputs must be 2-D arrays")
        if inputs.shape[0] != outputs.shape[0]:
            raise SizeMismatch(
                f"inputs has {inputs.shape[0]} rows but outputs has {outputs.shape[0]}"
            )
        if labels is not None:
            labels = np.asarray(labels, dtype=np.int64).reshape(-1)
            if labels.shape[0] != inputs.shape[0]:
                raise SizeMismatch(
                    f"labels has {labels.shape[0]} entries but inputs has {inputs.shape[0]}"
                )
        self.inputs = inputs
        self.outputs = outputs
        self.labels = labels

    @classmethod
    def from_labels(cls, inputs: Array, labels: Array, num_classes: int) -> "ArrayDataSource":
        """Build a source with one-hot expected outputs from integer ``labels``."""

        labels = np.asarray(labels, dtype=np.int64).reshape(-1)
        targets = np.eye(num_classes, dtype=np.float64)[labels]
        return cls(inputs, targets, labels)

    def size(self) -> int:
        return int(self.inputs.shape[0])

    def get(self, index: int) -> TrainingSample:
        self._check_index(index)
        label = int(self.labels[index]) if self.labels is not None else None
        return TrainingSample(self.inputs[index], self.outputs[index], label)


class ShuffledDataSource(TrainingDataSource):
    """Random-permutation view; only the index array is ever reordered."""

    def __init__(self, source: TrainingDataSource) -> None:
        if source is None:
            raise TypeError("ShuffledDataSource requires a source")
        self.source = source
        self._index = np.arange(source.size(), dtype=np.int64)

    def shuffle(self, rng: np.random.Generator) -> None:
        rng.shuffle(self._index)

    @property
    def permutation(self) -> Array:
        return self._index

    def size(self) -> int:
        return int(self._index.shape[0])

    def get(self, index: int) -> TrainingSample:
        self._check_index(index)
        return self.source.get(int(self._index[index]))


class SubsetDataSource(TrainingDataSource):
    """Contiguous ``[start, start + length)`` view over another source."""

    def __init__(self, source: TrainingDataSource, start: int, length: int) -> None:
        if source is None:
            raise TypeError("SubsetDataSource requires a source")
        if start < 0 or length <= 0 or start + length > source.size():
            raise InvalidRange(
                f"start={start} / length={length} do not describe a valid subset "
                f"of a source with {source.size()} samples"
            )
        self.source = source
        self.start = int(start)
        self.length = int(length)

    def size(self) -> int:
        return self.length

    def get(self, index: int) -> TrainingSample:
        self._check_index(index)
        return self.source.get(self.start + index)


__all__ = [
    "TrainingDataSource",
    "ArrayDataSource",
    "ShuffledDataSource",
    "SubsetDataSource",
]
