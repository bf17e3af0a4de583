"""Reader and writer for the MNIST IDX binary format.

An IDX file starts with a big-endian 32-bit magic number followed by one
32-bit dimension per axis (image count, rows, columns for images; label
count for labels) and then the raw unsigned bytes.
"""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import BinaryIO

import numpy as np

from ..core.errors import DataSourceUnavailable
from ..core.types import Array, TrainingSample
from .sources import TrainingDataSource

IMAGES_MAGIC = 0x00000803
LABELS_MAGIC = 0x00000801


def _open(path: Path) -> BinaryIO:
    if path.suffix == ".gz":
        return gzip.open(path, "rb")  # type: ignore[return-value]
    return path.open("rb")


def _read_exact(handle: BinaryIO, count: int, path: Path) -> bytes:
    data = handle.read(count)
    if len(data) != count:
        raise DataSourceUnavailable(f"Unexpected EOF in {path}")
    return data


def _read_idx(path: str | Path, magic: int, dims: int) -> Array:
    path = Path(path)
    try:
        with _open(path) as handle:
            found = int(np.frombuffer(_read_exact(handle, 4, path), dtype=">u4")[0])
            if found != magic:
                raise DataSourceUnavailable(f"Incorrect magic number in {path}: {found:#010x}")
            header = np.frombuffer(_read_exact(handle, 4 * dims, path), dtype=">u4")
            shape = tuple(int(d) for d in header)
            count = int(np.prod(shape, dtype=np.int64))
            payload = _read_exact(handle, count, path)
    except DataSourceUnavailable:
        raise
    except (OSError, EOFError) as exc:
        raise DataSourceUnavailable(f"Cannot read {path}: {exc}") from exc
    return np.frombuffer(payload, dtype=np.uint8).reshape(shape)


def read_idx_images(path: str | Path) -> Array:
    """Return a ``(count, rows, cols)`` ``uint8`` array."""

    return _read_idx(path, IMAGES_MAGIC, 3)


def read_idx_labels(path: str | Path) -> Array:
    """Return a ``(count,)`` ``uint8`` array."""

    return _read_idx(path, LABELS_MAGIC, 1)


def _write_idx(path: str | Path, magic: int, array: Array) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    header = np.array([magic, *array.shape], dtype=">u4").tobytes()
    payload = np.ascontiguousarray(array, dtype=np.uint8).tobytes()
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "wb") as handle:
        handle.write(header)
        handle.write(payload)
    return path


def write_idx_images(path: str | Path, images: Array) -> Path:
    images = np.asarray(images)
    if images.ndim != 3:
        raise ValueError(f"images must be (count, rows, cols), got {images.shape}")
    return _write_idx(path, IMAGES_MAGIC, images)


def write_idx_labels(path: str | Path, labels: Array) -> Path:
    labels = np.asarray(labels).reshape(-1)
    return _write_idx(path, LABELS_MAGIC, labels)


class MnistDataSource(TrainingDataSource):
    """Samples built lazily from IDX image and label arrays.

    Inputs are the flattened pixels scaled to ``[0, 1]``; expected outputs
    are one-hot vectors over ``num_classes`` with the label precomputed.
    """

    def __init__(self, images: Array, labels: Array, num_classes: int = 10) -> None:
        images = np.asarray(images)
        labels = np.asarray(labels).reshape(-1)
        if images.shape[0] != labels.shape[0]:
            raise DataSourceUnavailable(
                f"{images.shape[0]} images but {labels.shape[0]} labels"
            )
        if labels.size and int(labels.max()) >= num_classes:
            raise DataSourceUnavailable(
                f"Label {int(labels.max())} exceeds num_classes={num_classes}"
            )
        self._images = images.reshape(images.shape[0], -1)
        self._labels = labels
        self._eye = np.eye(num_classes, dtype=np.float64)
        self.num_classes = num_classes

    @classmethod
    def from_files(
        cls, images_path: str | Path, labels_path: str | Path, num_classes: int = 10
    ) -> "MnistDataSource":
        return cls(read_idx_images(images_path), read_idx_labels(labels_path), num_classes)

    @property
    def input_size(self) -> int:
        return int(self._images.shape[1])

    def size(self) -> int:
        return int(self._labels.shape[0])

    def get(self, index: int) -> TrainingSample:
        self._check_index(index)
        label = int(self._labels[index])
        inputs = self._images[index].astype(np.float64) / 255.0
        return TrainingSample(inputs, self._eye[label], label)


__all__ = [
    "IMAGES_MAGIC",
    "LABELS_MAGIC",
    "MnistDataSource",
    "read_idx_images",
    "read_idx_labels",
    "write_idx_images",
    "write_idx_labels",
]
