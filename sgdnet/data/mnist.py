"""MNIST datasets read from IDX files, plus an offline fixture."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ..core.errors import DataSourceUnavailable
from .idx import MnistDataSource, write_idx_images, write_idx_labels
from .registry import DatasetSpec, register_dataset
from .sources import SubsetDataSource

DEFAULT_CACHE_DIR = Path(".cache/sgdnet")


def build_offline_fixture(directory: str | Path, count: int = 320) -> tuple[Path, Path]:
    """Write a deterministic MNIST-like image/label IDX pair into ``directory``.

    The arrays are derived from integer sequences only, so the files are
    byte-identical across platforms and numpy releases.
    """

    directory = Path(directory)
    images = (np.arange(count * 784, dtype=np.uint32).reshape(count, 28, 28) % 256).astype(
        np.uint8
    )
    labels = (np.arange(count, dtype=np.uint32) % 10).astype(np.uint8)
    # stamp a label-dependent bar so the fixture is learnable
    for label in range(10):
        rows = labels == label
        images[rows, 2 * label : 2 * label + 2, :] = 255
    images_path = write_idx_images(directory / "fixture-images-idx3-ubyte", images)
    labels_path = write_idx_labels(directory / "fixture-labels-idx1-ubyte", labels)
    return images_path, labels_path


def _split(
    name: str,
    source: MnistDataSource,
    train_size: int | None,
    test_size: int | None,
    provenance: dict,
) -> DatasetSpec:
    total = len(source)
    if train_size is None:
        train_size = total - (test_size or 0)
    test_size = test_size if test_size is not None else total - train_size
    train = SubsetDataSource(source, 0, train_size)
    test = SubsetDataSource(source, train_size, test_size) if test_size else None
    provenance = dict(provenance)
    provenance.update({"train_size": train_size, "test_size": test_size})
    return DatasetSpec(
        name=name,
        train=train,
        test=test,
        input_size=source.input_size,
        output_size=source.num_classes,
        provenance=provenance,
    )


def _idx_factory(
    images: str | Path | None = None,
    labels: str | Path | None = None,
    train_size: int | None = 50000,
    test_size: int | None = 10000,
    num_classes: int = 10,
    *,
    cache_dir: str | Path | None = None,
    **_: object,
) -> DatasetSpec:
    if images is None or labels is None:
        raise DataSourceUnavailable("mnist_idx requires both 'images' and 'labels' paths")
    source = MnistDataSource.from_files(images, labels, num_classes=num_classes)
    return _split(
        "mnist_idx",
        source,
        train_size,
        test_size,
        {"type": "idx", "images": str(images), "labels": str(labels)},
    )


def _fixture_factory(
    count: int = 320,
    test_size: int = 64,
    *,
    cache_dir: str | Path | None = None,
    **_: object,
) -> DatasetSpec:
    directory = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
    images_path, labels_path = build_offline_fixture(directory / "offline", count=count)
    source = MnistDataSource.from_files(images_path, labels_path)
    return _split(
        "mnist_fixture",
        source,
        None,
        test_size,
        {"type": "offline-fixture", "count": count, "images": str(images_path)},
    )


register_dataset("mnist_idx", _idx_factory)
register_dataset("mnist_fixture", _fixture_factory)
