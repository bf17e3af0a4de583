"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, MutableMapping

from .sources import TrainingDataSource


@dataclass(frozen=True)
class DatasetSpec:
    """A materialised dataset ready for training.

    Attributes
    ----------
    name:
        Registry identifier the dataset was built from.
    train:
        Source iterated by stochastic gradient descent.
    test:
        Optional held-out source evaluated after every epoch.
    input_size:
        Length of every sample's input vector.
    output_size:
        Length of every sample's expected output vector.
    provenance:
        Free-form metadata (paths, seeds, split sizes) recorded in the run
        manifest so experiments remain reproducible.
    """

    name: str
    train: TrainingDataSource
    input_size: int
    output_size: int
    test: TrainingDataSource | None = None
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def splits(self) -> Dict[str, int]:
        sizes = {"train": len(self.train)}
        if self.test is not None:
            sizes["test"] = len(self.test)
        return sizes


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get_dataset(
    dataset: str,
    /,
    *,
    cache_dir: str | Path | None = None,
    **options: Any,
) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered under ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")

    spec = _REGISTRY[dataset](cache_dir=cache_dir, **options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.input_size <= 0 or spec.output_size <= 0:
        raise ValueError(
            f"Dataset {spec.name!r} has invalid sizes {spec.input_size} -> {spec.output_size}"
        )
    if len(spec.train) == 0:
        raise ValueError(f"Dataset {spec.name!r} has an empty training split")


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
