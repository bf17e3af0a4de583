"""Training data sources, dataset registry and loaders."""

# Ensure built-in datasets register themselves when the package is imported.
from . import mnist as _mnist  # noqa: F401
from . import synthetic as _synthetic  # noqa: F401
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset
from .sources import (
    ArrayDataSource,
    ShuffledDataSource,
    SubsetDataSource,
    TrainingDataSource,
)

__all__ = [
    "ArrayDataSource",
    "DatasetSpec",
    "ShuffledDataSource",
    "SubsetDataSource",
    "TrainingDataSource",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
