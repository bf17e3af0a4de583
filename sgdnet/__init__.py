"""sgdnet public API."""

from .core import activations, errors, linalg, types  # noqa: F401
from .core.errors import (
    DataSourceUnavailable,
    InvalidConfiguration,
    InvalidRange,
    InvalidSize,
    NetworkError,
    OutOfRange,
    SizeMismatch,
)
from .core.layers import DenseLayer, InputLayer, Layer
from .core.network import Network
from .core.types import RunResult, TrainingSample
from .data import (
    ArrayDataSource,
    ShuffledDataSource,
    SubsetDataSource,
    TrainingDataSource,
    get_dataset,
)
from .training import Trainer, TrainerConfig, load_preset, presets, run_pipeline

__all__ = [
    "ArrayDataSource",
    "DataSourceUnavailable",
    "DenseLayer",
    "InputLayer",
    "InvalidConfiguration",
    "InvalidRange",
    "InvalidSize",
    "Layer",
    "Network",
    "NetworkError",
    "OutOfRange",
    "RunResult",
    "ShuffledDataSource",
    "SizeMismatch",
    "SubsetDataSource",
    "Trainer",
    "TrainerConfig",
    "TrainingDataSource",
    "TrainingSample",
    "activations",
    "errors",
    "get_dataset",
    "linalg",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
