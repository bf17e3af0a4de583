"""Core typing contracts for sgdnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping

import numpy as np

Array = np.ndarray

EpochMetrics = Mapping[str, float]


@dataclass(frozen=True)
class TrainingSample:
    """A single ``(inputs, expected outputs)`` pair.

    ``label`` optionally carries the precomputed index of the highest
    expected output, which saves an argmax per sample for one-hot targets.
    """

    inputs: Array
    outputs: Array
    label: int | None = None

    @property
    def highest_output_index(self) -> int:
        if self.label is not None:
            return int(self.label)
        # local import keeps types free of the activations module at import time
        from .activations import index_of_highest

        return index_of_highest(self.outputs)


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`sgdnet.training.trainer.Trainer.run`."""

    epochs: int
    history: List[EpochMetrics] = field(default_factory=list)
    metrics_path: str = ""
    manifest_path: str = ""
    params_path: str = ""

    @property
    def final_metrics(self) -> EpochMetrics:
        return self.history[-1] if self.history else {}
