"""Trainer configuration and the runner wrapping :meth:`Network.train`."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.errors import InvalidConfiguration
from ..core.layers import is_count
from ..core.network import MAX_EPOCHS, MIN_EPOCHS, Network
from ..core.types import RunResult
from ..data.sources import TrainingDataSource
from ..reporting.artifacts import save_parameters

_ALIASES = {
    "batch_size": "mini_batch_size",
    "lr": "learning_rate",
    "eta": "learning_rate",
}


@dataclass(frozen=True)
class TrainerConfig:
    """Named SGD settings, validated on construction.

    ``rng`` defaults to a fresh unseeded generator; ``seed`` is a
    serialisable alternative used when no generator is injected.
    """

    epochs: int = 30
    mini_batch_size: int = 10
    learning_rate: float = 3.0
    seed: int | None = None
    rng: np.random.Generator | None = field(default=None, compare=False, repr=False)
    test_data: TrainingDataSource | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not is_count(self.epochs) or not MIN_EPOCHS <= self.epochs <= MAX_EPOCHS:
            raise InvalidConfiguration(
                f"epochs must be in range {MIN_EPOCHS}..{MAX_EPOCHS}, got {self.epochs}"
            )
        if not is_count(self.mini_batch_size) or self.mini_batch_size < 1:
            raise InvalidConfiguration(
                f"mini_batch_size must be >= 1, got {self.mini_batch_size}"
            )
        if (
            not isinstance(self.learning_rate, numbers.Real)
            or not math.isfinite(self.learning_rate)
            or self.learning_rate <= 0
        ):
            raise InvalidConfiguration(
                f"learning_rate must be a positive finite number, got {self.learning_rate}"
            )

    @classmethod
    def from_mapping(
        cls, config: Mapping[str, object], **overrides: object
    ) -> "TrainerConfig":
        """Build a config from a ``train`` section, ignoring unrelated keys."""

        values: dict[str, object] = {}
        for key, value in config.items():
            key = _ALIASES.get(key, key)
            if key in {"epochs", "mini_batch_size"}:
                values[key] = int(value)  # type: ignore[arg-type]
            elif key == "learning_rate":
                values[key] = float(value)  # type: ignore[arg-type]
            elif key == "seed" and value is not None:
                values[key] = int(value)  # type: ignore[arg-type]
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def make_rng(self) -> np.random.Generator:
        if self.rng is not None:
            return self.rng
        return np.random.default_rng(self.seed)

    def as_dict(self) -> dict[str, object]:
        return {
            "epochs": self.epochs,
            "mini_batch_size": self.mini_batch_size,
            "learning_rate": self.learning_rate,
            "seed": self.seed,
        }


class Trainer:
    """Run stochastic gradient descent on a network with a fixed config."""

    def __init__(
        self,
        network: Network,
        config: TrainerConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.config = config or TrainerConfig()
        self.callbacks = list(callbacks or [])

    def run(
        self,
        training_data: TrainingDataSource,
        *,
        checkpoint_dir: str | Path | None = None,
    ) -> RunResult:
        config = self.config
        history = self.network.train(
            training_data,
            config.epochs,
            config.mini_batch_size,
            config.learning_rate,
            rng=config.make_rng(),
            test_data=config.test_data,
            callbacks=self.callbacks,
        )
        for callback in self.callbacks:
            close = getattr(callback, "close", None)
            if close is not None:
                close()

        params_path = ""
        if checkpoint_dir is not None:
            params_path = save_parameters(
                Path(checkpoint_dir) / "params.npz", self.network.state_dict()
            )
        return RunResult(epochs=len(history), history=history, params_path=params_path)


__all__ = ["TrainerConfig", "Trainer"]
