"""Progress sinks receiving the network's training events."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Mapping

from .artifacts import git_sha


class JsonlSink:
    """Append-only JSONL writer for per-epoch metrics."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split
        self.seed = seed
        self.sha = sha or git_sha()

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record = {
            "epoch": int(epoch),
            "split": self.split,
            "seed": self.seed,
            "sha": self.sha,
        }
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch


class CsvSink:
    """Write metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = {"epoch": int(epoch), "split": self.split}
        row.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=sorted(row.keys()))
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


class LoggingSink:
    """Render training events as ``logging`` records."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger("sgdnet.training")
        self.level = level

    def on_train_begin(self, info: Mapping[str, object]) -> None:
        if self.logger.isEnabledFor(self.level):
            self.logger.log(
                self.level,
                "Stochastic Gradient Descent on %s; training data %s; %s epochs; "
                "mini-batch size %s; eta %s",
                info.get("network"),
                info.get("training_size"),
                info.get("epochs"),
                info.get("mini_batch_size"),
                info.get("learning_rate"),
            )

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        self.logger.log(
            self.level,
            "Completed epoch %d (%dms)",
            epoch,
            round(metrics.get("elapsed_s", 0.0) * 1000),
        )
        if "eval_correct" in metrics:
            self.logger.log(
                self.level,
                "Correctly identified %d of %d (%dms)",
                metrics["eval_correct"],
                metrics["eval_total"],
                round(metrics.get("eval_elapsed_s", 0.0) * 1000),
            )


class MetricsCapture:
    """Keep every epoch's metrics in memory."""

    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []
        self.last: Mapping[str, float] = {}

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        payload = {k: float(v) for k, v in metrics.items()}
        self.history.append((int(epoch), payload))
        self.last = payload


__all__ = ["JsonlSink", "CsvSink", "LoggingSink", "MetricsCapture"]
