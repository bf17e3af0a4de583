"""Pipeline assembly: presets, config files and artifact-writing runs."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.errors import InvalidConfiguration
from ..core.network import Network
from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink, LoggingSink
from ..reporting.plots import PlotAdapter
from .trainer import Trainer, TrainerConfig

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-cpu": {
        "data": {"name": "xor", "options": {"repeat": 25}},
        "model": {"hidden": [4]},
        "train": {
            "epochs": 60,
            "mini_batch_size": 4,
            "learning_rate": 3.0,
            "seed": 7,
            "run_dir": "runs/xor-cpu",
            "enable_plots": False,
        },
    },
    "blobs-cpu": {
        "data": {
            "name": "blobs",
            "options": {"n_points": 300, "num_classes": 3, "seed": 0, "test_split": 0.2},
        },
        "model": {"hidden": [8]},
        "train": {
            "epochs": 10,
            "mini_batch_size": 10,
            "learning_rate": 3.0,
            "seed": 1,
            "run_dir": "runs/blobs-cpu",
            "enable_plots": False,
        },
    },
    "mnist-fixture": {
        "data": {"name": "mnist_fixture", "options": {"count": 320, "test_size": 64}},
        "model": {"hidden": [30]},
        "train": {
            "epochs": 2,
            "mini_batch_size": 10,
            "learning_rate": 3.0,
            "seed": 1,
            "run_dir": "runs/mnist-fixture",
            "enable_plots": False,
        },
    },
    "mnist-idx": {
        "data": {
            "name": "mnist_idx",
            "options": {
                "images": "data/mnist/train-images-idx3-ubyte",
                "labels": "data/mnist/train-labels-idx1-ubyte",
                "train_size": 50000,
                "test_size": 10000,
            },
        },
        "model": {"layers": [784, 30, 10]},
        "train": {
            "epochs": 30,
            "mini_batch_size": 10,
            "learning_rate": 3.0,
            "run_dir": "runs/mnist-idx",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Load a JSON or YAML mapping from ``path``."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into ``base`` and return ``base``."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_layer_sizes(
    model_cfg: Mapping[str, object], input_size: int, output_size: int
) -> List[int]:
    if "layers" in model_cfg:
        sizes = [int(s) for s in model_cfg["layers"]]  # type: ignore[union-attr]
    else:
        sizes = [int(model_cfg.get("d_in", input_size))]
        sizes.extend(int(h) for h in model_cfg.get("hidden", []))  # type: ignore[union-attr]
        sizes.append(int(model_cfg.get("d_out", output_size)))
    if sizes and sizes[0] != input_size:
        raise InvalidConfiguration(
            f"Configured input size {sizes[0]} but dataset provides {input_size}"
        )
    if sizes and sizes[-1] != output_size:
        raise InvalidConfiguration(
            f"Configured output size {sizes[-1]} but dataset provides {output_size}"
        )
    return sizes


def run_pipeline(
    config: Mapping[str, object], callbacks: Sequence[object] = ()
) -> RunResult:
    """Build the dataset and network described by ``config`` and train it."""

    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]

    dataset = registry.get_dataset(
        str(data_cfg["name"]),
        cache_dir=train_cfg.get("cache_dir"),
        **dict(data_cfg.get("options", {})),
    )
    sizes = build_layer_sizes(model_cfg, dataset.input_size, dataset.output_size)
    network = Network(sizes)

    seed = train_cfg.get("seed")
    rng = np.random.default_rng(None if seed is None else int(seed))
    trainer_config = TrainerConfig.from_mapping(train_cfg, rng=rng, test_data=dataset.test)
    network.init(rng)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)
    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=trainer_config.seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    sinks: List[object] = [LoggingSink(), jsonl, csv_sink, plots, *callbacks]

    trainer = Trainer(network, trainer_config, callbacks=sinks)
    result = trainer.run(dataset.train, checkpoint_dir=run_dir)

    safe_config = json.loads(json.dumps(config, default=str))
    safe_config.setdefault("model", {})["layers"] = sizes
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance={"name": dataset.name, "splits": dataset.splits, **dataset.provenance},
        network=repr(network),
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        epochs=result.epochs,
        history=result.history,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        params_path=result.params_path,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


__all__ = [
    "build_layer_sizes",
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
]
