"""Command line entry point for sgdnet training runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from sgdnet.reporting.logs import config_logger
from sgdnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "params": result.params_path,
    }
    final = result.final_metrics
    if "eval_correct" in final:
        payload["eval_correct"] = int(final["eval_correct"])
        payload["eval_total"] = int(final["eval_total"])
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-cpu",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--layers",
        type=lambda text: [int(part) for part in text.split(",")],
        help="Comma separated layer sizes, e.g. 784,30,10",
    )
    parser.add_argument("--epochs", type=int, help="Number of epochs (1-200)")
    parser.add_argument("--mini-batch-size", type=int, help="Mini-batch size")
    parser.add_argument("--learning-rate", type=float, help="Learning rate (eta)")
    parser.add_argument("--seed", type=int, help="Seed for initialisation and shuffling")
    parser.add_argument("--images", type=Path, help="IDX image file (selects mnist_idx)")
    parser.add_argument("--labels", type=Path, help="IDX label file (selects mnist_idx)")
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write an accuracy plot"
    )
    parser.add_argument("--log-file", type=Path, help="Also write log records to this file")
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.images or args.labels:
        if not (args.images and args.labels):
            raise SystemExit("--images and --labels must be given together")
        if config.get("data", {}).get("name") != "mnist_idx":
            reference = pipelines.load_preset("mnist-idx")
            config["data"] = dict(reference["data"])
            config["model"] = dict(reference["model"])
        options = config["data"].setdefault("options", {})
        options.update({"images": str(args.images), "labels": str(args.labels)})

    if args.config:
        override = pipelines.read_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    if args.layers:
        config["model"] = {"layers": args.layers}

    train_cfg = config.setdefault("train", {})
    if args.epochs is not None:
        train_cfg["epochs"] = args.epochs
    if args.mini_batch_size is not None:
        train_cfg["mini_batch_size"] = args.mini_batch_size
    if args.learning_rate is not None:
        train_cfg["learning_rate"] = args.learning_rate
    if args.seed is not None:
        train_cfg["seed"] = args.seed
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config_logger(args.log_file, level=logging.WARNING if args.quiet else logging.INFO)
    config = resolve_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
