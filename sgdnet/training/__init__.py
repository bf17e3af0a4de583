"""Training loop configuration and config-driven pipelines."""

from .pipelines import load_preset, presets, run_pipeline
from .trainer import Trainer, TrainerConfig

__all__ = ["Trainer", "TrainerConfig", "load_preset", "presets", "run_pipeline"]
