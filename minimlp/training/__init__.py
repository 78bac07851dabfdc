"""Training loops, evaluation metrics and experiment pipelines."""

from .pipelines import RunResult, load_preset, presets, run_pipeline
from .trainer import Trainer, TrainResult, predict_examples

__all__ = [
    "RunResult",
    "Trainer",
    "TrainResult",
    "load_preset",
    "predict_examples",
    "presets",
    "run_pipeline",
]
