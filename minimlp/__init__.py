"""minimlp public API."""

from .core import activations  # noqa: F401
from .core.errors import DatasetParseError, DimensionMismatch, InvalidTopology, MLPError
from .core.network import MLP
from .core.outputs import OutputActivationKind
from .core.types import Topology, TrainingExample
from .data import get_dataset
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__version__ = "0.1.0"

__all__ = [
    "MLP",
    "DatasetParseError",
    "DimensionMismatch",
    "InvalidTopology",
    "MLPError",
    "OutputActivationKind",
    "Topology",
    "Trainer",
    "TrainingExample",
    "activations",
    "get_dataset",
    "load_preset",
    "presets",
    "run_pipeline",
]
