"""Dataset registry and loader helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import letters as _letters  # noqa: F401
from . import synthetic as _synthetic  # noqa: F401
from .registry import (
    DatasetSpec,
    DataSpec,
    available_datasets,
    get_dataset,
    register_dataset,
)
from .utils import one_hot

__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "one_hot",
    "register_dataset",
]
