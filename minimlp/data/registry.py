"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping, Tuple

from ..core.types import TrainingExample

TASK_TYPES = ("boolean", "regression", "multiclass")


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Length of every input vector.
    d_out:
        Length of every target vector.
    task_type:
        One of ``{"boolean", "regression", "multiclass"}``; selects the
        evaluation applied after training.
    num_classes:
        Number of discrete classes when ``task_type`` is ``"multiclass"``.
    """

    d_in: int
    d_out: int
    task_type: str
    num_classes: int | None = None


@dataclass(frozen=True)
class DatasetSpec:
    """A loaded dataset split into training and test examples."""

    name: str
    train: Tuple[TrainingExample, ...]
    test: Tuple[TrainingExample, ...]
    data_spec: DataSpec
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def splits(self) -> Dict[str, int]:
        return {"train": len(self.train), "test": len(self.test)}


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered as ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset: {dataset!r}. Available datasets: {available}")

    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    data_spec = spec.data_spec
    if data_spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {data_spec.task_type}")
    if data_spec.task_type == "multiclass" and data_spec.num_classes is None:
        raise ValueError("Multiclass datasets must define num_classes")
    if not spec.train:
        raise ValueError(f"Dataset {spec.name!r} has no training examples")


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
