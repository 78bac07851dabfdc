"""Core typing contracts for minimlp."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import InvalidTopology

Array = np.ndarray


def _readonly(values: Sequence[float] | Array) -> Array:
    array = np.array(values, dtype=np.float64).reshape(-1)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Topology:
    """Layer sizes of a single-hidden-layer network."""

    input_count: int
    hidden_count: int
    output_count: int

    def __post_init__(self) -> None:
        for name in ("input_count", "hidden_count", "output_count"):
            value = getattr(self, name)
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
                raise InvalidTopology(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidTopology(f"{name} must be positive, got {value}")

    @property
    def layer_dims(self) -> list[int]:
        return [int(self.input_count), int(self.hidden_count), int(self.output_count)]

    def parameter_count(self) -> int:
        return int(
            self.input_count * self.hidden_count + self.hidden_count * self.output_count
        )


@dataclass(frozen=True)
class TrainingExample:
    """An immutable (inputs, targets) pair."""

    inputs: Array
    targets: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", _readonly(self.inputs))
        object.__setattr__(self, "targets", _readonly(self.targets))


def stack_examples(examples: Sequence[TrainingExample]) -> tuple[Array, Array]:
    """Stack examples into ``(inputs, targets)`` matrices."""

    if not examples:
        return np.zeros((0, 0)), np.zeros((0, 0))
    inputs = np.vstack([example.inputs for example in examples])
    targets = np.vstack([example.targets for example in examples])
    return inputs, targets


__all__ = ["Array", "Topology", "TrainingExample", "stack_examples"]
