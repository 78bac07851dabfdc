"""Utility helpers for dataset loaders."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ..core.types import TrainingExample


def one_hot(index: int, num_classes: int) -> np.ndarray:
    """Return a ``num_classes`` vector with a single ``1.0`` at ``index``."""

    if not 0 <= index < num_classes:
        raise ValueError(f"class index {index} outside [0, {num_classes})")
    vector = np.zeros(num_classes, dtype=np.float64)
    vector[index] = 1.0
    return vector


def head_tail_split(
    examples: Sequence[TrainingExample], n_train: int
) -> Tuple[Tuple[TrainingExample, ...], Tuple[TrainingExample, ...]]:
    """Split ``examples`` in file order: the first ``n_train`` train."""

    if not 0 < n_train < len(examples):
        raise ValueError(
            f"n_train must leave at least one test example: got {n_train} of {len(examples)}"
        )
    return tuple(examples[:n_train]), tuple(examples[n_train:])


def fraction_split(
    examples: Sequence[TrainingExample], train_fraction: float
) -> Tuple[Tuple[TrainingExample, ...], Tuple[TrainingExample, ...]]:
    """Split off the leading ``train_fraction`` of ``examples`` for training."""

    if not 0 < train_fraction < 1:
        raise ValueError("train_fraction must be in (0, 1)")
    n_train = min(max(1, int(train_fraction * len(examples))), len(examples) - 1)
    return head_tail_split(examples, n_train)


def examples_from_arrays(inputs: np.ndarray, targets: np.ndarray) -> Tuple[TrainingExample, ...]:
    return tuple(TrainingExample(inputs=x, targets=y) for x, y in zip(inputs, targets))


__all__ = ["one_hot", "head_tail_split", "fraction_split", "examples_from_arrays"]
