"""Procedurally generated datasets."""

from __future__ import annotations

import numpy as np

from .registry import DataSpec, DatasetSpec, register_dataset
from .utils import examples_from_arrays, head_tail_split

XOR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_TARGETS = np.array([[0.0], [1.0], [1.0], [0.0]])


@register_dataset("xor")
def load_xor(**_: object) -> DatasetSpec:
    """The exclusive-or truth table, used for both training and evaluation."""

    examples = examples_from_arrays(XOR_INPUTS, XOR_TARGETS)
    return DatasetSpec(
        name="xor",
        train=examples,
        test=examples,
        data_spec=DataSpec(d_in=2, d_out=1, task_type="boolean"),
        provenance={"type": "truth_table", "function": "xor"},
    )


def sine_target(inputs: np.ndarray) -> np.ndarray:
    """``sin(x1 - x2 + x3 - x4)`` for each row of ``inputs``."""

    signs = np.array([1.0, -1.0, 1.0, -1.0])
    return np.sin(inputs @ signs).reshape(-1, 1)


def _make_sine(n_samples: int, seed: int | None) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = rng.uniform(-1.0, 1.0, size=(n_samples, 4))
    return x, sine_target(x)


@register_dataset("sine")
def load_sine(
    *,
    n_samples: int = 500,
    n_train: int = 400,
    seed: int | None = 0,
    **_: object,
) -> DatasetSpec:
    """Random 4-vectors on [-1, 1) regressed onto ``sin(x1 - x2 + x3 - x4)``."""

    x, y = _make_sine(int(n_samples), seed)
    train, test = head_tail_split(examples_from_arrays(x, y), int(n_train))
    return DatasetSpec(
        name="sine",
        train=train,
        test=test,
        data_spec=DataSpec(d_in=4, d_out=1, task_type="regression"),
        provenance={
            "type": "synthetic",
            "function": "sin(x1 - x2 + x3 - x4)",
            "n_samples": int(n_samples),
            "n_train": int(n_train),
            "seed": seed,
        },
    )


__all__ = ["XOR_INPUTS", "XOR_TARGETS", "load_xor", "load_sine", "sine_target"]
