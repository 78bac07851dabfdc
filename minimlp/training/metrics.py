"""Metric helpers for evaluating a trained network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics(task_type: str) -> List[str]:
    if task_type == "boolean":
        return ["rmse", "half_sse"]
    if task_type == "regression":
        return ["half_sse", "mse", "rmse", "mae", "r2"]
    if task_type == "multiclass":
        return ["accuracy"]
    raise ValueError(f"Unknown task type: {task_type}")


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    key = name.lower()
    preds = np.asarray(predictions, dtype=np.float64)
    targs = np.asarray(targets, dtype=np.float64)
    if preds.shape != targs.shape:
        raise ValueError(f"predictions {preds.shape} and targets {targs.shape} differ")
    if preds.size == 0:
        raise ValueError(f"cannot compute {name!r} on an empty evaluation set")
    diff = preds - targs
    if key == "mae":
        value = float(np.mean(np.abs(diff)))
    elif key == "mse":
        value = float(np.mean(diff**2))
    elif key == "rmse":
        value = float(np.sqrt(np.mean(diff**2)))
    elif key == "sse":
        value = float(np.sum(diff**2))
    elif key == "half_sse":
        value = float(0.5 * np.sum(diff**2))
    elif key == "r2":
        mean = np.mean(targs, axis=0, keepdims=True)
        ss_res = float(np.sum(diff**2))
        ss_tot = float(np.sum((targs - mean) ** 2))
        value = 1.0 if ss_tot == 0 else float(1 - ss_res / ss_tot)
    elif key == "accuracy":
        pred_idx = np.argmax(preds, axis=1)
        targ_idx = np.argmax(targs, axis=1)
        value = float(np.mean(pred_idx == targ_idx))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(names: Iterable[str], predictions: Array, targets: Array) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


__all__ = ["MetricResult", "default_metrics", "compute_metric", "compute_metrics"]
