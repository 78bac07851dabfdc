"""Per-epoch trainer callbacks: the logged loss table and a JSONL stream."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping, Tuple

import numpy as np


class LossHistory:
    """Keep the epoch loss at a fixed logging interval.

    ``one_based`` numbers epochs from 1 before the interval test;
    ``include_last`` also keeps the final epoch of an ``epochs``-long run.
    """

    def __init__(
        self,
        interval: int,
        *,
        one_based: bool = False,
        include_last: bool = False,
        epochs: int | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if include_last and epochs is None:
            raise ValueError("include_last requires the total number of epochs")
        self.interval = int(interval)
        self.one_based = one_based
        self.include_last = include_last
        self.epochs = epochs
        self.records: List[Tuple[int, float]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        number = epoch + 1 if self.one_based else epoch
        is_last = self.epochs is not None and epoch == self.epochs - 1
        if number % self.interval == 0 or (self.include_last and is_last):
            self.records.append((number, float(metrics["loss"])))

    @property
    def losses(self) -> List[float]:
        return [loss for _, loss in self.records]

    __call__ = on_epoch


class JsonlSink:
    """Stream one JSON object per training epoch to ``path``.

    Records look like ``{"epoch": 0, "split": "train", "seed": 0, "loss": 1.44}``;
    non-numeric metric values are left out. The file is truncated when the
    sink is created, so a rerun into the same directory starts afresh.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")
        self.split = split
        self.seed = seed
        self.count = 0

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record = {"epoch": int(epoch), "split": self.split, "seed": self.seed}
        for name, value in metrics.items():
            if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
                record[name] = float(value)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")
        self.count += 1

    __call__ = on_epoch
