"""Epoch loops driving the forward/backward/update cycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Sequence, Tuple

import numpy as np

from ..core.network import MLP, check_learning_rate
from ..core.types import Array, TrainingExample, stack_examples

logger = logging.getLogger(__name__)

LOSS_REDUCTIONS = ("sum", "mean")


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`Trainer.run`."""

    epochs: int
    updates: int
    final_loss: float
    history: Tuple[float, ...]


class Trainer:
    """Run mini-batch training over a fixed list of examples.

    Gradients of ``batch_size`` consecutive examples are accumulated before
    each weight update; a trailing partial batch is flushed at the end of
    every epoch and the batch counter restarts with the next epoch.
    ``batch_size=None`` performs one update per epoch.
    """

    def __init__(
        self,
        model: MLP,
        *,
        learning_rate: float,
        batch_size: int | None = 1,
        rng: np.random.Generator | None = None,
        callbacks: Sequence[object] | None = None,
        loss_reduction: str = "sum",
    ) -> None:
        if batch_size is not None and int(batch_size) <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if loss_reduction not in LOSS_REDUCTIONS:
            raise ValueError(
                f"loss_reduction must be one of {LOSS_REDUCTIONS}, got {loss_reduction!r}"
            )
        self.model = model
        self.learning_rate = check_learning_rate(learning_rate)
        self.batch_size = int(batch_size) if batch_size is not None else None
        self.rng = rng if rng is not None else np.random.default_rng()
        self.callbacks = list(callbacks or [])
        self.loss_reduction = loss_reduction
        self.updates = 0

    def run(
        self,
        examples: Sequence[TrainingExample],
        epochs: int,
        *,
        shuffle: bool = True,
    ) -> TrainResult:
        if not examples:
            raise ValueError("cannot train on an empty example list")
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")

        order: List[TrainingExample] = list(examples)
        batch_size = self.batch_size or len(order)
        history: List[float] = []
        for epoch in range(epochs):
            if shuffle:
                self.rng.shuffle(order)
            total = self._run_epoch(order, batch_size)
            loss = total / len(order) if self.loss_reduction == "mean" else total
            history.append(loss)
            self._emit_epoch(epoch, {"loss": loss})

        final_loss = history[-1] if history else float("nan")
        logger.debug("Trained %s for %d epochs (%d updates)", self.model, epochs, self.updates)
        return TrainResult(
            epochs=epochs,
            updates=self.updates,
            final_loss=final_loss,
            history=tuple(history),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_epoch(self, order: Sequence[TrainingExample], batch_size: int) -> float:
        total = 0.0
        pending = 0
        for example in order:
            self.model.forward(example.inputs)
            total += self.model.backward(example.inputs, example.targets)
            pending += 1
            if pending == batch_size:
                self._step()
                pending = 0
        if pending:
            self._step()
        return total

    def _step(self) -> None:
        self.model.update_weights(self.learning_rate)
        self.updates += 1

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


def predict_examples(model: MLP, examples: Sequence[TrainingExample]) -> tuple[Array, Array]:
    """Return ``(predictions, targets)`` for ``examples`` stacked row-wise."""

    inputs, targets = stack_examples(examples)
    if not examples:
        return np.zeros((0, model.output_count)), targets
    return model.predict(inputs), targets


__all__ = ["Trainer", "TrainResult", "predict_examples"]
