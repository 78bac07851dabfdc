from __future__ import annotations

from typing import List, Mapping

import numpy as np
import pytest

from minimlp.core.network import MLP
from minimlp.core.types import TrainingExample
from minimlp.data import get_dataset
from minimlp.data.utils import examples_from_arrays
from minimlp.training.metrics import compute_metric
from minimlp.training.trainer import Trainer, predict_examples


class _Capture:
    def __init__(self) -> None:
        self.history: List[tuple[int, Mapping[str, float]]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.history.append((epoch, dict(metrics)))


def _ramp(n: int) -> List[TrainingExample]:
    xs = np.linspace(-1.0, 1.0, n)
    return [TrainingExample(inputs=[x, -x], targets=[0.5 * x]) for x in xs]


@pytest.mark.parametrize("batch_size, per_epoch", [(1, 10), (3, 4), (5, 2), (10, 1), (None, 1)])
def test_update_count_flushes_partial_batches(batch_size, per_epoch):
    model = MLP.create(2, 3, 1, "LINEAR", seed=0)
    trainer = Trainer(model, learning_rate=0.01, batch_size=batch_size, rng=np.random.default_rng(0))
    result = trainer.run(_ramp(10), epochs=3)
    assert result.updates == 3 * per_epoch
    assert result.epochs == 3
    assert len(result.history) == 3
    assert not model.has_pending_gradients()


def test_callbacks_receive_zero_based_epochs():
    capture = _Capture()
    trainer = Trainer(
        MLP.create(2, 3, 1, "LINEAR", seed=0),
        learning_rate=0.01,
        callbacks=[capture],
        rng=np.random.default_rng(1),
    )
    result = trainer.run(_ramp(6), epochs=4)
    assert [epoch for epoch, _ in capture.history] == [0, 1, 2, 3]
    assert capture.history[-1][1]["loss"] == result.final_loss


def test_mean_reduction_divides_the_summed_loss():
    examples = _ramp(8)
    runs = {}
    for reduction in ("sum", "mean"):
        trainer = Trainer(
            MLP.create(2, 3, 1, "SIGMOID", seed=4),
            learning_rate=0.1,
            batch_size=2,
            loss_reduction=reduction,
        )
        runs[reduction] = trainer.run(examples, epochs=5, shuffle=False).history
    np.testing.assert_allclose(np.array(runs["mean"]) * len(examples), runs["sum"])


def test_shuffle_is_reproducible_with_a_seeded_generator():
    examples = _ramp(12)
    histories = []
    for _ in range(2):
        trainer = Trainer(
            MLP.create(2, 4, 1, "LINEAR", seed=3),
            learning_rate=0.05,
            batch_size=4,
            rng=np.random.default_rng(99),
        )
        histories.append(trainer.run(examples, epochs=5).history)
    assert histories[0] == histories[1]


def test_trainer_rejects_bad_arguments():
    model = MLP.create(2, 2, 1, "SIGMOID", seed=0)
    with pytest.raises(ValueError):
        Trainer(model, learning_rate=0.1, batch_size=0)
    with pytest.raises(ValueError):
        Trainer(model, learning_rate=float("nan"))
    with pytest.raises(ValueError):
        Trainer(model, learning_rate=0.1, loss_reduction="median")
    with pytest.raises(ValueError):
        Trainer(model, learning_rate=0.1).run([], epochs=1)


def test_full_batch_descent_on_xor():
    dataset = get_dataset("xor")
    trainer = Trainer(MLP.create(2, 4, 1, "LINEAR", seed=0), learning_rate=0.05, batch_size=None)
    result = trainer.run(dataset.train, epochs=300, shuffle=False)
    assert result.history[-1] < result.history[0]
    assert result.updates == 300


def test_sine_regression_error_decreases():
    dataset = get_dataset("sine")
    trainer = Trainer(
        MLP.create(4, 5, 1, "LINEAR", seed=0),
        learning_rate=0.01,
        batch_size=5,
        rng=np.random.default_rng(0),
    )
    result = trainer.run(dataset.train, epochs=150)
    assert result.history[-1] < result.history[0]
    predictions, targets = predict_examples(trainer.model, dataset.test)
    assert predictions.shape == targets.shape == (100, 1)
    assert np.all(np.isfinite(predictions))


def test_softmax_classifier_separates_blobs():
    rng = np.random.default_rng(1)
    centers = np.array([[1.0, 1.0], [-1.0, -1.0], [1.0, -1.0]])
    inputs = np.vstack([center + 0.2 * rng.standard_normal((50, 2)) for center in centers])
    targets = np.repeat(np.eye(3), 50, axis=0)
    examples = examples_from_arrays(inputs, targets)

    trainer = Trainer(
        MLP.create(2, 8, 3, "SOFTMAX", seed=1),
        learning_rate=0.1,
        batch_size=10,
        rng=np.random.default_rng(1),
        loss_reduction="mean",
    )
    result = trainer.run(examples, epochs=60)
    assert result.history[-1] < result.history[0]

    predictions, expected = predict_examples(trainer.model, examples)
    assert compute_metric("accuracy", predictions, expected).value > 0.75
