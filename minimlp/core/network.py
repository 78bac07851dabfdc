"""Single-hidden-layer perceptron with accumulated backpropagation."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

import numpy as np

from .activations import sigmoid, sigmoid_derivative
from .errors import DimensionMismatch
from .outputs import OutputActivation, OutputActivationKind, resolve
from .types import Array, Topology

INIT_RANGE = 1.0


def _as_vector(values: Sequence[float] | Array, expected: int, name: str) -> Array:
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1 or vector.shape[0] != expected:
        actual = int(vector.shape[0]) if vector.ndim == 1 else int(vector.size)
        raise DimensionMismatch(name, expected, actual)
    return vector


class MLP:
    """Feed-forward network with one sigmoid hidden layer.

    The hidden layer always uses the sigmoid; the output layer follows
    ``output_activation``. Calls follow the cycle ``forward`` -> ``backward``
    (repeated over a mini-batch) -> ``update_weights``. ``backward`` reuses the
    activations of the most recent ``forward`` call, so both must be made with
    the same input. Instances are not thread-safe.
    """

    def __init__(
        self,
        input_count: int,
        hidden_count: int,
        output_count: int,
        output_activation: OutputActivationKind | str = OutputActivationKind.SIGMOID,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.topology = Topology(input_count, hidden_count, output_count)
        self.output_kind = OutputActivationKind.parse(output_activation)
        self._output: OutputActivation = resolve(self.output_kind)
        self.rng = rng if rng is not None else np.random.default_rng()

        n_in, n_hidden, n_out = self.topology.layer_dims
        self.W1 = np.zeros((n_in, n_hidden))
        self.W2 = np.zeros((n_hidden, n_out))
        self.dW1 = np.zeros_like(self.W1)
        self.dW2 = np.zeros_like(self.W2)
        self.z1 = np.zeros(n_hidden)
        self.hidden = np.zeros(n_hidden)
        self.z2 = np.zeros(n_out)
        self.output = np.zeros(n_out)
        self.randomise()

    @classmethod
    def create(
        cls,
        input_count: int,
        hidden_count: int,
        output_count: int,
        output_activation: OutputActivationKind | str,
        *,
        seed: int | None = None,
    ) -> "MLP":
        """Build a network whose weights are drawn from ``seed``."""

        return cls(
            input_count,
            hidden_count,
            output_count,
            output_activation,
            rng=np.random.default_rng(seed),
        )

    @property
    def input_count(self) -> int:
        return self.topology.input_count

    @property
    def hidden_count(self) -> int:
        return self.topology.hidden_count

    @property
    def output_count(self) -> int:
        return self.topology.output_count

    def randomise(self, rng: np.random.Generator | None = None) -> None:
        """Redraw both weight matrices on [-1, 1) and clear the gradients."""

        if rng is not None:
            self.rng = rng
        self.W1 = self.rng.uniform(-INIT_RANGE, INIT_RANGE, size=self.W1.shape)
        self.W2 = self.rng.uniform(-INIT_RANGE, INIT_RANGE, size=self.W2.shape)
        self.dW1.fill(0.0)
        self.dW2.fill(0.0)

    def forward(self, inputs: Sequence[float] | Array) -> Array:
        """Propagate ``inputs`` and return a copy of the network output."""

        x = _as_vector(inputs, self.input_count, "input")
        self.z1 = x @ self.W1
        self.hidden = sigmoid(self.z1)
        self.z2 = self.hidden @ self.W2
        self.output = self._output.activate(self.z2)
        return self.output.copy()

    def backward(self, inputs: Sequence[float] | Array, targets: Sequence[float] | Array) -> float:
        """Accumulate gradients for one example and return its loss.

        Must follow a ``forward`` call on the same ``inputs``; stale
        activations are not detected.
        """

        x = _as_vector(inputs, self.input_count, "input")
        t = _as_vector(targets, self.output_count, "target")
        loss, delta_out = self._output.loss_and_delta(self.output, t)
        delta_hidden = sigmoid_derivative(self.hidden) * (self.W2 @ delta_out)
        self.dW2 += np.outer(self.hidden, delta_out)
        self.dW1 += np.outer(x, delta_hidden)
        return loss

    def update_weights(self, learning_rate: float) -> None:
        """Apply the summed gradients scaled by ``learning_rate`` and reset them.

        The gradients are not averaged over the batch, so the effective step
        grows with the number of accumulated examples.
        """

        self.W2 -= learning_rate * self.dW2
        self.W1 -= learning_rate * self.dW1
        self.dW2.fill(0.0)
        self.dW1.fill(0.0)

    def predict(self, inputs: Array) -> Array:
        """Batched inference over the rows of ``inputs``.

        Leaves the activation buffers untouched.
        """

        x = np.asarray(inputs, dtype=np.float64)
        if x.ndim == 1:
            x = x.reshape(1, -1)
        if x.shape[1] != self.input_count:
            raise DimensionMismatch("input", self.input_count, int(x.shape[1]))
        hidden = sigmoid(x @ self.W1)
        return self._output.activate(hidden @ self.W2)

    def has_pending_gradients(self) -> bool:
        return bool(np.any(self.dW1) or np.any(self.dW2))

    def state_dict(self) -> Mapping[str, Array]:
        return {"W1": self.W1.copy(), "W2": self.W2.copy()}

    def gradients(self) -> Mapping[str, Array]:
        return {"W1": self.dW1.copy(), "W2": self.dW2.copy()}

    def parameter_count(self) -> int:
        return self.topology.parameter_count()

    def describe(self) -> Mapping[str, object]:
        return {
            "input_count": self.input_count,
            "hidden_count": self.hidden_count,
            "output_count": self.output_count,
            "output_activation": self.output_kind.value,
        }

    def __repr__(self) -> str:
        dims = "-".join(str(d) for d in self.topology.layer_dims)
        return f"MLP({dims}, {self.output_kind.value})"


def check_learning_rate(learning_rate: float) -> float:
    value = float(learning_rate)
    if not math.isfinite(value):
        raise ValueError(f"learning rate must be finite, got {learning_rate!r}")
    return value


__all__ = ["MLP", "INIT_RANGE", "check_learning_rate"]
