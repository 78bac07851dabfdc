"""Output-layer strategies pairing an activation with its loss."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Protocol

import numpy as np

from .activations import identity, sigmoid, sigmoid_derivative, softmax
from .types import Array


class OutputActivationKind(str, Enum):
    """Activation applied to the output layer."""

    SIGMOID = "SIGMOID"
    LINEAR = "LINEAR"
    SOFTMAX = "SOFTMAX"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "OutputActivationKind | str") -> "OutputActivationKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            available = ", ".join(member.value for member in cls)
            raise KeyError(
                f"Unknown output activation {value!r}. Available: {available}"
            ) from exc


class OutputActivation(Protocol):
    """Protocol implemented by output-layer strategies."""

    kind: OutputActivationKind

    def activate(self, z: Array) -> Array:
        """Map output pre-activations to network outputs."""

    def loss_and_delta(self, output: Array, target: Array) -> tuple[float, Array]:
        """Return the example loss and dL/dz for the output layer."""


@dataclass(frozen=True)
class SigmoidOutput:
    """Sigmoid outputs trained on half squared error."""

    kind: OutputActivationKind = OutputActivationKind.SIGMOID

    def activate(self, z: Array) -> Array:
        return sigmoid(z)

    def loss_and_delta(self, output: Array, target: Array) -> tuple[float, Array]:
        diff = output - target
        loss = float(0.5 * np.sum(diff * diff))
        return loss, diff * sigmoid_derivative(output)


@dataclass(frozen=True)
class LinearOutput:
    """Identity outputs trained on half squared error."""

    kind: OutputActivationKind = OutputActivationKind.LINEAR

    def activate(self, z: Array) -> Array:
        return identity(z).copy()

    def loss_and_delta(self, output: Array, target: Array) -> tuple[float, Array]:
        diff = output - target
        loss = float(0.5 * np.sum(diff * diff))
        return loss, diff


@dataclass(frozen=True)
class SoftmaxOutput:
    """Softmax outputs trained on cross-entropy.

    Terms with a zero target contribute nothing. An output of exactly zero
    under a positive target yields an infinite loss; no clamping is applied.
    """

    kind: OutputActivationKind = OutputActivationKind.SOFTMAX

    def activate(self, z: Array) -> Array:
        return softmax(z)

    def loss_and_delta(self, output: Array, target: Array) -> tuple[float, Array]:
        mask = target != 0
        loss = float(-np.sum(target[mask] * np.log(output[mask])))
        return loss, output - target


REGISTRY: Dict[OutputActivationKind, OutputActivation] = {
    OutputActivationKind.SIGMOID: SigmoidOutput(),
    OutputActivationKind.LINEAR: LinearOutput(),
    OutputActivationKind.SOFTMAX: SoftmaxOutput(),
}


def resolve(kind: OutputActivationKind | str) -> OutputActivation:
    """Return the strategy registered for ``kind``."""

    return REGISTRY[OutputActivationKind.parse(kind)]


__all__ = [
    "OutputActivation",
    "OutputActivationKind",
    "SigmoidOutput",
    "LinearOutput",
    "SoftmaxOutput",
    "REGISTRY",
    "resolve",
]
