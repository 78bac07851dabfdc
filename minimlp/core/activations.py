"""Activation utilities for minimlp."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid of ``x``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_derivative(y: Array) -> Array:
    """Derivative of the sigmoid expressed through its output ``y``."""

    return y * (1.0 - y)


def softmax(z: Array) -> Array:
    """Normalised exponential over the last axis, shifted by the max."""

    shifted = z - np.max(z, axis=-1, keepdims=True)
    exp = np.exp(shifted)
    return exp / np.sum(exp, axis=-1, keepdims=True)


def identity(z: Array) -> Array:
    return z
