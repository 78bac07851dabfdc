"""Core numerical primitives for minimlp."""

from . import activations, errors, network, outputs, types

__all__ = ["activations", "errors", "network", "outputs", "types"]
