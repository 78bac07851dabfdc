"""Error taxonomy shared by the network and its collaborators."""

from __future__ import annotations


class MLPError(ValueError):
    """Base class for minimlp errors."""


class InvalidTopology(MLPError):
    """A layer size is not a positive integer."""


class DimensionMismatch(MLPError):
    """A vector does not match the length the network expects."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(f"{name} has length {actual}, expected {expected}")
        self.name = name
        self.expected = expected
        self.actual = actual


class DatasetParseError(MLPError):
    """A dataset file could not be turned into training examples."""

    def __init__(self, message: str, *, path: str | None = None, line: int | None = None) -> None:
        location = path or "<dataset>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line


__all__ = ["MLPError", "InvalidTopology", "DimensionMismatch", "DatasetParseError"]
