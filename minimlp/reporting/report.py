"""Plain-text experiment reports.

A report looks like::

    XOR Experiment Results
    ======================
    Configuration:
    Number of Inputs: 2
    ...

    Training Error Over Epochs (Logged Every 50 Epochs):
    Epoch	Error
    0	1.2345
    ...

    Results:
    Input: [0.0, 0.0], Expected Output: 0.0, Predicted Output: 0.0123
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Sequence, Tuple

import numpy as np


def format_vector(values: Sequence[float] | np.ndarray) -> str:
    """Render ``values`` as ``[a, b, ...]`` with full float precision."""

    return "[" + ", ".join(repr(float(v)) for v in np.asarray(values).reshape(-1)) + "]"


def format_value(value: object) -> str:
    if isinstance(value, (float, np.floating)):
        return repr(float(value))
    return str(value)


@dataclass(frozen=True)
class ReportSection:
    """A block of lines printed after the loss table."""

    heading: str | None
    lines: Tuple[str, ...]


@dataclass
class ExperimentReport:
    """Everything written to an experiment's result file."""

    title: str
    configuration: Mapping[str, object]
    loss_heading: str
    loss_log: Sequence[Tuple[int, float]]
    sections: List[ReportSection] = field(default_factory=list)

    def add_section(self, heading: str | None, lines: Sequence[str]) -> None:
        self.sections.append(ReportSection(heading=heading, lines=tuple(lines)))

    def render(self) -> str:
        out = [self.title, "=" * len(self.title), "Configuration:"]
        out.extend(f"{label}: {format_value(value)}" for label, value in self.configuration.items())
        out.append("")
        out.append(self.loss_heading)
        out.append("Epoch\tError")
        out.extend(f"{epoch}\t{format_value(loss)}" for epoch, loss in self.loss_log)
        for section in self.sections:
            out.append("")
            if section.heading:
                out.append(section.heading)
            out.extend(section.lines)
        return "\n".join(out) + "\n"


def write_report(path: str | Path, report: ExperimentReport) -> Path:
    """Write ``report`` to ``path`` and return the path."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.render(), encoding="utf-8")
    return path


def boolean_row(inputs: np.ndarray, expected: np.ndarray, predicted: np.ndarray) -> str:
    if expected.size == 1:
        return (
            f"Input: {format_vector(inputs)}, Expected Output: {float(expected[0]):.1f}, "
            f"Predicted Output: {float(predicted[0]):.4f}"
        )
    return (
        f"Input: {format_vector(inputs)}, Expected Output: {format_vector(expected)}, "
        f"Predicted Output: {format_vector(np.round(predicted, 4))}"
    )


def regression_row(inputs: np.ndarray, expected: np.ndarray, predicted: np.ndarray) -> str:
    squared = float(np.sum((predicted - expected) ** 2))
    return (
        f"Input: {format_vector(inputs)}, Expected: {float(expected[0]):.4f}, "
        f"Predicted: {float(predicted[0]):.4f}, Squared Error: {squared:.4f}"
    )


__all__ = [
    "ExperimentReport",
    "ReportSection",
    "boolean_row",
    "format_vector",
    "regression_row",
    "write_report",
]
