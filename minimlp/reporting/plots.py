"""Optional loss-curve figure for a finished run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping

import numpy as np

logger = logging.getLogger(__name__)


class PlotAdapter:
    """Draw the per-epoch training error once a run finishes.

    Nothing is collected or written unless ``enable_plots`` is set. The figure
    is rendered with the non-interactive Agg backend, so runs on machines
    without a display work the same.
    """

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        *,
        filename: str = "loss.png",
        title: str = "Training Error",
    ) -> None:
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.filename = filename
        self.title = title
        self.losses: List[float] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if self.enable_plots:
            self.losses.append(float(metrics["loss"]))

    __call__ = on_epoch

    def close(self) -> Path | None:
        """Write the figure and return its path, or ``None`` when disabled."""

        if not self.enable_plots or not self.losses:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(6, 4))
        ax.plot(np.arange(len(self.losses)), self.losses, linewidth=1.0)
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Error")
        ax.set_title(self.title)
        fig.tight_layout()

        self.run_dir.mkdir(parents=True, exist_ok=True)
        path = self.run_dir / self.filename
        fig.savefig(path)
        plt.close(fig)
        logger.debug("Loss curve with %d epochs written to %s", len(self.losses), path)
        return path
