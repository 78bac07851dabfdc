"""Experiment assembly: presets, training and report writing."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import DimensionMismatch
from ..core.network import MLP
from ..core.outputs import OutputActivationKind
from ..core.types import TrainingExample
from ..data import registry
from ..reporting.metrics import JsonlSink, LossHistory
from ..reporting.plots import PlotAdapter
from ..reporting.report import ExperimentReport, boolean_row, regression_row, write_report
from .metrics import compute_metrics, default_metrics
from .trainer import Trainer, predict_examples

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"d_in": 2, "hidden": 4, "d_out": 1, "output_activation": "LINEAR"},
        "train": {
            "epochs": 2000,
            "batch_size": None,
            "lr": 1.0,
            "seed": 0,
            "shuffle": False,
            "loss_reduction": "sum",
            "log_every": 50,
            "log_final": False,
            "log_one_based": False,
            "run_dir": ".",
            "report_name": "XORExperimentResults.txt",
            "title": "XOR Experiment Results",
            "enable_plots": False,
            "write_metrics": False,
        },
    },
    "sine": {
        "data": {"name": "sine", "options": {"n_samples": 500, "n_train": 400, "seed": 0}},
        "model": {"d_in": 4, "hidden": 5, "d_out": 1, "output_activation": "LINEAR"},
        "train": {
            "epochs": 5000,
            "batch_size": 5,
            "lr": 0.01,
            "seed": 0,
            "shuffle": True,
            "loss_reduction": "sum",
            "log_every": 500,
            "log_final": True,
            "log_one_based": False,
            "sample_rows": 5,
            "run_dir": ".",
            "report_name": "SineExperimentResults.txt",
            "title": "Sine Experiment Results",
            "enable_plots": False,
            "write_metrics": False,
        },
    },
    "letters": {
        "data": {"name": "letters", "options": {"path": None, "train_fraction": 0.8}},
        "model": {"d_in": 16, "hidden": 40, "d_out": 26, "output_activation": "SOFTMAX"},
        "train": {
            "epochs": 2000,
            "batch_size": 10,
            "lr": 0.1,
            "seed": 42,
            "shuffle": True,
            "loss_reduction": "mean",
            "log_every": 200,
            "log_final": False,
            "log_one_based": True,
            "run_dir": ".",
            "report_name": "LetterRecognitionExperimentResults.txt",
            "title": "Letter Recognition Experiment Results",
            "enable_plots": False,
            "write_metrics": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset: {name!r}. Available presets: {available}") from exc


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`run_pipeline`."""

    report_path: str
    final_loss: float
    metrics: Mapping[str, float]
    loss_log: Tuple[Tuple[int, float], ...]
    metrics_path: str = ""
    plot_path: str = ""
    extra: Mapping[str, object] = field(default_factory=dict)


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train the configured network and write its text report."""

    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    options = {k: v for k, v in dict(data_cfg.get("options") or {}).items() if v is not None}
    dataset = registry.get_dataset(str(data_cfg["name"]), **options)
    data_spec = dataset.data_spec
    d_in, d_out = _check_dims(model_cfg, data_spec)

    hidden = int(model_cfg.get("hidden", 4))
    kind = OutputActivationKind.parse(model_cfg.get("output_activation", "SIGMOID"))
    epochs = int(train_cfg.get("epochs", 1))
    lr = float(train_cfg.get("lr", 0.1))
    batch_size = train_cfg.get("batch_size")
    batch_size = int(batch_size) if batch_size is not None else None
    seed = train_cfg.get("seed")
    seed = int(seed) if seed is not None else None
    init_seq, shuffle_seq = np.random.SeedSequence(seed).spawn(2)

    model = MLP(d_in, hidden, d_out, kind, rng=np.random.default_rng(init_seq))

    run_dir = Path(str(train_cfg.get("run_dir", ".")))
    _print_startup_summary(
        dataset_name=dataset.name,
        dims=model.topology.layer_dims,
        output_activation=kind.value,
        learning_rate=lr,
        epochs=epochs,
        batch_size=batch_size,
        splits=dataset.splits,
        param_count=model.parameter_count(),
    )

    history = LossHistory(
        int(train_cfg.get("log_every", 1)),
        one_based=bool(train_cfg.get("log_one_based", False)),
        include_last=bool(train_cfg.get("log_final", False)),
        epochs=epochs,
    )
    callbacks: List[object] = [history]
    sink = None
    if train_cfg.get("write_metrics", False):
        sink = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
        callbacks.append(sink)
    title = str(train_cfg.get("title", f"{dataset.name} experiment results"))
    plots = PlotAdapter(
        run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)), title=title
    )
    callbacks.append(plots)

    trainer = Trainer(
        model,
        learning_rate=lr,
        batch_size=batch_size,
        rng=np.random.default_rng(shuffle_seq),
        callbacks=callbacks,
        loss_reduction=str(train_cfg.get("loss_reduction", "sum")),
    )
    result = trainer.run(dataset.train, epochs, shuffle=bool(train_cfg.get("shuffle", True)))
    plot_path = plots.close()

    report = ExperimentReport(
        title=title,
        configuration={
            "Number of Inputs": d_in,
            "Number of Hidden Units": hidden,
            "Number of Outputs": d_out,
            "Learning Rate": lr,
            "Max Epochs": epochs,
            "Batch Size": batch_size if batch_size is not None else "full",
            "Activation Function": kind.value,
        },
        loss_heading=_loss_heading(history),
        loss_log=list(history.records),
    )
    metrics = _evaluate(
        report,
        model,
        dataset.test,
        task_type=data_spec.task_type,
        final_loss=result.final_loss,
        sample_rows=int(train_cfg.get("sample_rows", 5)),
    )

    report_path = write_report(run_dir / str(train_cfg.get("report_name", "results.txt")), report)
    logger.info("Results saved to %s", report_path)

    return RunResult(
        report_path=str(report_path),
        final_loss=result.final_loss,
        metrics=metrics,
        loss_log=tuple(history.records),
        metrics_path=str(sink.path) if sink is not None else "",
        plot_path=str(plot_path) if plot_path is not None else "",
        extra={
            "updates": result.updates,
            "dataset": dict(dataset.provenance),
            "model": dict(model.describe()),
        },
    )


def _check_dims(model_cfg: Mapping[str, object], data_spec: registry.DataSpec) -> tuple[int, int]:
    d_in = int(model_cfg.get("d_in", data_spec.d_in))
    d_out = int(model_cfg.get("d_out", data_spec.d_out))
    if d_in != data_spec.d_in:
        raise DimensionMismatch("configured d_in", data_spec.d_in, d_in)
    if d_out != data_spec.d_out:
        raise DimensionMismatch("configured d_out", data_spec.d_out, d_out)
    return d_in, d_out


def _loss_heading(history: LossHistory) -> str:
    if history.include_last or history.one_based:
        return "Training Error Over Selected Epochs:"
    return f"Training Error Over Epochs (Logged Every {history.interval} Epochs):"


def _evaluate(
    report: ExperimentReport,
    model: MLP,
    examples: Sequence[TrainingExample],
    *,
    task_type: str,
    final_loss: float,
    sample_rows: int,
) -> Dict[str, float]:
    predictions, targets = predict_examples(model, examples)
    metrics = dict(compute_metrics(default_metrics(task_type), predictions, targets))

    if task_type == "boolean":
        metrics["rmse_percent"] = metrics["rmse"] * 100.0
        rows = [
            boolean_row(example.inputs, example.targets, predicted)
            for example, predicted in zip(examples, predictions)
        ]
        report.add_section("Results:", rows)
        report.add_section(
            None, [f"Final Root Mean Squared Error: {metrics['rmse_percent']:.2f}%"]
        )
    elif task_type == "regression":
        metrics["final_training_error"] = final_loss
        report.add_section(
            None,
            [
                f"Final Training Error: {final_loss!r}",
                f"Final Test Error: {metrics['half_sse']!r}",
            ],
        )
        rows = [
            regression_row(example.inputs, example.targets, predicted)
            for example, predicted in zip(examples[:sample_rows], predictions)
        ]
        report.add_section("Sample Calculations from Test Set:", rows)
    else:
        metrics["accuracy_percent"] = metrics["accuracy"] * 100.0
        report.add_section(
            None, [f"Final Test Set Accuracy: {metrics['accuracy_percent']:.2f}%"]
        )
    return metrics


def _print_startup_summary(
    *,
    dataset_name: str,
    dims: Sequence[int],
    output_activation: str,
    learning_rate: float,
    epochs: int,
    batch_size: int | None,
    splits: Mapping[str, int],
    param_count: int,
) -> None:
    print("=== minimlp run ===")
    print(f"Dataset       : {dataset_name} {json.dumps(dict(splits))}")
    print(f"Dimensions    : {list(dims)}")
    print(f"Output        : {output_activation}")
    print(f"Learning rate : {learning_rate}")
    print(f"Epochs        : {epochs}")
    print(f"Batch size    : {batch_size if batch_size is not None else 'full'}")
    print(f"Parameters    : {param_count}")
    print("===================")


__all__ = ["RunResult", "run_pipeline", "load_preset", "presets"]
