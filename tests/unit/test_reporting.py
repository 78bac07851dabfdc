import json

from minimlp.reporting.metrics import JsonlSink, LossHistory
from minimlp.reporting.plots import PlotAdapter
from minimlp.reporting.report import ExperimentReport, format_vector, write_report


def _feed(history, epochs):
    for epoch in range(epochs):
        history.on_epoch(epoch, {"loss": float(epoch)})
    return [epoch for epoch, _ in history.records]


def test_fixed_interval_schedule():
    assert _feed(LossHistory(50), 2000) == list(range(0, 2000, 50))


def test_interval_plus_final_epoch_schedule():
    logged = _feed(LossHistory(500, include_last=True, epochs=5000), 5000)
    assert logged == list(range(0, 5000, 500)) + [4999]


def test_one_based_schedule():
    history = LossHistory(200, one_based=True, epochs=2000)
    assert _feed(history, 2000) == list(range(200, 2001, 200))
    assert history.losses[0] == 199.0


def test_report_layout(tmp_path):
    report = ExperimentReport(
        title="XOR Experiment Results",
        configuration={"Number of Inputs": 2, "Learning Rate": 1.0},
        loss_heading="Training Error Over Epochs (Logged Every 50 Epochs):",
        loss_log=[(0, 0.75), (50, 0.5)],
    )
    report.add_section("Results:", ["Input: [0.0, 1.0], Expected Output: 1.0, Predicted Output: 0.9000"])
    report.add_section(None, ["Final Root Mean Squared Error: 10.00%"])
    path = write_report(tmp_path / "out" / "report.txt", report)

    lines = path.read_text().splitlines()
    assert lines[0] == "XOR Experiment Results"
    assert lines[1] == "=" * len(lines[0])
    assert lines[2] == "Configuration:"
    assert "Learning Rate: 1.0" in lines
    assert lines.index("Epoch\tError") == lines.index(report.loss_heading) + 1
    assert "50\t0.5" in lines
    assert lines[-1] == "Final Root Mean Squared Error: 10.00%"
    assert lines[-2] == ""


def test_format_vector_matches_list_notation():
    assert format_vector([0, 1]) == "[0.0, 1.0]"


def test_jsonl_sink_writes_one_record_per_epoch(tmp_path):
    sink = JsonlSink(tmp_path / "metrics.jsonl", seed=5)
    sink.on_epoch(0, {"loss": 1.5})
    sink(1, {"loss": 1.0})
    records = [json.loads(line) for line in sink.path.read_text().splitlines()]
    assert [r["epoch"] for r in records] == [0, 1]
    assert records[1]["loss"] == 1.0
    assert records[0]["seed"] == 5 and records[0]["split"] == "train"


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_epoch(0, {"loss": 1.0})
    adapter.on_epoch(1, {"loss": 0.5})
    path = adapter.close()
    assert path == tmp_path / "loss.png"
    assert path.exists()


def test_plot_adapter_disabled(tmp_path):
    adapter = PlotAdapter(tmp_path / "none")
    adapter.on_epoch(0, {"loss": 1.0})
    assert adapter.close() is None
    assert not (tmp_path / "none").exists()


def test_jsonl_sink_keeps_numeric_metrics_only(tmp_path):
    sink = JsonlSink(tmp_path / "run" / "metrics.jsonl", split="test")
    sink.on_epoch(3, {"loss": 2, "flag": True, "note": "warmup"})
    (record,) = [json.loads(line) for line in sink.path.read_text().splitlines()]
    assert record == {"epoch": 3, "split": "test", "seed": None, "loss": 2.0}
    assert sink.count == 1


def test_plot_adapter_creates_run_dir_on_close(tmp_path):
    adapter = PlotAdapter(tmp_path / "later", enable_plots=True, filename="curve.png", title="Sine")
    assert not (tmp_path / "later").exists()
    adapter.on_epoch(0, {"loss": 0.25})
    assert adapter.losses == [0.25]
    assert adapter.close() == tmp_path / "later" / "curve.png"
