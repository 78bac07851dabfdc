import json
from pathlib import Path

import pytest

from minimlp.core.errors import DimensionMismatch
from minimlp.training import pipelines


def _preset(name, tmp_path, **train):
    config = pipelines.load_preset(name)
    config["train"].update(run_dir=str(tmp_path), **train)
    return config


def _table(lines):
    start = lines.index("Epoch\tError") + 1
    rows = []
    for line in lines[start:]:
        if not line:
            break
        epoch, _ = line.split("\t")
        rows.append(int(epoch))
    return rows


def test_presets_cover_the_three_experiments():
    assert set(pipelines.presets()) == {"xor", "sine", "letters"}
    with pytest.raises(KeyError):
        pipelines.load_preset("parity")


def test_load_preset_returns_an_independent_copy():
    config = pipelines.load_preset("xor")
    config["train"]["epochs"] = 1
    assert pipelines.load_preset("xor")["train"]["epochs"] == 2000


def test_xor_report(tmp_path):
    result = pipelines.run_pipeline(_preset("xor", tmp_path, epochs=100))
    path = Path(result.report_path)
    assert path == tmp_path / "XORExperimentResults.txt"

    lines = path.read_text().splitlines()
    assert lines[0] == "XOR Experiment Results"
    assert "Number of Hidden Units: 4" in lines
    assert "Activation Function: LINEAR" in lines
    assert _table(lines) == [0, 50]
    assert lines.index("Results:") > lines.index("Epoch\tError")
    assert sum(line.startswith("Input: ") for line in lines) == 4
    assert lines[-1].startswith("Final Root Mean Squared Error: ")
    assert "rmse_percent" in result.metrics
    assert result.extra["updates"] == 100


def test_xor_preset_learns_the_truth_table(tmp_path):
    config = pipelines.load_preset("xor")
    config["train"]["run_dir"] = str(tmp_path)
    result = pipelines.run_pipeline(config)

    epochs = [epoch for epoch, _ in result.loss_log]
    assert epochs[0] == 0 and epochs[-1] == 1950
    first, last = result.loss_log[0][1], result.loss_log[-1][1]
    assert last < 0.01 * first
    assert result.metrics["rmse_percent"] < 10.0
    assert result.extra["updates"] == 2000
    assert result.extra["model"] == {
        "input_count": 2,
        "hidden_count": 4,
        "output_count": 1,
        "output_activation": "LINEAR",
    }


def test_sine_report(tmp_path):
    result = pipelines.run_pipeline(_preset("sine", tmp_path, epochs=20, log_every=5))
    lines = Path(result.report_path).read_text().splitlines()
    assert lines[0] == "Sine Experiment Results"
    assert _table(lines) == [0, 5, 10, 15, 19]
    assert any(line.startswith("Final Training Error: ") for line in lines)
    assert any(line.startswith("Final Test Error: ") for line in lines)
    samples = lines[lines.index("Sample Calculations from Test Set:") + 1 :]
    assert len(samples) == 5
    assert all("Squared Error: " in line for line in samples)
    assert result.metrics["final_training_error"] == result.final_loss
    assert result.extra["updates"] == 20 * 80


def test_letters_report(tmp_path):
    result = pipelines.run_pipeline(_preset("letters", tmp_path, epochs=10, log_every=5))
    path = Path(result.report_path)
    assert path.name == "LetterRecognitionExperimentResults.txt"
    lines = path.read_text().splitlines()
    assert _table(lines) == [5, 10]
    assert "Batch Size: 10" in lines
    assert lines[-1].startswith("Final Test Set Accuracy: ")
    assert 0.0 <= result.metrics["accuracy"] <= 1.0
    assert result.extra["dataset"]["rows"] == 40


def test_same_seed_gives_identical_reports(tmp_path):
    first = pipelines.run_pipeline(_preset("sine", tmp_path / "a", epochs=5))
    second = pipelines.run_pipeline(_preset("sine", tmp_path / "b", epochs=5))
    assert Path(first.report_path).read_text() == Path(second.report_path).read_text()


def test_metrics_sink_and_plot(tmp_path):
    result = pipelines.run_pipeline(
        _preset("xor", tmp_path, epochs=7, write_metrics=True, enable_plots=True)
    )
    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert [r["epoch"] for r in records] == list(range(7))
    assert records[0]["seed"] == 0
    assert Path(result.plot_path).exists()


def test_mismatched_dimensions_are_rejected(tmp_path):
    config = _preset("xor", tmp_path, epochs=1)
    config["model"]["d_in"] = 3
    with pytest.raises(DimensionMismatch):
        pipelines.run_pipeline(config)
    assert not (tmp_path / "XORExperimentResults.txt").exists()


def test_unknown_dataset_is_a_key_error(tmp_path):
    config = _preset("xor", tmp_path, epochs=1)
    config["data"]["name"] = "mnist"
    with pytest.raises(KeyError):
        pipelines.run_pipeline(config)
