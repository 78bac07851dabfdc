"""Command line entry point for minimlp experiments."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Iterable

import yaml

from minimlp.training import pipelines

logger = logging.getLogger("cli.main")


def configure_logging() -> None:
    """Set the root log level from ``LOG_LEVEL`` (default ``INFO``)."""

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


def _format_result(result) -> str:
    payload = {
        "report": result.report_path,
        "final_loss": result.final_loss,
        "metrics": dict(result.metrics),
    }
    if result.metrics_path:
        payload["metrics_path"] = result.metrics_path
    if result.plot_path:
        payload["plot"] = result.plot_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Experiment to run",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--data-path", help="Letter-recognition data file for the letters preset"
    )
    parser.add_argument("--seed", type=int, help="Seed for initialisation and shuffling")
    parser.add_argument("--epochs", type=int, help="Override the number of epochs")
    parser.add_argument("--run-dir", help="Directory receiving the report and metrics")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a loss curve next to the report"
    )
    parser.add_argument(
        "--write-metrics", action="store_true", help="Stream per-epoch losses to metrics.jsonl"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging()

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)
    if args.config:
        config = _merge(config, _load_override(args.config))

    train_cfg = config.setdefault("train", {})
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.write_metrics:
        train_cfg["write_metrics"] = True
    if args.data_path:
        config.setdefault("data", {}).setdefault("options", {})["path"] = args.data_path

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    # MLPError subclasses ValueError, as do bad splits and epoch counts.
    try:
        result = pipelines.run_pipeline(config)
    except (ValueError, KeyError) as exc:
        logger.error("Experiment %r failed: %s", args.preset, exc)
        raise SystemExit(1) from exc

    print(_format_result(result))


if __name__ == "__main__":
    main()
