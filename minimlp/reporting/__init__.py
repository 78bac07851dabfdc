"""Reporting utilities for minimlp."""

from .metrics import JsonlSink, LossHistory
from .plots import PlotAdapter
from .report import ExperimentReport, write_report

__all__ = ["ExperimentReport", "JsonlSink", "LossHistory", "PlotAdapter", "write_report"]
