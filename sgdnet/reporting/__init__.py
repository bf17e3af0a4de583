"""Reporting utilities for sgdnet."""

from .artifacts import load_parameters, save_parameters, write_manifest
from .logs import config_logger
from .metrics import CsvSink, JsonlSink, LoggingSink, MetricsCapture
from .plots import PlotAdapter

__all__ = [
    "write_manifest",
    "save_parameters",
    "load_parameters",
    "config_logger",
    "CsvSink",
    "JsonlSink",
    "LoggingSink",
    "MetricsCapture",
    "PlotAdapter",
]
