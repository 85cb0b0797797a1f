"""Logging and report helpers."""

from .event_sink import JsonlEventSink, generate_plotly_report, write_aligned_csv
from .logger import HumanLogger

__all__ = ["HumanLogger", "JsonlEventSink", "generate_plotly_report", "write_aligned_csv"]
