"""Reporters that consume scheduler events."""

from parallel_runner.reporters.collector import ResultCollector, format_output
from parallel_runner.reporters.console import ConsoleReporter
from parallel_runner.reporters.loading import ReporterNotFoundError, load_reporter

__all__ = [
    "ConsoleReporter",
    "ReporterNotFoundError",
    "ResultCollector",
    "format_output",
    "load_reporter",
]
