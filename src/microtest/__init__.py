"""Inline unit tests with a console pass/fail report."""

from microtest.assertions import AssertionFailure, assert_that, check
from microtest.metrics import DurationStats, compute_stats, format_duration, format_stats
from microtest.reporting.console import ConsoleReporter, use_reporter
from microtest.runner import Failure, Success, Test, TestReport, case

__all__ = [
    "AssertionFailure",
    "ConsoleReporter",
    "DurationStats",
    "Failure",
    "Success",
    "Test",
    "TestReport",
    "assert_that",
    "case",
    "check",
    "compute_stats",
    "format_duration",
    "format_stats",
    "use_reporter",
]
