"""Assertion signal for inline test bodies."""

from microtest.assertions.base import AssertionFailure, assert_that, check

__all__ = ["AssertionFailure", "assert_that", "check"]
