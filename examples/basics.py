"""Inline tests that pass and fail. Run with: microtest run examples/basics.py"""

from microtest import Test, assert_that, check

Test("Addition").run(lambda: check(1 + 2 == 3))

Test("Failed Test").run(lambda: check(0 == 1))


def explicit_metadata():
    assert_that("abc".upper() == "ABC", '"abc".upper() == "ABC"', 11, __file__)


Test("Explicit metadata").run(explicit_metadata)
