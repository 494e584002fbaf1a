"""Assertion signal raised out of a test body when a check fails."""

from __future__ import annotations

import ast
import inspect
import linecache
from types import FrameType
from typing import Any

UNKNOWN_EXPRESSION = "<unknown>"


class AssertionFailure(Exception):
    """A failed check inside a test body.

    Attributes:
        expression: Literal source text of the failed condition. Only
            displayed, never evaluated.
        line: Source line the check was written on.
        file: Source file the check was written in.
    """

    def __init__(self, expression: str, line: int, file: str):
        super().__init__(expression, line, file)
        self._expression = expression
        self._line = line
        self._file = file

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def line(self) -> int:
        return self._line

    @property
    def file(self) -> str:
        return self._file

    def __str__(self) -> str:
        return f"Assertion failed: {self._expression} ({self._file}:{self._line})"


def assert_that(condition: Any, expression: str, line: int, file: str) -> None:
    """Raise AssertionFailure with the given call-site metadata unless condition holds."""
    if not condition:
        raise AssertionFailure(expression, line, file)


def check(condition: Any, expression: str | None = None) -> None:
    """Like assert_that, but captures file, line and expression text from the caller."""
    if condition:
        return

    caller = inspect.currentframe().f_back
    try:
        filename = caller.f_code.co_filename
        lineno = caller.f_lineno
        if expression is None:
            expression = _call_site_expression(caller)
    finally:
        # break the frame reference cycle
        del caller

    raise AssertionFailure(expression, lineno, filename)


def _call_site_expression(frame: FrameType) -> str:
    """Recover the literal text of the first argument passed to check()."""
    expression = _positioned_expression(frame)
    if expression is not None:
        return expression
    return _line_expression(frame)


def _positioned_expression(frame: FrameType) -> str | None:
    """Slice the exact call out of the caller's source using instruction positions.

    Needs ``co_positions`` (Python 3.11+) and column info; returns None
    whenever either is missing or the slice is not a call with arguments.
    """
    code = frame.f_code
    if not hasattr(code, "co_positions") or frame.f_lasti < 0:
        return None

    # one position per 2-byte code unit; f_lasti is the CALL into check()
    positions = list(code.co_positions())
    index = frame.f_lasti // 2
    if index >= len(positions):
        return None
    lineno, end_lineno, col, end_col = positions[index]
    if None in (lineno, end_lineno, col, end_col):
        return None

    lines = [
        linecache.getline(code.co_filename, n, frame.f_globals)
        for n in range(lineno, end_lineno + 1)
    ]
    if not all(lines):
        return None

    # column offsets are UTF-8 byte offsets
    encoded = [line.encode("utf-8") for line in lines]
    if lineno == end_lineno:
        snippet = encoded[0][col:end_col]
    else:
        snippet = encoded[0][col:] + b"".join(encoded[1:-1]) + encoded[-1][:end_col]

    try:
        source = snippet.decode("utf-8")
        call = ast.parse(source, mode="eval").body
    except (SyntaxError, ValueError):
        return None
    if not isinstance(call, ast.Call) or not call.args:
        return None

    segment = ast.get_source_segment(source, call.args[0])
    if not segment:
        return None
    return " ".join(part.strip() for part in segment.splitlines())


def _line_expression(frame: FrameType) -> str:
    filename = frame.f_code.co_filename
    source_line = linecache.getline(filename, frame.f_lineno, frame.f_globals)
    if not source_line:
        return UNKNOWN_EXPRESSION

    text = source_line.strip()
    try:
        tree = ast.parse(text)
    except SyntaxError:
        # e.g. a lambda body or a call split over several lines
        tree = _parse_lambda_body(text)
        if tree is None:
            return text

    for node in ast.walk(tree):
        if (
            isinstance(node, ast.Call)
            and _call_name(node.func) == "check"
            and node.args
        ):
            segment = ast.get_source_segment(text, node.args[0])
            if segment:
                return segment
    return text


def _parse_lambda_body(text: str) -> ast.AST | None:
    # A lambda line that closes a call opened on an earlier line, such as
    # `    lambda: check(a == b))`, only parses once the tail is dropped.
    while text:
        text = text[:-1].rstrip()
        try:
            return ast.parse(text)
        except SyntaxError:
            continue
    return None


def _call_name(func: ast.expr) -> str | None:
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None
