from __future__ import annotations

from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Iterator

import typer

from microtest.config import ColorMode
from microtest.metrics import format_stats

if TYPE_CHECKING:
    from microtest.runner import TestReport

PASS_MARKER = "[✓]"
FAIL_MARKER = "[x]"


class ConsoleReporter:
    """Renders test reports as text lines and tallies outcomes.

    Colors are applied with ANSI styles; ``typer.echo`` strips them when
    color is disabled or (in AUTO mode) the stream is not a terminal.
    """

    def __init__(self, stream: IO[str] | None = None, color: ColorMode = ColorMode.AUTO):
        self.stream = stream
        self.color = color
        self.passed = 0
        self.failed = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def summary_line(self, report: TestReport) -> str:
        if report.has_errors:
            marker = typer.style(FAIL_MARKER, fg=typer.colors.RED, bold=True)
        else:
            marker = typer.style(PASS_MARKER, fg=typer.colors.GREEN)
        line = f"{marker} {report.name}"

        if report.config.timed and report.success_count > 0:
            line += f" ({format_stats(report.durations)})"
        return line

    def detail_lines(self, report: TestReport) -> list[str]:
        lines: list[str] = []
        if not report.has_errors:
            return lines
        for error in report.failures:
            lines.extend(
                [
                    "",
                    f"Assertion failed: {error.expression}",
                    f"{error.file} ({error.line})",
                    "",
                ]
            )
        return lines

    def report(self, report: TestReport) -> None:
        """Write the summary line and any failure detail blocks."""
        if report.has_errors:
            self.failed += 1
        else:
            self.passed += 1

        for line in [self.summary_line(report), *self.detail_lines(report)]:
            typer.echo(line, file=self.stream, color=self.color.as_echo_flag())


_active_reporter: ConsoleReporter | None = None


def get_reporter() -> ConsoleReporter:
    """Return the process-wide reporter, creating a stdout one on first use."""
    global _active_reporter
    if _active_reporter is None:
        _active_reporter = ConsoleReporter()
    return _active_reporter


@contextmanager
def use_reporter(reporter: ConsoleReporter) -> Iterator[ConsoleReporter]:
    """Temporarily make ``reporter`` the one used by ``Test.run``."""
    global _active_reporter
    previous = _active_reporter
    _active_reporter = reporter
    try:
        yield reporter
    finally:
        _active_reporter = previous
