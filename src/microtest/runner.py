from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar, Union

from microtest.assertions.base import AssertionFailure
from microtest.config import TestConfig
from microtest.reporting.console import get_reporter

logger = logging.getLogger("microtest.runner")

TestBody = Callable[[], object]
F = TypeVar("F", bound=TestBody)


@dataclass(frozen=True)
class Success:
    duration_ns: int | None = None


@dataclass(frozen=True)
class Failure:
    error: AssertionFailure


IterationOutcome = Union[Success, Failure]


@dataclass
class TestReport:
    """Outcomes of one run, in iteration order."""

    __test__ = False

    config: TestConfig
    outcomes: list[IterationOutcome] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Success))

    @property
    def has_errors(self) -> bool:
        return self.success_count < self.config.repeat_count

    @property
    def passed(self) -> bool:
        return not self.has_errors

    @property
    def failures(self) -> list[AssertionFailure]:
        return [o.error for o in self.outcomes if isinstance(o, Failure)]

    @property
    def durations(self) -> list[int | None]:
        """One entry per iteration; None for failed or untimed iterations."""
        return [o.duration_ns if isinstance(o, Success) else None for o in self.outcomes]


class Test:
    """A named inline test, configured fluently and run once.

    >>> Test("Addition").time().repeat(10).run(lambda: check(1 + 2 == 3))
    """

    __test__ = False

    def __init__(self, name: str):
        self.config = TestConfig(name=name)
        self._started = False

    def _configure(self, **changes: object) -> Test:
        if self._started:
            raise RuntimeError(
                f"Test '{self.config.name}' cannot be configured after it has run"
            )
        self.config = TestConfig(**{**self.config.model_dump(), **changes})
        return self

    def time(self, enabled: bool = True) -> Test:
        """Measure the wall-clock duration of each iteration."""
        return self._configure(timed=enabled)

    def repeat(self, count: int) -> Test:
        """Invoke the body ``count`` times (at least 1)."""
        return self._configure(repeat_count=count)

    def run(self, body: TestBody) -> TestReport:
        """Run the body, print the report and return it.

        AssertionFailure is recorded per iteration and does not stop the
        remaining repetitions. Any other exception propagates.
        """
        if self._started:
            raise RuntimeError(f"Test '{self.config.name}' has already run")
        self._started = True

        config = self.config
        report = TestReport(config=config)
        logger.debug(
            f"Running test '{config.name}' "
            f"(timed={config.timed}, repeat={config.repeat_count})"
        )

        for iteration in range(config.repeat_count):
            try:
                if config.timed:
                    start = time.perf_counter_ns()
                    body()
                    stop = time.perf_counter_ns()
                    outcome: IterationOutcome = Success(duration_ns=stop - start)
                else:
                    body()
                    outcome = Success()
            except AssertionFailure as e:
                outcome = Failure(error=e)
                logger.debug(
                    f"Test '{config.name}' iter-{iteration}: "
                    f"assertion failed at {e.file}:{e.line}: {e.expression}"
                )
            except Exception as e:
                logger.debug(
                    f"Test '{config.name}' iter-{iteration}: aborted by {type(e).__name__}: {e}"
                )
                raise
            report.outcomes.append(outcome)

        logger.debug(
            f"Test '{config.name}' completed: "
            f"{report.success_count}/{config.repeat_count} iterations passed"
        )
        get_reporter().report(report)
        return report


def case(name: str, *, timed: bool = False, repeat: int = 1) -> Callable[[F], F]:
    """Decorator that runs the function immediately as a test body.

    The function is returned unchanged, so it stays callable.
    """

    def decorator(func: F) -> F:
        Test(name).time(timed).repeat(repeat).run(func)
        return func

    return decorator
