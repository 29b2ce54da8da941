"""Fixed-count polling used by the supervisor's bounded waits."""

import time
from collections.abc import Callable
from typing import Protocol


class Clock(Protocol):
    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Real wall-clock sleeping."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


def poll_until(
    predicate: Callable[[], bool],
    *,
    attempts: int,
    interval: float,
    clock: Clock,
    on_wait: Callable[[], None] | None = None,
) -> bool:
    """Check ``predicate`` up to ``attempts`` times, sleeping ``interval`` between.

    There is no backoff: every wait is the same length, and a sleep follows
    every failed check including the last one.

    Args:
        predicate: Condition to wait for.
        attempts: Maximum number of checks.
        interval: Seconds to sleep after each failed check.
        clock: Source of sleeping, replaceable in tests.
        on_wait: Called before each sleep (progress output).

    Returns:
        True as soon as the predicate holds, False once attempts run out.
    """
    for _ in range(attempts):
        if predicate():
            return True
        if on_wait is not None:
            on_wait()
        clock.sleep(interval)
    return False
