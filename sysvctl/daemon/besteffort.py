"""Collect-and-log policy for filesystem steps that must not abort a run."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger


@dataclass
class BestEffort:
    """
    Runs filesystem actions, recording failures instead of raising.

    Use as a context manager; on exit one warning summarizes everything that
    failed, so partial registration or cleanup stays visible in the logs.
    """

    action: str
    done: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, OSError]] = field(default_factory=list)

    def attempt(self, target: Path, fn: Callable[[], object]) -> bool:
        try:
            fn()
        except OSError as e:
            logger.debug(f"{self.action} {target} failed: {e}")
            self.failed.append((target, e))
            return False
        self.done.append(target)
        return True

    def __enter__(self) -> "BestEffort":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.failed:
            summary = ", ".join(f"{p} ({e.strerror or e})" for p, e in self.failed)
            logger.warning(f"{self.action}: {len(self.failed)} step(s) skipped: {summary}")
        if self.done:
            logger.debug(f"{self.action}: {', '.join(str(p) for p in self.done)}")
