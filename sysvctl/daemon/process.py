"""Process-table access for the supervisor."""

import signal
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

import psutil
from loguru import logger


class ProcessTable(ABC):
    """The operations the supervisor needs from the OS process table."""

    @abstractmethod
    def spawn(
        self,
        argv: list[str],
        *,
        cwd: str | None,
        stdout_log: Path,
        stderr_log: Path,
    ) -> int:
        """Start ``argv`` in the background, appending output to the logs. Returns its pid."""

    @abstractmethod
    def children(self, pid: int) -> list[int]:
        """Direct children of ``pid``, oldest first. Empty if it has none or is gone."""

    @abstractmethod
    def is_alive(self, pid: int) -> bool:
        """True if ``pid`` names a live (non-zombie) process."""

    @abstractmethod
    def send_signal(self, pid: int, sig: int) -> None:
        """Deliver ``sig`` to ``pid``; a vanished process is not an error."""

    @abstractmethod
    def reap(self, pid: int) -> None:
        """Wait for a process this table spawned to exit."""


class HostProcessTable(ProcessTable):
    """ProcessTable backed by subprocess and psutil."""

    def __init__(self) -> None:
        self._spawned: dict[int, subprocess.Popen] = {}

    def spawn(
        self,
        argv: list[str],
        *,
        cwd: str | None,
        stdout_log: Path,
        stderr_log: Path,
    ) -> int:
        stdout_log.parent.mkdir(parents=True, exist_ok=True)
        stderr_log.parent.mkdir(parents=True, exist_ok=True)
        with open(stdout_log, "ab") as out, open(stderr_log, "ab") as err:
            proc = subprocess.Popen(
                argv,
                cwd=cwd or None,
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=err,
                start_new_session=True,
            )
        self._spawned[proc.pid] = proc
        logger.debug(f"Spawned {argv[0]} as pid {proc.pid}")
        return proc.pid

    def children(self, pid: int) -> list[int]:
        try:
            kids = psutil.Process(pid).children()
        except psutil.NoSuchProcess:
            return []
        return [p.pid for p in sorted(kids, key=_create_time)]

    def is_alive(self, pid: int) -> bool:
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # Exists but owned by someone else
            return True

    def send_signal(self, pid: int, sig: int) -> None:
        try:
            psutil.Process(pid).send_signal(sig)
        except psutil.NoSuchProcess:
            logger.debug(f"pid {pid} already gone before {signal.Signals(sig).name}")
        except psutil.AccessDenied as e:
            logger.warning(f"Not permitted to signal pid {pid}: {e}")

    def reap(self, pid: int) -> None:
        proc = self._spawned.pop(pid, None)
        if proc is not None:
            proc.wait()


def _create_time(proc: psutil.Process) -> float:
    try:
        return proc.create_time()
    except psutil.Error:
        return 0.0
