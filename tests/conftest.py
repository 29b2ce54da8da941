"""Shared test fixtures and fakes."""

import io
import logging
import signal
from pathlib import Path

import pytest
from rich.console import Console

from sysvctl.config.schema import Config, PathsConfig, ToolsConfig
from sysvctl.daemon.base import ServiceDescriptor
from sysvctl.daemon.process import ProcessTable
from sysvctl.daemon.supervisor import LaunchSpec

# =============================================================================
# Fakes
# =============================================================================


class FakeProcessTable(ProcessTable):
    """In-memory process table.

    ``worker_after`` is the number of ``children()`` polls after which the
    launcher gains a child (None: never). ``launcher_lifetime`` is the number
    of polls after which a childless launcher exits. ``unkillable`` pids
    ignore signals.
    """

    def __init__(
        self,
        worker_after: int | None = 1,
        launcher_dies: bool = False,
        launcher_lifetime: int | None = None,
    ):
        self.worker_after = worker_after
        self.launcher_dies = launcher_dies
        self.launcher_lifetime = launcher_lifetime
        self.alive: set[int] = set()
        self.unkillable: set[int] = set()
        self.kids: dict[int, list[int]] = {}
        self.spawned: list[dict] = []
        self.signals: list[tuple[int, int]] = []
        self.reaped: list[int] = []
        self.polls = 0
        self._next_pid = 1000

    def add_process(self, pid: int) -> int:
        self.alive.add(pid)
        return pid

    def spawn(self, argv, *, cwd, stdout_log, stderr_log) -> int:
        self._next_pid += 10
        pid = self._next_pid
        self.spawned.append(
            {"argv": argv, "cwd": cwd, "stdout_log": stdout_log, "stderr_log": stderr_log, "pid": pid}
        )
        if not self.launcher_dies:
            self.alive.add(pid)
        self.polls = 0
        return pid

    def children(self, pid: int) -> list[int]:
        self.polls += 1
        if pid not in self.kids and self.worker_after is not None and self.polls >= self.worker_after:
            self.kids[pid] = [self.add_process(pid + 1)]
        if pid not in self.kids and self.launcher_lifetime is not None and self.polls >= self.launcher_lifetime:
            self.alive.discard(pid)
        return list(self.kids.get(pid, []))

    def is_alive(self, pid: int) -> bool:
        return pid in self.alive

    def send_signal(self, pid: int, sig: int) -> None:
        self.signals.append((pid, sig))
        if pid not in self.unkillable and sig in (signal.SIGTERM, signal.SIGKILL):
            self.alive.discard(pid)

    def reap(self, pid: int) -> None:
        self.reaped.append(pid)


class VirtualClock:
    """Clock that records sleeps instead of sleeping."""

    def __init__(self):
        self.sleeps: list[float] = []

    @property
    def elapsed(self) -> float:
        return sum(self.sleeps)

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


class RecordingLogger:
    """ServiceLogger that keeps (level, message) pairs."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))


class CapturingHandler(logging.Handler):
    """Stands in for SysLogHandler so tests never open a syslog socket."""

    def __init__(self, *args, **kwargs):
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage().strip())


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Host layout rooted in a temporary directory, with rc0.d..rc6.d present."""
    etc = tmp_path / "etc"
    for level in "0123456":
        (etc / f"rc{level}.d").mkdir(parents=True)
    return Config(
        paths=PathsConfig(
            init_dir=etc / "init.d",
            run_dir=tmp_path / "var" / "run",
            log_dir=tmp_path / "var" / "log" / "opsramp",
            legacy_log_dir=tmp_path / "var" / "log",
            rc_root=etc,
            sysconfig_dir=etc / "sysconfig",
        ),
        tools=ToolsConfig(
            chkconfig=tmp_path / "sbin" / "chkconfig",
            update_rc_d=tmp_path / "usr" / "sbin" / "update-rc.d",
            python="/usr/bin/python3",
        ),
    )


@pytest.fixture
def descriptor() -> ServiceDescriptor:
    return ServiceDescriptor(
        name="myworker",
        display_name="My Worker",
        description="Processes the queue",
        executable="/opt/myworker/bin/worker",
        arguments=("--port", "8080"),
        working_directory="/opt/myworker",
        user_name="svc",
    )


@pytest.fixture
def launch_spec(tmp_path: Path) -> LaunchSpec:
    return LaunchSpec(
        name="myworker",
        command="/opt/myworker/bin/worker --port 8080",
        pid_file=tmp_path / "run" / "myworker.pid",
        stdout_log=tmp_path / "log" / "myworker.log",
        stderr_log=tmp_path / "log" / "myworker.err",
        user="svc",
        working_directory="/opt/myworker",
        su="/sbin/runuser",
        shell="/bin/bash",
    )


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def service_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    return Console(file=output, highlight=False, color_system=None, width=200)
