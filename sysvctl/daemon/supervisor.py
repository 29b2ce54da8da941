"""Lifecycle state machine behind every generated init script.

Each invocation of ``/etc/init.d/<name> start|stop|restart|status`` runs
one transition and exits. Nothing persists between invocations except the
pid file and the OS process table, so every transition re-derives the
current state from those two.
"""

import signal
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from sysvctl.daemon.logger import ServiceLogger
from sysvctl.daemon.pidfile import PidFile
from sysvctl.daemon.polling import Clock, SystemClock, poll_until
from sysvctl.daemon.process import HostProcessTable, ProcessTable

ACTIONS = ("start", "stop", "restart", "status")

DISCOVERY_ATTEMPTS = 30
STOP_ATTEMPTS = 10
POLL_INTERVAL = 1.0


@dataclass(frozen=True)
class LaunchSpec:
    """What the init script hands the supervisor."""

    name: str
    command: str
    pid_file: Path
    stdout_log: Path
    stderr_log: Path
    user: str = ""
    working_directory: str = ""
    su: str = "/bin/su"
    shell: str = "/bin/bash"
    script: Path | None = None

    def argv(self) -> list[str]:
        """Launcher command line; switches user only when one is configured."""
        if self.user:
            return [self.su, "-", self.user, "-s", self.shell, "-c", self.command]
        return [self.shell, "-c", self.command]


def live_pid(pid_file: PidFile, processes: ProcessTable) -> int | None:
    """The tracked pid if the pid file names a live process, else None."""
    if not pid_file.exists():
        return None
    pid = pid_file.read()
    if pid is None or not processes.is_alive(pid):
        return None
    return pid


class Supervisor:
    """Runs one lifecycle transition for a single service."""

    def __init__(
        self,
        spec: LaunchSpec,
        *,
        logger: ServiceLogger,
        processes: ProcessTable | None = None,
        clock: Clock | None = None,
        console: Console | None = None,
        invoke: Callable[[str], int] | None = None,
    ):
        self.spec = spec
        self.log = logger
        self.pid_file = PidFile(spec.pid_file)
        self.processes = processes or HostProcessTable()
        self.clock = clock or SystemClock()
        self.console = console or Console(highlight=False)
        self._invoke = invoke or self._invoke_script

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def run(self, action: str) -> int:
        """Run ``action`` and return the script's exit code."""
        handlers: dict[str, Callable[[], int]] = {
            "start": self.start,
            "stop": self.stop,
            "restart": self.restart,
            "status": self.status,
        }
        handler = handlers.get(action)
        if handler is None:
            script = self.spec.script or self.spec.name
            self._say(f"Usage: {script} {{{'|'.join(ACTIONS)}}}")
            return 1
        return handler()

    def is_running(self) -> bool:
        return live_pid(self.pid_file, self.processes) is not None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> int:
        name = self.spec.name
        if self.is_running():
            self._say("Already started")
            return 0

        self._say(f"Starting {name}")
        launcher = self.processes.spawn(
            self.spec.argv(),
            cwd=self.spec.working_directory or None,
            stdout_log=self.spec.stdout_log,
            stderr_log=self.spec.stderr_log,
        )
        worker = self._discover_worker(launcher)
        if worker is not None:
            self.pid_file.write(worker)
            self.processes.send_signal(launcher, signal.SIGKILL)
            self.processes.reap(launcher)
            self.log.info(f"Started {name}: worker pid {worker} (launcher {launcher} killed)")
        else:
            self.pid_file.write(launcher)
            self.log.info(f"Started {name}: no child of launcher, tracking pid {launcher}")

        if not self.is_running():
            self._say(f"Unable to start, see {self.spec.stdout_log} and {self.spec.stderr_log}")
            self.log.error(f"{name} failed to start")
            return 1
        return 0

    def stop(self) -> int:
        name = self.spec.name
        pid = live_pid(self.pid_file, self.processes)
        if pid is None:
            self._say("Not running")
            return 0

        self.console.print(f"Stopping {name}..", end="", markup=False, soft_wrap=True)
        self.processes.send_signal(pid, signal.SIGTERM)
        poll_until(
            lambda: not self.is_running(),
            attempts=STOP_ATTEMPTS,
            interval=POLL_INTERVAL,
            clock=self.clock,
            on_wait=lambda: self.console.print(".", end="", markup=False, soft_wrap=True),
        )
        self.console.print()

        if self.is_running():
            self._say("Not stopped; may still be shutting down or shutdown may have failed")
            self.log.error(f"{name} (pid {pid}) did not stop within {STOP_ATTEMPTS}s")
            return 1

        self._say("Stopped")
        self.pid_file.remove()
        self.log.info(f"Stopped {name} (pid {pid})")
        return 0

    def restart(self) -> int:
        self._invoke("stop")
        if self.is_running():
            self._say("Unable to stop, will not attempt to start")
            self.log.error(f"{self.spec.name} restart aborted: still running")
            return 1
        return self._invoke("start")

    def status(self) -> int:
        if self.is_running():
            self._say(f"{self.spec.name} Running")
            return 0
        self._say(f"{self.spec.name} Stopped")
        return 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _discover_worker(self, launcher: int) -> int | None:
        """Wait for the launcher to fork the real worker.

        Returns None if no child shows up in the window, or as soon as the
        launcher exits without one.
        """
        found: list[int] = []

        def settled() -> bool:
            found[:] = self.processes.children(launcher)
            return bool(found) or not self.processes.is_alive(launcher)

        poll_until(
            settled,
            attempts=DISCOVERY_ATTEMPTS,
            interval=POLL_INTERVAL,
            clock=self.clock,
        )
        return found[0] if found else None

    def _invoke_script(self, action: str) -> int:
        """Run ``action`` as a separate invocation of the init script."""
        if self.spec.script is None:
            return self.run(action)
        return subprocess.run([str(self.spec.script), action]).returncode

    def _say(self, message: str) -> None:
        self.console.print(message, markup=False, soft_wrap=True)
