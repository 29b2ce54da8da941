"""SysV init backend: /etc/init.d scripts plus runlevel registration."""

import os
import subprocess
from pathlib import Path

from loguru import logger

from sysvctl.config.schema import Config
from sysvctl.daemon.base import ServiceBackend, ServiceDescriptor, ServiceInfo
from sysvctl.daemon.besteffort import BestEffort
from sysvctl.daemon.errors import (
    AlreadyInstalled,
    RegistrationError,
    ServiceCommandError,
    UserServiceNotSupported,
)
from sysvctl.daemon.pidfile import PidFile
from sysvctl.daemon.process import HostProcessTable, ProcessTable
from sysvctl.daemon.registrar import detect_registrar
from sysvctl.daemon.supervisor import live_pid
from sysvctl.daemon.template import render_init_script


class SysVBackend(ServiceBackend):
    """Installs, registers and controls one service under SysV init."""

    def __init__(
        self,
        descriptor: ServiceDescriptor,
        config: Config,
        processes: ProcessTable | None = None,
    ):
        self.descriptor = descriptor
        self.config = config
        self.processes = processes or HostProcessTable()

    def __str__(self) -> str:
        return self.descriptor.label

    @property
    def name(self) -> str:
        return self.descriptor.name

    def config_path(self) -> Path:
        """Init script location; refuses per-user services outright."""
        if self.descriptor.user_service:
            raise UserServiceNotSupported()
        return self.config.paths.init_script(self.name)

    # ------------------------------------------------------------------
    # Install / Uninstall
    # ------------------------------------------------------------------

    def install(self) -> Path:
        script_path = self.config_path()
        if script_path.exists():
            raise AlreadyInstalled(script_path)

        content = render_init_script(self.descriptor, self.config)
        script_path.parent.mkdir(parents=True, exist_ok=True)
        script_path.write_text(content)
        os.chmod(script_path, 0o755)
        logger.info(f"Wrote init script {script_path}")

        registrar = detect_registrar(self.config)
        registrar.register(self.name, script_path)
        logger.info(f"Registered {self.name} via {registrar.kind}")
        return script_path

    def uninstall(self) -> None:
        script_path = self.config_path()

        registrar = detect_registrar(self.config)
        try:
            registrar.deregister(self.name)
        except (RegistrationError, OSError) as e:
            logger.warning(f"Deregistering {self.name} via {registrar.kind} failed: {e}")
        else:
            logger.info(f"Deregistered {self.name} via {registrar.kind}")

        script_path.unlink()
        logger.info(f"Removed init script {script_path}")

        paths = self.config.paths
        with BestEffort(f"Remove {self.name} logs") as be:
            for log_file in (*paths.legacy_log_files(self.name), *paths.log_files(self.name)):
                be.attempt(log_file, lambda log_file=log_file: log_file.unlink(missing_ok=True))

    # ------------------------------------------------------------------
    # Start / Stop
    # ------------------------------------------------------------------

    def start(self) -> None:
        _service(self.config, self.name, "start")

    def stop(self) -> None:
        _service(self.config, self.name, "stop")

    def restart(self) -> None:
        _service(self.config, self.name, "restart")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def is_running(self) -> bool:
        return self._get_pid() is not None

    def get_info(self) -> ServiceInfo:
        script_path = self.config.paths.init_script(self.name)
        installed = script_path.exists()
        pid = self._get_pid()
        return ServiceInfo(
            name=self.name,
            service_file=script_path if installed else None,
            installed=installed,
            running=pid is not None,
            pid=pid,
        )

    def log_paths(self) -> tuple[Path, Path]:
        """Return (stdout_log, stderr_log) paths."""
        return self.config.paths.log_files(self.name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_pid(self) -> int | None:
        return live_pid(PidFile(self.config.paths.pid_file(self.name)), self.processes)


def _service(config: Config, name: str, verb: str) -> None:
    """Run ``service <name> <verb>``, through ``sudo -n`` unless already root."""
    cmd = [config.tools.service, name, verb]
    if os.geteuid() != 0:
        cmd = [config.tools.sudo, "-n", *cmd]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        msg = result.stderr.strip() or result.stdout.strip()
        raise ServiceCommandError(f"service {verb} failed: {msg}")
