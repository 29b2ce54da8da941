"""Configuration schema."""

import sys
from pathlib import Path

from pydantic import BaseModel, Field


class PathsConfig(BaseModel):
    """Host filesystem layout used by the SysV backend."""

    init_dir: Path = Path("/etc/init.d")
    run_dir: Path = Path("/var/run")
    log_dir: Path = Path("/var/log/opsramp")
    legacy_log_dir: Path = Path("/var/log")
    rc_root: Path = Path("/etc")  # holds rc0.d .. rc6.d
    sysconfig_dir: Path = Path("/etc/sysconfig")

    def init_script(self, name: str) -> Path:
        return self.init_dir / name

    def pid_file(self, name: str) -> Path:
        return self.run_dir / f"{name}.pid"

    def log_files(self, name: str) -> tuple[Path, Path]:
        """Return (stdout_log, stderr_log) for a service."""
        return self.log_dir / f"{name}.log", self.log_dir / f"{name}.err"

    def legacy_log_files(self, name: str) -> tuple[Path, Path]:
        return self.legacy_log_dir / f"{name}.log", self.legacy_log_dir / f"{name}.err"


class ToolsConfig(BaseModel):
    """External programs the backend shells out to."""

    chkconfig: Path = Path("/sbin/chkconfig")
    update_rc_d: Path = Path("/usr/sbin/update-rc.d")
    runuser: Path = Path("/sbin/runuser")
    su: Path = Path("/bin/su")
    service: str = "service"
    sudo: str = "sudo"
    shell: str = "/bin/bash"
    python: str = Field(default_factory=lambda: sys.executable)


class Config(BaseModel):
    """Root configuration for sysvctl."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
