"""Service descriptor and the abstract backend contract."""

import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ServiceDescriptor:
    """Everything needed to install and run one service."""

    name: str
    display_name: str = ""
    description: str = ""
    executable: str = ""
    arguments: tuple[str, ...] = ()
    working_directory: str = ""
    user_name: str = ""
    user_service: bool = False

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Service name must not be empty")
        if "/" in self.name:
            raise ValueError(f"Service name must not contain '/': {self.name!r}")
        # Accept any sequence but keep the record hashable
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def label(self) -> str:
        """Human-facing name: display name, falling back to the service name."""
        return self.display_name or self.name

    def exec_path(self) -> str:
        """Executable to supervise; defaults to the running program."""
        if self.executable:
            return self.executable
        return os.path.realpath(sys.argv[0])


@dataclass
class ServiceInfo:
    """Status snapshot of the service."""

    name: str
    service_file: Path | None = None
    installed: bool = False
    running: bool = False
    pid: int | None = None


class ServiceBackend(ABC):
    """ABC that each init-system backend implements."""

    @abstractmethod
    def install(self) -> Path:
        """Write the service definition and register it. Returns its path."""

    @abstractmethod
    def uninstall(self) -> None:
        """Deregister and remove the service definition."""

    @abstractmethod
    def start(self) -> None:
        """Start the service via the OS service manager."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the service via the OS service manager."""

    @abstractmethod
    def restart(self) -> None:
        """Restart the service via the OS service manager."""

    @abstractmethod
    def is_running(self) -> bool:
        """Return True if the service is currently active."""

    @abstractmethod
    def get_info(self) -> ServiceInfo:
        """Return a status snapshot."""
