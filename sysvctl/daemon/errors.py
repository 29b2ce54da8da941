"""Errors raised by the SysV service backend."""

from pathlib import Path


class ServiceError(RuntimeError):
    """Base class for service backend failures."""


class UserServiceNotSupported(ServiceError):
    """Raised when a per-user service is requested; SysV has no user init."""

    def __init__(self) -> None:
        super().__init__("User services are not supported on SystemV.")


class AlreadyInstalled(ServiceError):
    """Raised by install when the init script already exists."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Init already exists: {path}")


class RegistrationError(ServiceError):
    """Raised when chkconfig or update-rc.d rejects a registration."""


class ServiceCommandError(ServiceError):
    """Raised when the host ``service`` command exits non-zero."""
