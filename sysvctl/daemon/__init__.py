"""SysV init service management: install, register and supervise services."""

from sysvctl.daemon.base import ServiceBackend, ServiceDescriptor, ServiceInfo
from sysvctl.daemon.errors import (
    AlreadyInstalled,
    RegistrationError,
    ServiceCommandError,
    ServiceError,
    UserServiceNotSupported,
)
from sysvctl.daemon.supervisor import LaunchSpec, Supervisor
from sysvctl.daemon.sysv import SysVBackend

__all__ = [
    "SysVBackend",
    "ServiceBackend",
    "ServiceDescriptor",
    "ServiceInfo",
    "Supervisor",
    "LaunchSpec",
    "ServiceError",
    "AlreadyInstalled",
    "RegistrationError",
    "ServiceCommandError",
    "UserServiceNotSupported",
]
