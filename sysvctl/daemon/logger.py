"""Service loggers: console when interactive, syslog otherwise."""

import os
from collections.abc import Callable
from logging.handlers import SysLogHandler
from typing import Protocol

from loguru import logger

SYSLOG_EXTRA = "syslog"


class ServiceLogger(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleLogger:
    """Logs through loguru's console sinks, tagged with the service name."""

    def __init__(self, name: str):
        self.name = name
        self._log = logger.bind(service=name)

    def info(self, message: str) -> None:
        self._log.info(message)

    def warning(self, message: str) -> None:
        self._log.warning(message)

    def error(self, message: str) -> None:
        self._log.error(message)


class SystemLogger:
    """Routes a service's records to syslog via a dedicated loguru sink."""

    def __init__(self, name: str, handler: SysLogHandler | None = None):
        self.name = name
        self.handler = handler or SysLogHandler(address=_syslog_address())
        self.handler.ident = f"{name}: "
        self._sink_id = logger.add(
            self.handler,
            level="INFO",
            format="{message}",
            filter=lambda record: record["extra"].get(SYSLOG_EXTRA) == name,
        )
        self._log = logger.bind(service=name, **{SYSLOG_EXTRA: name})

    def info(self, message: str) -> None:
        self._log.info(message)

    def warning(self, message: str) -> None:
        self._log.warning(message)

    def error(self, message: str) -> None:
        self._log.error(message)

    def close(self) -> None:
        logger.remove(self._sink_id)
        self.handler.close()


def select_logger(name: str, interactive: Callable[[], bool]) -> ServiceLogger:
    """Pick the logger for ``name`` using the injected ``interactive`` strategy."""
    if interactive():
        return ConsoleLogger(name)
    return SystemLogger(name)


def _syslog_address() -> str | tuple[str, int]:
    for path in ("/dev/log", "/var/run/syslog"):
        if os.path.exists(path):
            return path
    return ("localhost", 514)
