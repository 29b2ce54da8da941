"""Boot-sequence registration: chkconfig, update-rc.d, or raw rc.d symlinks."""

import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from sysvctl.config.schema import Config
from sysvctl.daemon.besteffort import BestEffort
from sysvctl.daemon.errors import RegistrationError

START_RUNLEVELS = ("2", "3", "4", "5")
STOP_RUNLEVELS = ("0", "1", "6")
START_PREFIX = "S50"
STOP_PREFIX = "K02"


class Registrar(ABC):
    """One way of wiring an init script into runlevel sequencing."""

    kind: str

    @abstractmethod
    def register(self, name: str, script: Path) -> None:
        """Add ``name`` to the boot and shutdown sequence."""

    @abstractmethod
    def deregister(self, name: str) -> None:
        """Remove ``name`` from the boot and shutdown sequence."""


class ChkconfigRegistrar(Registrar):
    """RedHat and cousins."""

    kind = "chkconfig"

    def __init__(self, tool: Path):
        self.tool = tool

    def register(self, name: str, script: Path) -> None:
        _run_tool([str(self.tool), "--add", name])

    def deregister(self, name: str) -> None:
        _run_tool([str(self.tool), "--del", name])


class UpdateRcdRegistrar(Registrar):
    """Debian and cousins."""

    kind = "update-rc.d"

    def __init__(self, tool: Path):
        self.tool = tool

    def register(self, name: str, script: Path) -> None:
        _run_tool([str(self.tool), name, "defaults"])

    def deregister(self, name: str) -> None:
        _run_tool([str(self.tool), "-f", name, "remove"])


class SymlinkRegistrar(Registrar):
    """Fallback: create the rc.d links by hand, best effort."""

    kind = "symlinks"

    def __init__(self, rc_root: Path):
        self.rc_root = rc_root

    def links(self, name: str) -> list[Path]:
        """Every link this registrar manages for ``name``, start links first."""
        starts = [self.rc_root / f"rc{lvl}.d" / f"{START_PREFIX}{name}" for lvl in START_RUNLEVELS]
        stops = [self.rc_root / f"rc{lvl}.d" / f"{STOP_PREFIX}{name}" for lvl in STOP_RUNLEVELS]
        return starts + stops

    def register(self, name: str, script: Path) -> None:
        with BestEffort(f"Link {name} into runlevels") as be:
            for link in self.links(name):
                be.attempt(link, lambda link=link: os.symlink(script, link))

    def deregister(self, name: str) -> None:
        with BestEffort(f"Unlink {name} from runlevels") as be:
            for link in self.links(name):
                if link.is_symlink() or link.exists():
                    be.attempt(link, link.unlink)


def detect_registrar(config: Config) -> Registrar:
    """First available mechanism wins; probed on every call, never recorded."""
    tools = config.tools
    if tools.chkconfig.exists():
        return ChkconfigRegistrar(tools.chkconfig)
    if tools.update_rc_d.exists():
        return UpdateRcdRegistrar(tools.update_rc_d)
    return SymlinkRegistrar(config.paths.rc_root)


def _run_tool(cmd: list[str]) -> None:
    logger.debug(f"Running {' '.join(cmd)}")
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        msg = result.stderr.strip() or result.stdout.strip()
        raise RegistrationError(f"{Path(cmd[0]).name} failed: {msg}")
