"""Pid file: the durable record of which process is the service."""

from pathlib import Path


class PidFile:
    """Reads and writes ``<run_dir>/<name>.pid``."""

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> int | None:
        """Return the recorded pid, or None when missing or unparseable."""
        try:
            content = self.path.read_text()
        except FileNotFoundError:
            return None
        parts = content.split()
        if not parts:
            return None
        try:
            pid = int(parts[0])
        except ValueError:
            return None
        return pid if pid > 0 else None

    def write(self, pid: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{pid}\n")

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)
