"""sysvctl - run any program as a SysV init service."""

__version__ = "0.1.0"
