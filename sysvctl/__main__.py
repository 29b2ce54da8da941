"""Entry point for ``python -m sysvctl``."""

from sysvctl.cli.commands import app

if __name__ == "__main__":
    app()
