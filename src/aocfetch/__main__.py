"""Allow `python -m aocfetch`."""

from aocfetch.cli import app

if __name__ == "__main__":
    app()
