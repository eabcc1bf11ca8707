"""Plain file storage for puzzle inputs."""

import logging
from pathlib import Path

from aocfetch.exceptions import OutputError

logger = logging.getLogger(__name__)


def input_path(directory: Path, year: int, day: int) -> Path:
    """Destination for a puzzle input, e.g. inputs/2022.05"""
    return Path(directory) / f"{year}.{day:02}"


def write_input(directory: Path, year: int, day: int, body: bytes) -> Path:
    """
    Save a puzzle input, replacing any existing file.

    Returns:
        Path of the written file.
    """
    destination = input_path(directory, year, day)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(body)
    except OSError as e:
        raise OutputError(f"Failed to write {destination}: {e}") from e

    logger.info(f"Wrote {len(body)} bytes to {destination}")
    return destination
