"""Storage for fetched puzzle inputs."""

from aocfetch.storage.files import input_path, write_input

__all__ = ["input_path", "write_input"]
