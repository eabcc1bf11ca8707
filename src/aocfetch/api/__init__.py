"""API client for adventofcode.com."""

from aocfetch.api.client import PuzzleClient, classify_response

__all__ = ["PuzzleClient", "classify_response"]
