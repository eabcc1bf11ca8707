"""Data structures passed between pipeline stages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class PuzzleRequest:
    """A validated (year, day) pair."""
    year: int
    day: int


@dataclass(frozen=True)
class ResolvedCredential:
    """A session token and the source that produced it."""
    token: str
    source: str

    @property
    def masked(self) -> str:
        """Token safe for logs: first 4 characters only."""
        return mask_secret(self.token)

    def __repr__(self):
        return f"ResolvedCredential(token={self.masked!r}, source={self.source!r})"

    def __str__(self):
        return self.masked


def mask_secret(value: str | None) -> str:
    if not value:
        return ""
    return f"{value[:4]}..." if len(value) > 4 else "****"


def _snippet(body: bytes, limit: int = 200) -> str:
    text = body.decode("utf-8", errors="replace").strip()
    if len(text) > limit:
        text = text[:limit] + "..."
    return text


class PuzzleResponse(ABC):
    """Classified outcome of a puzzle input request."""

    ok: ClassVar[bool] = False
    status_code: int

    @property
    @abstractmethod
    def message(self) -> str:
        """User-facing description of the outcome."""
        pass


@dataclass(frozen=True)
class Success(PuzzleResponse):
    """HTTP 200: the puzzle input."""
    body: bytes
    status_code: int = 200
    ok: ClassVar[bool] = True

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def message(self) -> str:
        return f"Received {len(self.body)} bytes"


@dataclass(frozen=True)
class NotFound(PuzzleResponse):
    """HTTP 404: puzzle not released yet, or wrong day/year."""
    url: str
    status_code: int = 404

    @property
    def message(self) -> str:
        return (
            f"Puzzle input not found at {self.url} (HTTP 404). "
            "The puzzle may not be unlocked yet."
        )


@dataclass(frozen=True)
class InvalidCredential(PuzzleResponse):
    """HTTP 500: how adventofcode.com answers a stale or bogus session cookie."""
    url: str
    status_code: int = 500

    @property
    def message(self) -> str:
        return (
            f"The session key was rejected by {self.url} (HTTP 500). "
            "Log in to adventofcode.com in Firefox again, or pass a fresh --session-key."
        )


@dataclass(frozen=True)
class OtherHttpError(PuzzleResponse):
    """Any other status, kept verbatim for diagnosis."""
    status_code: int
    body: bytes
    url: str

    @property
    def message(self) -> str:
        return f"Unexpected HTTP {self.status_code} from {self.url}: {_snippet(self.body)}"
