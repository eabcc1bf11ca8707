"""HTTP client for the Advent of Code puzzle input endpoint."""

import logging
from datetime import date
from typing import Optional

import requests

from aocfetch.config import Settings, current_max_year
from aocfetch.exceptions import PuzzleRangeError, TransportError
from aocfetch.models import (
    InvalidCredential,
    NotFound,
    OtherHttpError,
    PuzzleRequest,
    PuzzleResponse,
    Success,
)

logger = logging.getLogger(__name__)


def classify_response(status_code: int, body: bytes, url: str) -> PuzzleResponse:
    """
    Map an HTTP status to a typed outcome.

    adventofcode.com answers a stale session cookie with 500 rather than
    401/403, so 500 is read as an invalid credential for this service only.
    """
    if status_code == 200:
        return Success(body=body)
    if status_code == 404:
        return NotFound(url=url)
    if status_code == 500:
        return InvalidCredential(url=url)
    return OtherHttpError(status_code=status_code, body=body, url=url)


class PuzzleClient:
    """HTTP client for puzzle inputs. Never retries."""

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        today: Optional[date] = None,
    ):
        self.settings = settings
        self.session = session or self._create_session()
        self._today = today

    def _create_session(self) -> requests.Session:
        """Create and configure HTTP session."""
        session = requests.Session()
        session.headers.update({"User-Agent": self.settings.user_agent})
        return session

    @property
    def max_year(self) -> int:
        return current_max_year(self._today)

    def validate(self, year: int, day: int) -> PuzzleRequest:
        """
        Check year and day bounds.

        Raises:
            PuzzleRangeError: naming the offending field and value.
        """
        if not self.settings.first_year <= year <= self.max_year:
            raise PuzzleRangeError("year", year, self.settings.first_year, self.max_year)
        if not 1 <= day <= self.settings.max_day:
            raise PuzzleRangeError("day", day, 1, self.settings.max_day)
        return PuzzleRequest(year=year, day=day)

    def build_url(self, request: PuzzleRequest) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/{request.year}/day/{request.day}/input"

    def fetch(self, request: PuzzleRequest, credential: str) -> PuzzleResponse:
        """
        GET the puzzle input with the session cookie.

        Raises:
            TransportError: DNS failure, timeout, connection reset, etc.
        """
        url = self.build_url(request)
        headers = {"Cookie": f"{self.settings.cookie_name}={credential}"}

        logger.debug(f"Request: GET {url}")
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Network error: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        logger.debug(f"Response: HTTP {response.status_code} ({len(response.content)} bytes)")
        return classify_response(response.status_code, response.content, url)

    def get_input(self, year: int, day: int, credential: str) -> PuzzleResponse:
        """Validate, then fetch."""
        return self.fetch(self.validate(year, day), credential)
