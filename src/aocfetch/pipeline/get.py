"""Get pipeline - resolve credential, fetch one puzzle input, save it."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from aocfetch.api import PuzzleClient
from aocfetch.auth import CookieExtractor, CredentialResolver, get_all_extractors
from aocfetch.config import Config, ConfigStore, Settings
from aocfetch.exceptions import InvalidSessionError, PuzzleFetchError
from aocfetch.models import InvalidCredential, Success
from aocfetch.storage import write_input

logger = logging.getLogger(__name__)


class GetPipeline:
    """Pipeline for `aocfetch get`."""

    def __init__(
        self,
        settings: Settings,
        config_store: Optional[ConfigStore] = None,
        extractors: Optional[Sequence[CookieExtractor]] = None,
        client: Optional[PuzzleClient] = None,
    ):
        self.settings = settings
        self.config_store = config_store or ConfigStore(settings.config_path)
        self.extractors = list(extractors) if extractors is not None else get_all_extractors(settings)
        self.client = client or PuzzleClient(settings)

    def resolve_year(self, year: Optional[int], config: Config) -> int:
        """Flag, then config file, then the latest event."""
        if year is not None:
            return year
        if config.year is not None:
            return config.year
        return self.client.max_year

    def resolve_output_dir(self, output: Optional[Path], config: Config) -> Path:
        """Flag, then config file, then settings.default_output_dir."""
        if output is not None:
            return Path(output)
        if config.output_path is not None:
            return config.output_path
        return self.settings.default_output_dir

    def run(
        self,
        day: int,
        year: Optional[int] = None,
        output: Optional[Path] = None,
        session_key: Optional[str] = None,
    ) -> Path:
        """
        Fetch and save one puzzle input.

        Returns:
            Path of the written input file.

        Raises:
            AocFetchError subclasses for every failure category.
        """
        config = self.config_store.load()
        year = self.resolve_year(year, config)

        # Reject bad input before touching the cookie store or the network
        request = self.client.validate(year, day)

        resolver = CredentialResolver.default_chain(
            session_key=session_key,
            config=config,
            extractors=self.extractors,
            hostname=self.settings.cookie_host,
            cookie_name=self.settings.cookie_name,
        )
        credential = resolver.resolve()

        logger.info(f"Fetching input for {request.year} day {request.day}")
        response = self.client.fetch(request, credential.token)

        if isinstance(response, InvalidCredential):
            raise InvalidSessionError(
                response,
                f"{response.message} (session key came from {credential.source})",
            )
        if not isinstance(response, Success):
            raise PuzzleFetchError(response)

        output_dir = self.resolve_output_dir(output, config)
        return write_input(output_dir, request.year, request.day, response.body)
