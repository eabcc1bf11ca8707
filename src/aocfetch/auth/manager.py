"""
Credential resolution - orchestrates all session key sources.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from aocfetch.auth.cookies import CookieExtractor
from aocfetch.config import Config
from aocfetch.exceptions import CookieError, NoCredentialError
from aocfetch.models import ResolvedCredential

logger = logging.getLogger(__name__)


class CredentialProvider(ABC):
    """One source of a session key."""

    name: str = "unknown"

    @abstractmethod
    def try_resolve(self) -> Optional[str]:
        """Return a token, or None on a miss."""
        pass

    def describe_miss(self) -> str:
        return f"{self.name}: not set"


class ExplicitKeyProvider(CredentialProvider):
    """Session key passed on the command line."""

    name = "--session-key"

    def __init__(self, session_key: Optional[str]):
        self.session_key = session_key

    def try_resolve(self) -> Optional[str]:
        return self.session_key


class ConfigKeyProvider(CredentialProvider):
    """Session key stored in the config file."""

    name = "config file"

    def __init__(self, config: Config):
        self.config = config

    def try_resolve(self) -> Optional[str]:
        return self.config.session_key


class BrowserCookieProvider(CredentialProvider):
    """Session cookie read from a browser's cookie store."""

    def __init__(self, extractor: CookieExtractor, hostname: str, cookie_name: Optional[str] = None):
        self.extractor = extractor
        self.hostname = hostname
        self.cookie_name = cookie_name
        self.name = f"{extractor.get_name()} cookies"
        self.last_error: Optional[CookieError] = None

    def try_resolve(self) -> Optional[str]:
        try:
            db_path = self.extractor.locate()
            return self.extractor.extract_cookie(db_path, self.hostname, self.cookie_name)
        except CookieError as e:
            logger.info(f"No session cookie from {self.extractor.get_name()}: {e}")
            self.last_error = e
            return None

    def describe_miss(self) -> str:
        if self.last_error is not None:
            return f"{self.name}: {self.last_error}"
        return super().describe_miss()


class CredentialResolver:
    """
    Resolves the session key from an ordered list of providers.

    Providers are tried left to right and the first non-empty token wins;
    later (more expensive) providers are never touched after a hit.
    """

    def __init__(self, providers: Sequence[CredentialProvider]):
        self.providers = list(providers)

    @classmethod
    def default_chain(
        cls,
        session_key: Optional[str],
        config: Config,
        extractors: Sequence[CookieExtractor],
        hostname: str,
        cookie_name: Optional[str] = None,
    ) -> "CredentialResolver":
        """Explicit key, then config file, then each browser."""
        providers: list[CredentialProvider] = [
            ExplicitKeyProvider(session_key),
            ConfigKeyProvider(config),
        ]
        providers.extend(
            BrowserCookieProvider(extractor, hostname, cookie_name) for extractor in extractors
        )
        return cls(providers)

    def resolve(self) -> ResolvedCredential:
        """
        Return the first available credential.

        Raises:
            NoCredentialError: every provider missed.
        """
        for provider in self.providers:
            token = provider.try_resolve()
            if token and token.strip():
                credential = ResolvedCredential(token=token.strip(), source=provider.name)
                logger.info(f"Using session key from {provider.name} ({credential.masked})")
                return credential
            logger.debug(f"No session key from {provider.name}")

        reasons = "\n".join(f"  - {p.describe_miss()}" for p in self.providers)
        raise NoCredentialError(
            "No session key available. Tried:\n"
            f"{reasons}\n"
            "Pass --session-key, run 'aocfetch set session_key <key>', "
            "or log in to adventofcode.com with Firefox."
        )
