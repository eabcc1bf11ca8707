"""Error hierarchy for aocfetch.

Every failure the pipeline reports to the user derives from AocFetchError.
The intermediate classes group errors by what the user has to do about them:
fix the environment, re-authenticate, correct the input, or check the network.
"""

from typing import Optional


class AocFetchError(Exception):
    """Base class for all aocfetch errors."""


class EnvironmentSetupError(AocFetchError):
    """The local environment is missing something (browser, cookie database)."""


class CredentialError(AocFetchError):
    """No usable session credential is available."""


class InputValidationError(AocFetchError):
    """User supplied input was rejected before any I/O."""


class TransportError(AocFetchError):
    """The remote service could not be reached."""


class OutputError(AocFetchError):
    """Writing a file to disk failed."""


# Cookie extraction

class CookieError(AocFetchError):
    """Raised when cookie extraction fails."""


class CookieDatabaseNotFoundError(CookieError, EnvironmentSetupError):
    """No cookie database matched the configured glob pattern."""


class CookieCopyError(CookieError, EnvironmentSetupError):
    """The cookie database could not be copied to a private location."""


class CookieOpenError(CookieError, EnvironmentSetupError):
    """The copied cookie database could not be opened."""


class CookieQueryError(CookieError, EnvironmentSetupError):
    """The cookie lookup query failed (wrong schema, corrupt file)."""


class CookieNotFoundError(CookieError, CredentialError):
    """The cookie database holds no cookie for the requested host."""


class NoCredentialError(CredentialError):
    """Every credential source missed."""


# Configuration

class InvalidConfigKeyError(InputValidationError):
    """A config key outside the supported set was given."""


class ConfigParseError(InputValidationError):
    """A config value (or the config file) failed validation."""


class ConfigWriteError(OutputError):
    """The config file could not be rewritten."""


# Puzzle requests

class PuzzleRangeError(InputValidationError):
    """Year or day outside the supported range."""

    def __init__(self, field: str, value: int, minimum: int, maximum: int):
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Invalid {field} {value}: must be between {minimum} and {maximum}"
        )


class PuzzleFetchError(AocFetchError):
    """The service answered, but not with the puzzle input."""

    def __init__(self, response, message: Optional[str] = None):
        self.response = response
        super().__init__(message or response.message)


class InvalidSessionError(PuzzleFetchError, CredentialError):
    """The service rejected the session credential."""
