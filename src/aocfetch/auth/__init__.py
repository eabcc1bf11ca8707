"""
Authentication module for aocfetch.

Provides:
- Firefox cookie extraction
- Session key resolution (flag, config file, browser)
"""

from aocfetch.auth.cookies import (
    CookieExtractor,
    FirefoxCookieExtractor,
    get_all_extractors,
)
from aocfetch.auth.manager import (
    BrowserCookieProvider,
    ConfigKeyProvider,
    CredentialProvider,
    CredentialResolver,
    ExplicitKeyProvider,
)

__all__ = [
    # Cookie extraction
    "CookieExtractor",
    "FirefoxCookieExtractor",
    "get_all_extractors",
    # Resolution
    "CredentialProvider",
    "ExplicitKeyProvider",
    "ConfigKeyProvider",
    "BrowserCookieProvider",
    "CredentialResolver",
]
