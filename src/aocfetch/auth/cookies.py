"""
Browser cookie extraction for aocfetch.

Firefox keeps its cookies in an SQLite database that it holds open (and may
lock) while running. The database is never opened in place: it is copied to a
private temp file first and the copy is queried read-only.
"""

import glob
import logging
import os
import shutil
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from contextlib import closing
from pathlib import Path
from typing import Optional

from aocfetch.config import DEFAULT_COOKIE_GLOB, Settings
from aocfetch.exceptions import (
    CookieCopyError,
    CookieDatabaseNotFoundError,
    CookieNotFoundError,
    CookieOpenError,
    CookieQueryError,
)

logger = logging.getLogger(__name__)

# SQLite side files: a running Firefox keeps recent writes in -wal/-shm
_WAL_SUFFIXES = ("-wal", "-shm")
_SIDE_FILE_SUFFIXES = _WAL_SUFFIXES + ("-journal",)


class CookieExtractor(ABC):
    """Abstract base class for browser cookie extractors."""

    @abstractmethod
    def get_name(self) -> str:
        """Return the browser name."""
        pass

    @abstractmethod
    def locate(self) -> Path:
        """Return the path of the browser's cookie database."""
        pass

    @abstractmethod
    def extract_cookie(self, db_path: Path, hostname: str, name: Optional[str] = None) -> str:
        """Return the value of a cookie stored for hostname."""
        pass

    def is_available(self) -> bool:
        """Check if the browser's cookie database exists."""
        try:
            self.locate()
            return True
        except CookieDatabaseNotFoundError:
            return False


class FirefoxCookieExtractor(CookieExtractor):
    """Extract cookies from Firefox's cookies.sqlite."""

    def __init__(
        self,
        cookie_glob: str = DEFAULT_COOKIE_GLOB,
        table: str = "moz_cookies",
        temp_dir: Optional[Path] = None,
    ):
        self.cookie_glob = cookie_glob
        self.table = table
        self.temp_dir = temp_dir

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirefoxCookieExtractor":
        return cls(
            cookie_glob=settings.cookie_glob,
            table=settings.cookie_table,
            temp_dir=settings.temp_dir,
        )

    def get_name(self) -> str:
        return "Firefox"

    def locate(self) -> Path:
        """
        Find the cookie database.

        Returns:
            The first path matching the glob pattern. Match order is whatever
            the filesystem yields.

        Raises:
            CookieDatabaseNotFoundError: nothing matched.
        """
        for match in glob.iglob(self.cookie_glob):
            logger.debug(f"Found Firefox cookie database: {match}")
            return Path(match)

        raise CookieDatabaseNotFoundError(
            f"Failed to find Firefox cookie database (searched {self.cookie_glob}). "
            "Is Firefox installed and has it been started at least once?"
        )

    def extract_cookie(self, db_path: Path, hostname: str, name: Optional[str] = None) -> str:
        """
        Read one cookie value from a copy of the database.

        Args:
            db_path: Live cookie database, left untouched.
            hostname: Cookie host, e.g. ".adventofcode.com".
            name: Optional cookie name to narrow the lookup.

        Raises:
            CookieCopyError, CookieOpenError, CookieQueryError, CookieNotFoundError
        """
        db_path = Path(db_path)

        # Unique per call so concurrent runs never share a copy
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix="aocfetch-cookies-", suffix=".sqlite", dir=self.temp_dir
            )
            os.close(fd)
        except OSError as e:
            raise CookieCopyError(f"Cannot create temporary copy of {db_path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            self._copy_database(db_path, tmp_path)
            value = self._query_copy(tmp_path, hostname, name)
        finally:
            self._remove_copy(tmp_path)

        if value is None:
            raise CookieNotFoundError(
                f"No cookie for {hostname} in {db_path}. "
                f"Log in to {hostname.lstrip('.')} with Firefox first."
            )
        return value

    def _copy_database(self, db_path: Path, tmp_path: Path):
        """Copy the database and its WAL sidecars, which hold writes not yet checkpointed."""
        try:
            shutil.copyfile(db_path, tmp_path)
            for suffix in _WAL_SUFFIXES:
                sidecar = db_path.with_name(db_path.name + suffix)
                if sidecar.exists():
                    shutil.copyfile(sidecar, tmp_path.with_name(tmp_path.name + suffix))
        except OSError as e:
            raise CookieCopyError(f"Cannot copy cookie database {db_path}: {e}") from e

    def _query_copy(self, tmp_path: Path, hostname: str, name: Optional[str]) -> Optional[str]:
        """Run the lookup against the copy. The connection is closed on return."""
        query = f"SELECT name, value FROM {self.table} WHERE host = ?"
        params: tuple = (hostname,)
        if name:
            query += " AND name = ?"
            params += (name,)

        uri = f"{tmp_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise CookieOpenError(f"Cannot open copied cookie database {tmp_path}: {e}") from e

        with closing(conn):
            try:
                row = conn.execute(query, params).fetchone()
            except sqlite3.Error as e:
                raise CookieQueryError(f"Cookie lookup for {hostname} failed: {e}") from e

        if row is None:
            return None
        return row[1]

    def _remove_copy(self, tmp_path: Path):
        """Delete the temp copy; failures only warn since the value is already read."""
        candidates = [tmp_path] + [
            tmp_path.with_name(tmp_path.name + suffix) for suffix in _SIDE_FILE_SUFFIXES
        ]
        for path in candidates:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to remove temporary cookie database {path}: {e}")


def get_all_extractors(settings: Settings) -> list[CookieExtractor]:
    """Get all supported cookie extractors."""
    return [FirefoxCookieExtractor.from_settings(settings)]
