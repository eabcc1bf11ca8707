"""Shared fixtures for the aocfetch test suite."""

import sqlite3
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent / "src"))

from aocfetch.config import Settings


def _create_cookie_db(path: Path, rows: list[tuple[str, str, str]]) -> Path:
    """Create a minimal Firefox-style cookies.sqlite with (host, name, value) rows."""
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            "CREATE TABLE moz_cookies ("
            "id INTEGER PRIMARY KEY, name TEXT, value TEXT, host TEXT, path TEXT)"
        )
        conn.executemany(
            "INSERT INTO moz_cookies (host, name, value, path) VALUES (?, ?, ?, '/')",
            rows,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def make_cookie_db():
    """Factory: make_cookie_db(path, rows) builds a cookies.sqlite and returns its path."""
    return _create_cookie_db


@pytest.fixture
def profile_root(tmp_path):
    """Fake home directory layout holding one Firefox profile."""
    return tmp_path / "home"


@pytest.fixture
def cookie_glob(profile_root):
    return str(profile_root / "*" / "firefox" / "*.default" / "cookies.sqlite")


@pytest.fixture
def cookie_db(profile_root, make_cookie_db):
    return make_cookie_db(
        profile_root / "alice" / "firefox" / "abcd1234.default" / "cookies.sqlite",
        [
            (".example.com", "session", "not-this-one"),
            (".adventofcode.com", "session", "53616c7465645f5f"),
        ],
    )


@pytest.fixture
def scratch_dir(tmp_path):
    """Private temp dir for cookie database copies, so leftovers are visible."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path, cookie_glob, scratch_dir):
    return Settings(
        cookie_glob=cookie_glob,
        temp_dir=scratch_dir,
        config_path=tmp_path / "config" / "config.env",
        default_output_dir=tmp_path / "inputs",
    )
