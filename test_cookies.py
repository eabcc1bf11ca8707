"""Tests for Firefox cookie extraction."""

import logging
import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest

from aocfetch.auth.cookies import FirefoxCookieExtractor
from aocfetch.exceptions import (
    CookieCopyError,
    CookieDatabaseNotFoundError,
    CookieNotFoundError,
    CookieQueryError,
    EnvironmentSetupError,
)


def test_locate_returns_matching_database(cookie_glob, cookie_db):
    extractor = FirefoxCookieExtractor(cookie_glob=cookie_glob)
    assert extractor.locate() == cookie_db
    assert extractor.is_available()


def test_locate_without_match_is_environment_error(tmp_path):
    extractor = FirefoxCookieExtractor(cookie_glob=str(tmp_path / "nothing" / "*" / "cookies.sqlite"))

    with pytest.raises(CookieDatabaseNotFoundError) as exc_info:
        extractor.locate()

    assert isinstance(exc_info.value, EnvironmentSetupError)
    assert "nothing" in str(exc_info.value)
    assert not extractor.is_available()


def test_extract_cookie_returns_value_for_host(cookie_glob, cookie_db, scratch_dir):
    extractor = FirefoxCookieExtractor(cookie_glob=cookie_glob, temp_dir=scratch_dir)

    value = extractor.extract_cookie(cookie_db, ".adventofcode.com", "session")

    assert value == "53616c7465645f5f"


def test_extract_cookie_without_name_uses_first_host_row(cookie_db, scratch_dir):
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)
    assert extractor.extract_cookie(cookie_db, ".example.com") == "not-this-one"


def test_extract_leaves_original_untouched_and_removes_copy(cookie_db, scratch_dir):
    before = cookie_db.read_bytes()
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    extractor.extract_cookie(cookie_db, ".adventofcode.com", "session")

    assert cookie_db.read_bytes() == before
    assert list(scratch_dir.iterdir()) == []


def test_missing_host_raises_not_found_and_removes_copy(cookie_db, scratch_dir):
    before = cookie_db.read_bytes()
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with pytest.raises(CookieNotFoundError) as exc_info:
        extractor.extract_cookie(cookie_db, ".nowhere.org", "session")

    assert "Log in to nowhere.org" in str(exc_info.value)
    assert cookie_db.read_bytes() == before
    assert list(scratch_dir.iterdir()) == []


def test_hostname_is_bound_not_interpolated(cookie_db, scratch_dir):
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with pytest.raises(CookieNotFoundError):
        extractor.extract_cookie(cookie_db, "' OR '1'='1", None)


def test_wrong_schema_raises_query_error(tmp_path, scratch_dir):
    db_path = tmp_path / "other.sqlite"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE cookies (host_key TEXT, name TEXT, value TEXT)")
    conn.commit()
    conn.close()

    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with pytest.raises(CookieQueryError):
        extractor.extract_cookie(db_path, ".adventofcode.com", "session")
    assert list(scratch_dir.iterdir()) == []


def test_not_a_database_raises_query_error(tmp_path, scratch_dir):
    db_path = tmp_path / "cookies.sqlite"
    db_path.write_bytes(b"this is not sqlite" * 100)

    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with pytest.raises((CookieQueryError, EnvironmentSetupError)):
        extractor.extract_cookie(db_path, ".adventofcode.com", "session")
    assert list(scratch_dir.iterdir()) == []


def test_unreadable_source_raises_copy_error(tmp_path, scratch_dir):
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with pytest.raises(CookieCopyError):
        extractor.extract_cookie(tmp_path / "missing.sqlite", ".adventofcode.com", "session")
    assert list(scratch_dir.iterdir()) == []


def test_uncheckpointed_wal_writes_are_visible(tmp_path, scratch_dir):
    db_path = tmp_path / "live" / "cookies.sqlite"
    db_path.parent.mkdir()
    wal_path = db_path.with_name("cookies.sqlite-wal")

    # A running Firefox: WAL mode, connection held open, nothing checkpointed yet
    writer = sqlite3.connect(db_path)
    try:
        writer.execute("PRAGMA journal_mode=WAL")
        writer.execute("PRAGMA wal_autocheckpoint=0")
        writer.execute("CREATE TABLE moz_cookies (name TEXT, value TEXT, host TEXT)")
        writer.execute(
            "INSERT INTO moz_cookies VALUES ('session', 'fresh-login', '.adventofcode.com')"
        )
        writer.commit()
        assert wal_path.stat().st_size > 0
        db_before = db_path.read_bytes()
        wal_before = wal_path.read_bytes()

        extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)
        value = extractor.extract_cookie(db_path, ".adventofcode.com", "session")

        assert db_path.read_bytes() == db_before
        assert wal_path.read_bytes() == wal_before
    finally:
        writer.close()

    assert value == "fresh-login"
    assert list(scratch_dir.iterdir()) == []


def test_custom_table_name(tmp_path, scratch_dir):
    db_path = tmp_path / "cookies.sqlite"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE my_cookies (name TEXT, value TEXT, host TEXT)")
    conn.execute("INSERT INTO my_cookies VALUES ('session', 'abc123', '.adventofcode.com')")
    conn.commit()
    conn.close()

    extractor = FirefoxCookieExtractor(table="my_cookies", temp_dir=scratch_dir)
    assert extractor.extract_cookie(db_path, ".adventofcode.com", "session") == "abc123"


def test_cleanup_failure_only_warns(cookie_db, scratch_dir, caplog):
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)

    with caplog.at_level(logging.WARNING, logger="aocfetch.auth.cookies"):
        with patch.object(Path, "unlink", side_effect=OSError("device busy")):
            value = extractor.extract_cookie(cookie_db, ".adventofcode.com", "session")

    assert value == "53616c7465645f5f"
    assert "Failed to remove temporary cookie database" in caplog.text


def test_each_call_uses_a_fresh_copy(cookie_db, scratch_dir):
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)
    seen = []
    original = extractor._query_copy

    def spy(tmp_path, hostname, name):
        seen.append(tmp_path)
        return original(tmp_path, hostname, name)

    with patch.object(extractor, "_query_copy", side_effect=spy):
        extractor.extract_cookie(cookie_db, ".adventofcode.com", "session")
        extractor.extract_cookie(cookie_db, ".adventofcode.com", "session")

    assert len(seen) == 2
    assert seen[0] != seen[1]
    assert all(p.parent == scratch_dir for p in seen)


def test_from_settings(settings):
    extractor = FirefoxCookieExtractor.from_settings(settings)
    assert extractor.cookie_glob == settings.cookie_glob
    assert extractor.table == "moz_cookies"
    assert extractor.temp_dir == settings.temp_dir


def test_make_cookie_db_with_many_rows(tmp_path, scratch_dir, make_cookie_db):
    db_path = make_cookie_db(
        tmp_path / "p" / "cookies.sqlite",
        [(".adventofcode.com", "ru", "x"), (".adventofcode.com", "session", "token")],
    )
    extractor = FirefoxCookieExtractor(temp_dir=scratch_dir)
    assert extractor.extract_cookie(db_path, ".adventofcode.com", "session") == "token"
