"""Configuration management using Pydantic Settings."""

import logging
import os
import re
import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aocfetch.exceptions import ConfigParseError, ConfigWriteError, InvalidConfigKeyError

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_GLOB = "/home/*/snap/firefox/common/.mozilla/firefox/*.default/cookies.sqlite"

# Keys accepted by `aocfetch set`, in the order they are written to disk
CONFIG_KEYS = ("year", "session_key", "output_path")


def get_default_config_dir() -> Path:
    """Get the default config directory based on XDG conventions."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "aocfetch"
    return Path.home() / ".config" / "aocfetch"


def current_max_year(today: Optional[date] = None) -> int:
    """Latest event year that has started (events open on December 1st)."""
    today = today or date.today()
    return today.year if today.month == 12 else today.year - 1


class Settings(BaseModel):
    """Runtime parameters for every pipeline component.

    Nothing here is read from the environment; the CLI builds one instance and
    hands it to each component.
    """

    # Browser cookie store
    cookie_glob: str = Field(
        default=DEFAULT_COOKIE_GLOB,
        description="Glob pattern locating Firefox's cookies.sqlite (first match wins)"
    )
    cookie_table: str = Field(default="moz_cookies", description="Cookie table name")
    cookie_host: str = Field(default=".adventofcode.com", description="Cookie host to look up")
    cookie_name: str = Field(default="session", description="Name of the session cookie")
    temp_dir: Optional[Path] = Field(
        default=None,
        description="Directory for the private cookie database copy (default: system temp)"
    )

    # Persisted user config
    config_path: Path = Field(
        default_factory=lambda: get_default_config_dir() / "config.env",
        description="Path to the key/value config file"
    )
    default_output_dir: Path = Field(default=Path("inputs"), description="Fallback output directory")

    # Remote service
    base_url: str = Field(default="https://adventofcode.com", description="Puzzle service base URL")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=30.0, gt=0, description="Read timeout in seconds")
    user_agent: str = Field(default="aocfetch/1.0.0", description="User-Agent header")

    # Request bounds
    first_year: int = Field(default=2015, description="First event year")
    max_day: int = Field(default=25, description="Last puzzle day of an event")

    @field_validator("config_path", "temp_dir", "default_output_dir", mode="before")
    @classmethod
    def expand_paths(cls, v):
        """Expand user home directory in paths."""
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("cookie_table")
    @classmethod
    def check_table_name(cls, v: str) -> str:
        # Table names cannot be bound as query parameters
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", v):
            raise ValueError(f"not a valid SQL identifier: {v!r}")
        return v

    @property
    def request_timeout(self) -> tuple[float, float]:
        """(connect, read) timeout tuple for requests."""
        return (self.connect_timeout, self.read_timeout)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build runtime settings, optionally pointing at another config file."""
    if config_path is not None:
        return Settings(config_path=config_path)
    return Settings()


class Config(BaseSettings):
    """User config persisted by `aocfetch set`.

    Stored as a dotenv-style file (YEAR, SESSION_KEY, OUTPUT_PATH) that
    ConfigStore reads without variable expansion. Values come only from
    keyword arguments, never from the process environment.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
    )

    year: Optional[int] = Field(default=None, ge=0, le=65535, description="Default event year")
    session_key: Optional[str] = Field(default=None, description="Session cookie value")
    output_path: Optional[Path] = Field(default=None, description="Default output directory")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (init_settings,)

    @field_validator("*", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        """Treat blank values (KEY=) as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("output_path", mode="before")
    @classmethod
    def expand_output_path(cls, v):
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


def _describe_errors(error: ValidationError) -> str:
    """Condense a pydantic ValidationError into one line."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "value"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _quote(value: str) -> str:
    """Double-quote a value the way python-dotenv expects to read it back."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ConfigStore:
    """Reads and rewrites the user config file."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    @staticmethod
    def normalize_key(key: str) -> str:
        """Map user input like 'SESSION-KEY' to a Config field name."""
        normalized = key.strip().lower().replace("-", "_")
        if normalized not in CONFIG_KEYS:
            raise InvalidConfigKeyError(
                f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}"
            )
        return normalized

    def read_values(self) -> dict:
        """Raw values from the file, keyed by Config field name.

        Read with interpolation off so `${VAR}` stays literal.
        """
        if not self.path.exists():
            logger.debug(f"No config file at {self.path}, using defaults")
            return {}

        raw = dotenv_values(self.path, interpolate=False, encoding="utf-8")
        values = {}
        for key, value in raw.items():
            field = key.strip().lower()
            if field in CONFIG_KEYS and value is not None:
                values[field] = value
        return values

    def load(self) -> Config:
        """
        Load the config file.

        Returns:
            Config with every field None if the file does not exist.
        """
        try:
            return Config(**self.read_values())
        except ValidationError as e:
            raise ConfigParseError(f"Invalid config file {self.path}: {_describe_errors(e)}") from e

    def set(self, key: str, value: str) -> Config:
        """
        Update one key and rewrite the whole file.

        Raises:
            InvalidConfigKeyError: key is not one of CONFIG_KEYS.
            ConfigParseError: value does not validate (nothing is written).
        """
        field = self.normalize_key(key)
        current = self.load()

        data = current.model_dump(exclude_none=True)
        data[field] = value
        try:
            updated = Config(**data)
        except ValidationError as e:
            raise ConfigParseError(f"Invalid value for {field}: {_describe_errors(e)}") from e

        self._write(updated)
        logger.info(f"Set {field} in {self.path}")
        return updated

    def unset(self, key: str) -> Config:
        """Clear one key and rewrite the whole file."""
        field = self.normalize_key(key)
        data = self.load().model_dump(exclude_none=True)
        data.pop(field, None)
        updated = Config(**data)
        self._write(updated)
        logger.info(f"Cleared {field} in {self.path}")
        return updated

    def render(self, config: Config) -> str:
        """Generate the config file content."""
        lines = [
            "# aocfetch configuration",
            "# Edit this file by hand or run 'aocfetch set <key> <value>'.",
            "",
        ]
        for field in CONFIG_KEYS:
            value = getattr(config, field)
            if value is None:
                continue
            if field == "year":
                lines.append(f"{field.upper()}={value}")
            else:
                lines.append(f"{field.upper()}={_quote(str(value))}")
        return "\n".join(lines) + "\n"

    def _write(self, config: Config):
        """Write to a temp file next to the target, then rename over it."""
        content = self.render(config)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with mode 0600, the session key is a secret
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise ConfigWriteError(f"Cannot write config file {self.path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ConfigWriteError(f"Cannot write config file {self.path}: {e}") from e
