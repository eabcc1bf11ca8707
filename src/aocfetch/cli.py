"""
aocfetch CLI - download Advent of Code puzzle inputs.

Usage:
    aocfetch get DAY [--year Y] [--output DIR] [--session-key KEY]
    aocfetch set KEY VALUE      Persist year, session_key or output_path
    aocfetch unset KEY          Remove a persisted value
    aocfetch show               Show config and cookie database location
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from aocfetch import __version__
from aocfetch.config import ConfigStore, Settings, load_settings
from aocfetch.exceptions import AocFetchError, CookieError
from aocfetch.models import mask_secret
from aocfetch.utils.console import (
    err_console,
    print_error,
    print_header,
    print_info,
    print_settings_table,
    print_success,
    print_warning,
    set_headless,
)

app = typer.Typer(
    name="aocfetch",
    help="🎄 Download your Advent of Code puzzle inputs",
    add_completion=False,
    rich_markup_mode="rich",
)


def setup_logging(verbose: bool, headless: bool):
    """Configure logging based on options."""
    level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger()

    # Clear existing handlers to allow reconfiguration
    if root_logger.handlers:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    if headless:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
    else:
        from rich.logging import RichHandler

        handler = RichHandler(
            console=err_console,
            rich_tracebacks=True,
            show_time=verbose,
            show_path=verbose,
        )
        root_logger.addHandler(handler)
        root_logger.setLevel(level if verbose else logging.WARNING)

    logging.getLogger("aocfetch").setLevel(root_logger.level)

    for noisy_logger in ['urllib3', 'urllib3.connectionpool', 'requests']:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    set_headless(headless)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def version_callback(value: bool):
    if value:
        typer.echo(f"aocfetch {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    headless: bool = typer.Option(False, "--headless", "-H", help="Run without fancy output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to use"),
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """🎄 aocfetch - Advent of Code input downloader"""
    setup_logging(verbose, headless)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = load_settings(config)


@app.command()
def get(
    ctx: typer.Context,
    day: int = typer.Argument(..., help="Puzzle day (1-25)"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Event year (default: config, then latest event)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory (default: config, then ./inputs)"),
    session_key: Optional[str] = typer.Option(None, "--session-key", "-s", help="Session cookie value"),
):
    """📥 Download the input for one puzzle."""
    from aocfetch.pipeline import GetPipeline

    settings = _settings(ctx)

    try:
        pipeline = GetPipeline(settings, ConfigStore(settings.config_path))
        path = pipeline.run(day=day, year=year, output=output, session_key=session_key)
    except AocFetchError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logging.getLogger(__name__).debug("Unexpected failure", exc_info=True)
        print_error(f"Get failed: {e}")
        raise typer.Exit(1)

    print_success(f"Saved puzzle input to {path}")


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="year, session_key or output_path"),
    value: str = typer.Argument(..., help="New value"),
):
    """⚙️ Persist one config value."""
    settings = _settings(ctx)
    store = ConfigStore(settings.config_path)

    try:
        store.set(key, value)
    except AocFetchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    field = store.normalize_key(key)
    shown = mask_secret(value) if field == "session_key" else value
    print_success(f"Set {field} = {shown} in {store.path}")


@app.command()
def unset(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="year, session_key or output_path"),
):
    """🧹 Remove one config value."""
    settings = _settings(ctx)
    store = ConfigStore(settings.config_path)

    try:
        store.unset(key)
    except AocFetchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Cleared {store.normalize_key(key)} in {store.path}")


@app.command()
def show(ctx: typer.Context):
    """📋 Show configuration and cookie database location."""
    from aocfetch.auth import get_all_extractors

    settings = _settings(ctx)
    store = ConfigStore(settings.config_path)

    print_header("aocfetch", f"Version {__version__}")

    try:
        config = store.load()
    except AocFetchError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not store.path.exists():
        print_warning(f"No config file at {store.path}, using defaults")

    print_settings_table("Configuration", {
        "Config file": store.path,
        "Year": config.year if config.year is not None else "(latest event)",
        "Session key": mask_secret(config.session_key) or "(not set)",
        "Output path": config.output_path or settings.default_output_dir,
    })

    for extractor in get_all_extractors(settings):
        try:
            print_info(f"{extractor.get_name()} cookie database: {extractor.locate()}")
        except CookieError as e:
            print_warning(str(e))
