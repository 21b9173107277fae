from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from core.app_version import get_app_version
from core.config import AppConfig, load_app_config
from core.logging import configure_logging, get_logger
from history import (
    HistSiftError,
    SearchSession,
    SnapshotManager,
    get_all_browsers,
    get_dialect,
    resolve,
    search,
)
from history._patterns import get_browser_display_name

LOGGER = get_logger("app.main")


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _setup(config_path: Optional[Path]) -> AppConfig:
    try:
        config = load_app_config(config_path)
    except (HistSiftError, ValueError, OSError) as e:
        _fail(str(e))
    configure_logging(
        config.logs_dir,
        level=config.logging.level,
        max_bytes=config.logging.log_max_mb * 1024 * 1024,
        backup_count=config.logging.log_backup_count,
    )
    return config


def _list_browsers(config: AppConfig) -> None:
    for browser in get_all_browsers():
        name = get_browser_display_name(browser)
        try:
            location = str(resolve(browser, overrides=config.browsers))
        except HistSiftError as e:
            location = f"unavailable ({e})"
        marker = "*" if browser == config.default_browser else " "
        click.echo(f"{marker} {browser:<12} {name:<16} {location}")


def _print_results(browser: str, config: AppConfig, text: str, force: bool) -> None:
    with SearchSession(browser, config, force=force) as session:
        for entry in session.candidates(text):
            click.echo(f"{entry.title}\t{entry.url}")


def _run_picker(browser: str, config: AppConfig, text: str, force: bool) -> None:
    from .picker import open_url, pick_with_dialog, show_error

    title = f"{get_browser_display_name(browser)} History"
    try:
        search(
            browser,
            config,
            pick=lambda candidates: pick_with_dialog(candidates, title=title, initial_text=text),
            opener=open_url,
            force=force,
        )
    except HistSiftError as e:
        show_error(str(e))
        raise


@click.command()
@click.argument("terms", nargs=-1)
@click.option("--browser", "-b", default=None, help="Browser to search (default from config)")
@click.option("--force", is_flag=True, default=False, help="Refresh the history snapshot first")
@click.option("--print", "print_only", is_flag=True, default=False,
              help="Print matches as title<TAB>url instead of opening the picker")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Path to config.yml")
@click.option("--list-browsers", is_flag=True, default=False,
              help="Show supported browsers and their history locations")
@click.option("--clear-cache", is_flag=True, default=False,
              help="Delete the browser's history snapshot and exit")
@click.version_option(get_app_version(), prog_name="HistSift")
def main(
    terms: Tuple[str, ...],
    browser: Optional[str],
    force: bool,
    print_only: bool,
    config_path: Optional[Path],
    list_browsers: bool,
    clear_cache: bool,
) -> None:
    """Search a browser's history and open the chosen page."""
    config = _setup(config_path)

    if list_browsers:
        _list_browsers(config)
        return

    browser = browser or config.default_browser
    text = " ".join(terms)
    try:
        get_dialect(browser)
        if clear_cache:
            removed = SnapshotManager(config.snapshot_dir).remove(browser)
            click.echo("Snapshot removed" if removed else "No snapshot to remove")
        elif print_only:
            _print_results(browser, config, text, force)
        else:
            _run_picker(browser, config, text, force)
    except HistSiftError as e:
        LOGGER.warning("Search for %s failed: %s", browser, e)
        _fail(str(e))


if __name__ == "__main__":  # pragma: no cover
    main()
