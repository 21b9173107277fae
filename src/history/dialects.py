"""
Schema dialects for browser history databases.

Each supported browser maps to exactly one SchemaDialect describing where
its history lives inside the SQLite file:

- title: column expression holding the page title
- url: column expression holding the visited URL
- source: table (or join clause) the expressions are selected from
- order: default ordering clause, most recent first

Chromium-based browsers share one schema (``urls`` table), Firefox uses
``moz_places``, Safari splits titles and URLs across ``history_visits`` and
``history_items``, and qutebrowser keeps a flat ``History`` table.

Adding a browser means adding one entry to ``DIALECTS`` and one profile to
``history._patterns.BROWSER_PROFILES``; nothing else branches on the
browser identifier.

References:
- Chromium: components/history/core/browser/url_database.cc
- Firefox: toolkit/components/places/nsPlacesTables.h
- qutebrowser: qutebrowser/browser/history.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .exceptions import NotConfiguredError


@dataclass(frozen=True)
class SchemaDialect:
    """Field mapping for one browser's history schema."""

    name: str
    title: str
    url: str
    source: str
    order: str


CHROMIUM_DIALECT = SchemaDialect(
    name="chromium",
    title="title",
    url="url",
    source="urls",
    order="last_visit_time DESC",
)

FIREFOX_DIALECT = SchemaDialect(
    name="firefox",
    title="title",
    url="url",
    source="moz_places",
    order="last_visit_date DESC",
)

SAFARI_DIALECT = SchemaDialect(
    name="safari",
    title="history_visits.title",
    url="history_items.url",
    source=(
        "history_items INNER JOIN history_visits "
        "ON history_items.id = history_visits.history_item"
    ),
    order="history_visits.visit_time DESC",
)

QUTEBROWSER_DIALECT = SchemaDialect(
    name="qutebrowser",
    title="title",
    url="url",
    source="History",
    order="atime DESC",
)


# Browser identifier -> dialect. Exactly one entry per supported browser.
DIALECTS: Dict[str, SchemaDialect] = {
    "chrome": CHROMIUM_DIALECT,
    "chromium": CHROMIUM_DIALECT,
    "brave": CHROMIUM_DIALECT,
    "edge": CHROMIUM_DIALECT,
    "vivaldi": CHROMIUM_DIALECT,
    "firefox": FIREFOX_DIALECT,
    "safari": SAFARI_DIALECT,
    "qutebrowser": QUTEBROWSER_DIALECT,
}


def get_dialect(browser: str) -> SchemaDialect:
    """Return the dialect for a browser identifier."""
    try:
        return DIALECTS[browser]
    except KeyError:
        raise NotConfiguredError(browser, reason="no schema dialect") from None


def supported_browsers() -> List[str]:
    """Return all browser identifiers with a dialect, sorted."""
    return sorted(DIALECTS)


def validate_profiles(browsers: Iterable[str]) -> None:
    """
    Fail fast if any configured browser lacks a dialect entry.

    Raises:
        NotConfiguredError: For the first browser without a dialect
    """
    for browser in browsers:
        get_dialect(browser)
