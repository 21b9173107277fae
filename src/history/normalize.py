"""Normalization of raw history rows into search results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class HistoryEntry:
    """One search result."""

    url: str
    title: str = ""


def normalize_url(url: str, strip_query_params: bool = False) -> str:
    url = url.strip()
    if strip_query_params:
        url = url.split("?", 1)[0]
    return url


def normalize(
    rows: Iterable[Tuple[Optional[str], Optional[str]]],
    strip_query_params: bool = False,
) -> List[HistoryEntry]:
    """
    Map (title, url) rows to entries keyed by url.

    A later row with the same url replaces the earlier title but keeps the
    position where the url first appeared. Row order is otherwise preserved.
    """
    by_url: Dict[str, str] = {}
    for title, url in rows:
        if not url:
            continue
        url = normalize_url(url, strip_query_params)
        if not url:
            continue
        by_url[url] = (title or "").strip()
    return [HistoryEntry(url=url, title=title) for url, title in by_url.items()]
