"""
SQL construction for history searches.

Without terms the query lists the most recent titled entries, capped at
``DEFAULT_LIMIT`` rows. Each search term adds one clause requiring the term
to appear in the title or the URL; clauses are AND-combined, so every term
must match somewhere.

Terms are always bound as parameters. ``%``, ``_`` and ``\\`` inside a term
are escaped so they match literally, and SQLite's LIKE keeps the match
case-insensitive for ASCII text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .dialects import SchemaDialect

DEFAULT_LIMIT = 100
LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class Query:
    """An SQL statement and its bound parameters."""

    sql: str
    params: Tuple[str, ...] = ()


def split_terms(text: str) -> List[str]:
    """Split raw input on whitespace, dropping empty pieces."""
    return text.split()


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build(dialect: SchemaDialect, terms: Union[str, Sequence[str]] = ()) -> Query:
    """
    Build the history query for a dialect and search terms.

    Args:
        dialect: Schema of the target browser
        terms: Search terms, or a raw string split on whitespace

    Returns:
        Query with ``title`` and ``url`` result columns
    """
    if isinstance(terms, str):
        terms = split_terms(terms)
    terms = [t for t in (term.strip() for term in terms) if t]

    where = [f"{dialect.title} IS NOT NULL", f"{dialect.title} != ''"]
    params: List[str] = []
    for term in terms:
        where.append(
            f"({dialect.title} LIKE ? ESCAPE '{LIKE_ESCAPE}' "
            f"OR {dialect.url} LIKE ? ESCAPE '{LIKE_ESCAPE}')"
        )
        pattern = f"%{escape_like(term)}%"
        params.extend([pattern, pattern])

    sql = (
        f"SELECT DISTINCT {dialect.title} AS title, {dialect.url} AS url "
        f"FROM {dialect.source} "
        f"WHERE {' AND '.join(where)} "
        f"ORDER BY {dialect.order}"
    )
    if not terms:
        sql += f" LIMIT {DEFAULT_LIMIT}"

    return Query(sql=sql, params=tuple(params))
