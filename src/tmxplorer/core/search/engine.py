"""Literal query evaluation over a built search index.

All matching is substring, prefix or set membership on case-folded text.
Entries are scanned in document order and the scan stops at the cap, so a
result is always a prefix of the uncapped result.
"""

from collections.abc import Callable, Iterable, Sequence
from enum import StrEnum

from loguru import logger

from tmxplorer.config import RESULT_CAP
from tmxplorer.core.search.index import normalize_key
from tmxplorer.models.unit import QueryResult, SearchIndexEntry

NO_FILTER = QueryResult(positions=None, truncated=False)


class SearchMode(StrEnum):
    FULL_TEXT = "full_text"
    ID_PREFIX = "id_prefix"
    ID_PARTIAL = "id_partial"
    BATCH_ID = "batch_id"


def _scan(
    index: Sequence[SearchIndexEntry],
    predicate: Callable[[SearchIndexEntry], bool],
    cap: int,
) -> QueryResult:
    positions: list[int] = []
    for entry in index:
        if predicate(entry):
            positions.append(entry.position)
            if len(positions) >= cap:
                break
    return QueryResult(positions=tuple(positions), truncated=len(positions) >= cap)


def batch_key_set(batch_ids: Iterable[str]) -> frozenset[str]:
    """Normalize batch identifiers, dropping the ones that end up empty."""
    return frozenset(key for key in (normalize_key(i) for i in batch_ids) if key)


def run_query(
    index: Sequence[SearchIndexEntry],
    mode: SearchMode | str,
    query: str = "",
    batch_ids: Iterable[str] | None = None,
    *,
    cap: int = RESULT_CAP,
) -> QueryResult:
    """Evaluate one query against the index.

    Args:
        index: Entries from build_index, in document order.
        mode: One of the four SearchMode values.
        query: Query text for full_text, id_prefix and id_partial.
        batch_ids: Identifiers for batch_id, already split and trimmed by the caller.
        cap: Maximum number of positions to return.

    Returns:
        NO_FILTER for empty input, otherwise the matching positions in
        ascending order and whether the cap cut the scan short.
    """
    if cap < 1:
        msg = f"cap must be positive, got {cap}"
        raise ValueError(msg)
    mode = SearchMode(mode)

    if mode is SearchMode.BATCH_ID:
        keys = batch_key_set(batch_ids or ())
        if not keys:
            return NO_FILTER
        result = _scan(index, lambda e: e.normalized_key in keys, cap)
    else:
        if not query.strip():
            return NO_FILTER
        if mode is SearchMode.FULL_TEXT:
            needle = query.casefold()
            result = _scan(index, lambda e: needle in e.searchable_text, cap)
        elif mode is SearchMode.ID_PREFIX:
            needle = normalize_key(query)
            result = _scan(index, lambda e: e.normalized_key.startswith(needle), cap)
        else:
            needle = normalize_key(query)
            result = _scan(index, lambda e: needle in e.normalized_key, cap)

    logger.debug(
        "Search {} {!r}: {} matches{}",
        mode.value, query, len(result.positions or ()), " (truncated)" if result.truncated else "",
    )
    return result
