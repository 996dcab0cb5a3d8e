"""Split search results into fixed-size pages."""

from collections.abc import Sequence
from dataclasses import dataclass

from tmxplorer.config import PAGE_SIZE


@dataclass(frozen=True)
class Page:
    """One page of unit positions."""

    page: int
    total_pages: int
    total_results: int
    items: tuple[int, ...]


def paginate(
    positions: Sequence[int] | None,
    *,
    total_units: int,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> Page:
    """Slice positions into a 1-based page.

    ``positions=None`` means no filter: every unit position is paged.
    Out-of-range page numbers are clamped to the first or last page.
    """
    if page_size < 1:
        msg = f"page_size must be positive, got {page_size}"
        raise ValueError(msg)

    all_positions = range(total_units) if positions is None else positions
    total = len(all_positions)
    total_pages = max(1, -(-total // page_size))
    page = min(max(page, 1), total_pages)

    start = (page - 1) * page_size
    return Page(
        page=page,
        total_pages=total_pages,
        total_results=total,
        items=tuple(all_positions[start : start + page_size]),
    )
