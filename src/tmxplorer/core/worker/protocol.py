"""Messages exchanged between the caller and the search engine task."""

from dataclasses import dataclass

from tmxplorer.core.search.engine import SearchMode
from tmxplorer.models.unit import TranslationUnit


@dataclass(frozen=True)
class LoadData:
    """Replace the engine's index with one built from these units."""

    units: tuple[TranslationUnit, ...]
    request_id: int = 0


@dataclass(frozen=True)
class Search:
    """Evaluate one query against the current index."""

    mode: SearchMode
    query: str = ""
    batch_ids: tuple[str, ...] = ()
    request_id: int = 0

    def __post_init__(self) -> None:
        # Rejects unknown mode strings before they reach the engine.
        object.__setattr__(self, "mode", SearchMode(self.mode))


@dataclass(frozen=True)
class Shutdown:
    """Stop the engine task after the messages queued before it."""


@dataclass(frozen=True)
class DataLoaded:
    count: int
    request_id: int = 0


@dataclass(frozen=True)
class SearchResults:
    """Reply to Search. ``positions`` is None when nothing is filtered."""

    positions: tuple[int, ...] | None
    truncated: bool
    request_id: int = 0


@dataclass(frozen=True)
class EngineFailed:
    """Reply to a request whose handling raised; the engine keeps running."""

    request_id: int
    message: str


Request = LoadData | Search | Shutdown
Reply = DataLoaded | SearchResults | EngineFailed
