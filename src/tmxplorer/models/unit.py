"""Domain models for a loaded translation memory."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class Variant:
    """One language's rendering of a translation unit."""

    language: str
    text: str


@dataclass(frozen=True)
class UnitMetadata:
    """Raw TMX usage and authorship attributes, left unparsed."""

    creation_date: str | None = None
    change_date: str | None = None
    usage_count: str | None = None
    created_by: str | None = None
    changed_by: str | None = None


@dataclass(frozen=True)
class TranslationUnit:
    """A single translation unit with its language variants.

    ``properties`` is copied into a read-only mapping on construction.
    """

    id: str
    source_language: str
    variants: tuple[Variant, ...]
    properties: Mapping[str, str] = field(default_factory=dict)
    metadata: UnitMetadata = field(default_factory=UnitMetadata)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def source_variant(self) -> Variant | None:
        """Return the first variant in the source language, if any."""
        for variant in self.variants:
            if variant.language == self.source_language:
                return variant
        return None

    def target_variants(self) -> tuple[Variant, ...]:
        return tuple(v for v in self.variants if v.language != self.source_language)


@dataclass(frozen=True)
class DocumentSummary:
    """Header-level facts about a loaded TMX document."""

    source_language: str
    total_units: int
    tool: str | None = None
    tool_version: str | None = None
    schema_version: str | None = None
    admin_language: str | None = None
    segment_type: str | None = None
    data_type: str | None = None
    tmx_version: str | None = None
    languages: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchIndexEntry:
    """Search projections of one unit, keyed by its document position."""

    position: int
    searchable_text: str
    normalized_key: str


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one search.

    ``positions`` is None when the query does not filter anything.
    """

    positions: tuple[int, ...] | None
    truncated: bool = False
