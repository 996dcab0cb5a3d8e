"""Build the in-memory search index for a loaded document."""

from collections.abc import Sequence

from tmxplorer.config import SEGMENT_ID_PROPERTY
from tmxplorer.models.unit import SearchIndexEntry, TranslationUnit


def normalize_key(value: str) -> str:
    """Case-fold and trim an identifier for id-based matching."""
    return value.strip().casefold()


def _index_entry(position: int, unit: TranslationUnit) -> SearchIndexEntry:
    source = unit.source_variant()
    source_text = source.text if source else ""
    target_texts = " ".join(v.text for v in unit.target_variants())
    key = normalize_key(unit.properties.get(SEGMENT_ID_PROPERTY, ""))

    return SearchIndexEntry(
        position=position,
        searchable_text=f"{unit.id} {source_text} {target_texts} {key}".casefold(),
        normalized_key=key,
    )


def build_index(units: Sequence[TranslationUnit]) -> tuple[SearchIndexEntry, ...]:
    """Derive one index entry per unit, in document order."""
    return tuple(_index_entry(position, unit) for position, unit in enumerate(units))
