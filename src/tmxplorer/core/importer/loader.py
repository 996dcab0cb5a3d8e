"""Load a TMX document into an ordered, immutable set of records."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from tmxplorer.config import ATTRIBUTE_PREFIX, DEFAULT_SOURCE_LANGUAGE, LARGE_FILE_BYTES
from tmxplorer.core.importer.normalizer import as_list, normalize_unit
from tmxplorer.core.importer.xml_reader import decode_tmx
from tmxplorer.errors import DecodeFailure, MalformedUnitError
from tmxplorer.models.unit import DocumentSummary, TranslationUnit


@dataclass(frozen=True)
class LoadedDocument:
    """A normalized TMX document, replaced wholesale on every load."""

    summary: DocumentSummary
    units: tuple[TranslationUnit, ...]
    skipped_units: int = 0
    duplicate_ids: tuple[str, ...] = ()

    def find_unit(self, unit_id: str) -> TranslationUnit | None:
        """Return the first unit with this id; later duplicates are shadowed."""
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None


def _header_attr(header: dict[str, Any], name: str) -> str | None:
    value = header.get(f"{ATTRIBUTE_PREFIX}{name}")
    return str(value) if value else None


def _collect_languages(units: tuple[TranslationUnit, ...]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for unit in units:
        for variant in unit.variants:
            seen.setdefault(variant.language, None)
    return tuple(seen)


def read_document(tree: dict[str, Any]) -> LoadedDocument:
    """Normalize a decoded TMX tree into a LoadedDocument.

    Units without variants are skipped and not counted. Repeated unit ids
    are kept, logged as warnings and listed in ``duplicate_ids``.

    Raises:
        DecodeFailure: The tree has no <tmx> root or no <body>.
    """
    root = tree.get("tmx")
    if not isinstance(root, dict):
        msg = "Invalid TMX file: missing root <tmx> element"
        raise DecodeFailure(msg)
    body = root.get("body")
    if not isinstance(body, dict):
        msg = "Invalid TMX file: missing <body> element"
        raise DecodeFailure(msg)

    header = root.get("header")
    if not isinstance(header, dict):
        header = {}
    source_language = _header_attr(header, "srclang") or DEFAULT_SOURCE_LANGUAGE

    units: list[TranslationUnit] = []
    skipped = 0
    seen_ids: set[str] = set()
    duplicates: dict[str, None] = {}
    for position, raw in enumerate(as_list(body.get("tu"))):
        if not isinstance(raw, dict):
            skipped += 1
            logger.debug("Skipping translation unit at position {}: empty node", position)
            continue
        try:
            unit = normalize_unit(raw, position, source_language)
        except MalformedUnitError as e:
            skipped += 1
            logger.debug("Skipping malformed unit: {}", e)
            continue
        if unit.id in seen_ids:
            duplicates.setdefault(unit.id, None)
            logger.warning("Duplicate translation unit id {} at position {}", unit.id, position)
        seen_ids.add(unit.id)
        units.append(unit)

    frozen_units = tuple(units)
    summary = DocumentSummary(
        source_language=source_language,
        total_units=len(frozen_units),
        tool=_header_attr(header, "creationtool"),
        tool_version=_header_attr(header, "creationtoolversion"),
        schema_version=_header_attr(header, "o-tmf"),
        admin_language=_header_attr(header, "adminlang"),
        segment_type=_header_attr(header, "segtype"),
        data_type=_header_attr(header, "datatype"),
        tmx_version=_header_attr(root, "version"),
        languages=_collect_languages(frozen_units),
    )
    logger.info(
        "Loaded {} translation units ({} skipped), source language {}",
        summary.total_units, skipped, source_language,
    )
    return LoadedDocument(
        summary=summary,
        units=frozen_units,
        skipped_units=skipped,
        duplicate_ids=tuple(duplicates),
    )


def load_tmx_content(content: bytes | str) -> LoadedDocument:
    """Decode and normalize TMX markup held in memory."""
    return read_document(decode_tmx(content))


def load_tmx_file(path: Path) -> LoadedDocument:
    """Read a TMX file from disk and normalize it.

    Raises:
        DecodeFailure: The file is not a valid TMX document.
        OSError: The file cannot be read.
    """
    content = path.read_bytes()
    if len(content) > LARGE_FILE_BYTES:
        logger.warning(
            "Large file detected ({:.1f} MiB), parsing may take a moment",
            len(content) / (1024 * 1024),
        )
    logger.debug("Parsing {} ({} bytes)", path, len(content))
    return load_tmx_content(content)
