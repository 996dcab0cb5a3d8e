"""Normalize decoded TMX nodes into TranslationUnit records.

The decoded tree is loosely shaped: a child may be a single node or a list,
and text may be a bare string or a ``{"#text": ...}`` wrapper. Everything is
coerced to one canonical shape here so nothing downstream has to care.
"""

import json
from typing import Any

from tmxplorer.config import ATTRIBUTE_PREFIX, TEXT_KEY
from tmxplorer.errors import MalformedUnitError
from tmxplorer.models.unit import TranslationUnit, UnitMetadata, Variant

UNKNOWN_LANGUAGE = "unknown"


def _attr(node: dict[str, Any], name: str) -> str | None:
    value = node.get(f"{ATTRIBUTE_PREFIX}{name}")
    return None if value is None else str(value)


def as_list(value: Any) -> list[Any]:
    """Coerce a possibly-singular decoded child to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def extract_text(seg: Any) -> str:
    """Return the readable text of a segment.

    Inline markup (``<bpt>``, ``<ph>`` ...) is not reconstructed; a segment
    carrying it is rendered as its JSON form.
    """
    if seg is None:
        return ""
    if isinstance(seg, str):
        return seg
    if isinstance(seg, dict) and set(seg) == {TEXT_KEY}:
        return str(seg[TEXT_KEY])
    return json.dumps(seg, ensure_ascii=False)


def normalize_properties(props: Any) -> dict[str, str]:
    """Build a type -> value map from one prop node or a list of them."""
    result: dict[str, str] = {}
    for prop in as_list(props):
        if not isinstance(prop, dict):
            continue
        prop_type = _attr(prop, "type")
        if not prop_type:
            continue
        result[prop_type] = str(prop.get(TEXT_KEY, ""))
    return result


def normalize_unit(
    raw: dict[str, Any],
    position: int,
    default_source_language: str,
) -> TranslationUnit:
    """Transform a decoded <tu> node into a TranslationUnit.

    Args:
        raw: The decoded <tu> node.
        position: Zero-based position of the unit in the document body.
        default_source_language: Header srclang, applied to every unit.

    Raises:
        MalformedUnitError: The unit has no <tuv> children.
    """
    explicit_id = _attr(raw, "tuid")

    variants: list[Variant] = []
    for tuv in as_list(raw.get("tuv")):
        if not isinstance(tuv, dict):
            continue
        variants.append(
            Variant(
                language=_attr(tuv, "xml:lang") or _attr(tuv, "lang") or UNKNOWN_LANGUAGE,
                text=extract_text(tuv.get("seg")),
            )
        )
    if not variants:
        raise MalformedUnitError(position, explicit_id)

    return TranslationUnit(
        id=explicit_id or f"generated-{position}",
        source_language=default_source_language,
        variants=tuple(variants),
        properties=normalize_properties(raw.get("prop")),
        metadata=UnitMetadata(
            creation_date=_attr(raw, "creationdate"),
            change_date=_attr(raw, "changedate"),
            usage_count=_attr(raw, "usagecount"),
            created_by=_attr(raw, "creationid"),
            changed_by=_attr(raw, "changeid"),
        ),
    )
