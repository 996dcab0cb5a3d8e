"""Render translation units and document summaries for display."""

import io
from typing import Any

from tmxplorer.models.unit import DocumentSummary, TranslationUnit, Variant


def format_tmx_date(value: str | None) -> str | None:
    """Format a TMX ``YYYYMMDDTHHMMSSZ`` stamp as ``YYYY-MM-DD HH:MM:SS``.

    Values that do not look like a TMX stamp are returned unchanged.
    """
    if not value:
        return None
    if len(value) < 15 or value[8] != "T" or not value[:8].isdigit():
        return value
    time_part = value[9:15]
    return (
        f"{value[0:4]}-{value[4:6]}-{value[6:8]} "
        f"{time_part[0:2]}:{time_part[2:4]}:{time_part[4:6]}"
    )


def _source_and_targets(unit: TranslationUnit) -> tuple[Variant, tuple[Variant, ...]]:
    # Fall back to the first variant when none matches the source language.
    source = unit.source_variant() or unit.variants[0]
    targets = tuple(v for v in unit.variants if v is not source)
    return source, targets


def render_unit_card(unit: TranslationUnit) -> str:
    """Render one unit as a plain-text card: id, source, targets, metadata, props."""
    source, targets = _source_and_targets(unit)
    meta = unit.metadata

    out = io.StringIO()
    changed = format_tmx_date(meta.change_date)
    out.write(f"# {unit.id}" + (f"  (changed {changed})" if changed else "") + "\n")

    for variant in (source, *targets):
        text = variant.text or "(empty segment)"
        lines = text.split("\n")
        out.write(f"  [{variant.language}] {lines[0]}\n")
        for line in lines[1:]:
            out.write(f"      {line}\n")

    footer: list[str] = []
    if meta.creation_date or meta.created_by:
        created = format_tmx_date(meta.creation_date) or "-"
        footer.append(f"created {created}" + (f" by {meta.created_by}" if meta.created_by else ""))
    if meta.changed_by:
        footer.append(f"changed by {meta.changed_by}")
    if meta.usage_count:
        footer.append(f"usage {meta.usage_count}")
    footer.extend(f"{key}={value}" for key, value in unit.properties.items())
    if footer:
        out.write("  " + " | ".join(footer) + "\n")

    return out.getvalue()


def unit_to_dict(unit: TranslationUnit, *, position: int | None = None) -> dict[str, Any]:
    source, targets = _source_and_targets(unit)
    data: dict[str, Any] = {
        "id": unit.id,
        "source_language": unit.source_language,
        "source": {"language": source.language, "text": source.text},
        "targets": [{"language": v.language, "text": v.text} for v in targets],
        "properties": dict(unit.properties),
        "metadata": {
            "creation_date": format_tmx_date(unit.metadata.creation_date),
            "change_date": format_tmx_date(unit.metadata.change_date),
            "usage_count": unit.metadata.usage_count,
            "created_by": unit.metadata.created_by,
            "changed_by": unit.metadata.changed_by,
        },
    }
    if position is not None:
        data["position"] = position
    return data


def summary_to_dict(summary: DocumentSummary) -> dict[str, Any]:
    return {
        "source_language": summary.source_language,
        "admin_language": summary.admin_language,
        "total_units": summary.total_units,
        "tool": summary.tool,
        "tool_version": summary.tool_version,
        "schema_version": summary.schema_version,
        "segment_type": summary.segment_type,
        "data_type": summary.data_type,
        "tmx_version": summary.tmx_version,
        "languages": list(summary.languages),
    }


def render_summary(summary: DocumentSummary) -> str:
    """Render the header stats block shown above search results."""
    out = io.StringIO()
    out.write(f"Source language:  {summary.source_language}")
    out.write(f"  (admin: {summary.admin_language or '-'})\n")
    out.write(f"Total units:      {summary.total_units:,}\n")
    out.write(f"Creation tool:    {summary.tool or 'Unknown'} v{summary.tool_version or '?'}\n")
    out.write(f"Data type:        {summary.data_type or 'Plain Text'}")
    out.write(f"  (segtype: {summary.segment_type or 'sentence'})\n")
    if summary.tmx_version:
        out.write(f"TMX version:      {summary.tmx_version}\n")
    if summary.languages:
        out.write(f"Languages:        {', '.join(summary.languages)}\n")
    return out.getvalue()
