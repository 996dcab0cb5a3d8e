"""Tests for the caller-side search session and debouncer."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import pytest

from tests.unit.samples import MALFORMED_TMX, SAMPLE_TMX
from tmxplorer.core.importer.loader import LoadedDocument, load_tmx_content
from tmxplorer.core.search.engine import SearchMode
from tmxplorer.errors import DecodeFailure, EngineError
from tmxplorer.models.unit import QueryResult, TranslationUnit, Variant
from tmxplorer.session import Debouncer, SearchSession


def test_session_load_and_search(sample_document: LoadedDocument) -> None:
    async def run() -> tuple[int, QueryResult | None, QueryResult | None]:
        async with SearchSession() as session:
            count = await session.load(sample_document)
            text = await session.search(SearchMode.FULL_TEXT, "bonjour")
            batch = await session.search("batch_id", batch_ids=["xyz", "abc123"])
        return count, text, batch

    count, text, batch = asyncio.run(run())
    assert count == 2
    assert text == QueryResult(positions=(0,), truncated=False)
    assert batch == QueryResult(positions=(0,), truncated=False)


def test_session_maps_positions_to_its_own_units(sample_document: LoadedDocument) -> None:
    async def run() -> list[str]:
        async with SearchSession() as session:
            await session.load(sample_document)
            result = await session.search(SearchMode.FULL_TEXT, "o")
            assert result is not None and result.positions is not None
            return [u.id for u in session.units_at(result.positions)]

    assert asyncio.run(run()) == ["u1", "generated-1"]


def test_session_discards_superseded_replies(sample_document: LoadedDocument) -> None:
    async def run() -> list[QueryResult | None]:
        async with SearchSession() as session:
            await session.load(sample_document)
            return list(
                await asyncio.gather(
                    session.search(SearchMode.FULL_TEXT, "hello"),
                    session.search(SearchMode.FULL_TEXT, "bye"),
                )
            )

    older, latest = asyncio.run(run())
    assert older is None
    assert latest == QueryResult(positions=(1,), truncated=False)


def test_session_reload_replaces_document(sample_document: LoadedDocument) -> None:
    async def run() -> QueryResult | None:
        async with SearchSession() as session:
            await session.load(sample_document)
            await session.load(load_tmx_content(MALFORMED_TMX))
            return await session.search(SearchMode.FULL_TEXT, "hello")

    assert asyncio.run(run()) == QueryResult(positions=(), truncated=False)


def test_session_requires_context_manager(sample_document: LoadedDocument) -> None:
    with pytest.raises(RuntimeError, match="not running"):
        asyncio.run(SearchSession().load(sample_document))


def test_debouncer_runs_only_last_call() -> None:
    calls: list[str] = []

    async def run() -> None:
        debouncer = Debouncer(delay=0.05)

        def make(query: str) -> Callable[[], Awaitable[str]]:
            async def record() -> str:
                calls.append(query)
                return query

            return record

        first = debouncer.call(make("h"))
        debouncer.call(make("he"))
        last = debouncer.call(make("hello"))
        assert await last == "hello"
        assert first.cancelled()

    asyncio.run(run())
    assert calls == ["hello"]


def test_debouncer_cancel_drops_pending_call() -> None:
    calls: list[int] = []

    async def run() -> None:
        debouncer = Debouncer(delay=0.05)

        async def record() -> None:
            calls.append(1)

        debouncer.call(record)
        debouncer.cancel()
        await asyncio.sleep(0.1)

    asyncio.run(run())
    assert calls == []


def test_session_raises_engine_error_and_recovers(sample_document: LoadedDocument) -> None:
    bad_unit = TranslationUnit(
        id="bad",
        source_language="en",
        variants=(Variant("en", "x"),),
        properties={"x-segment-id": 5},  # type: ignore[dict-item]
    )
    bad = LoadedDocument(summary=sample_document.summary, units=(bad_unit,))

    async def run() -> tuple[LoadedDocument | None, QueryResult | None]:
        async with SearchSession() as session:
            with pytest.raises(EngineError):
                await asyncio.wait_for(session.load(bad), timeout=2)
            after_failure = session.document
            await asyncio.wait_for(session.load(sample_document), timeout=2)
            result = await asyncio.wait_for(
                session.search(SearchMode.FULL_TEXT, "bonjour"), timeout=2
            )
        return after_failure, result

    after_failure, result = asyncio.run(run())
    assert after_failure is None
    assert result == QueryResult(positions=(0,), truncated=False)


def test_session_load_content_indexes_document() -> None:
    async def run() -> tuple[int, QueryResult | None]:
        async with SearchSession() as session:
            count = await session.load_content(SAMPLE_TMX)
            assert session.document is not None
            return count, await session.search(SearchMode.FULL_TEXT, "revoir")

    assert asyncio.run(run()) == (2, QueryResult(positions=(1,), truncated=False))


def test_decode_failure_clears_previous_document(sample_document: LoadedDocument) -> None:
    async def run() -> tuple[LoadedDocument | None, QueryResult | None]:
        async with SearchSession() as session:
            await session.load(sample_document)
            with pytest.raises(DecodeFailure):
                await session.load_content("not xml")
            return session.document, await session.search(SearchMode.FULL_TEXT, "bonjour")

    document, result = asyncio.run(run())
    assert document is None
    assert result == QueryResult(positions=(), truncated=False)


def test_load_file_reads_from_disk_and_clears_on_missing_file(
    sample_file: Path, tmp_path: Path
) -> None:
    async def run() -> tuple[int, LoadedDocument | None, QueryResult | None]:
        async with SearchSession() as session:
            count = await session.load_file(sample_file)
            with pytest.raises(OSError):
                await session.load_file(tmp_path / "missing.tmx")
            return count, session.document, await session.search(SearchMode.FULL_TEXT, "hello")

    count, document, result = asyncio.run(run())
    assert count == 2
    assert document is None
    assert result == QueryResult(positions=(), truncated=False)
