"""Caller-side session: owns the engine task and routes its replies."""

import asyncio
import contextlib
import itertools
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path
from types import TracebackType
from typing import Any

from loguru import logger

from tmxplorer.config import DEBOUNCE_SECONDS
from tmxplorer.core.importer.loader import LoadedDocument, load_tmx_content, load_tmx_file
from tmxplorer.core.search.engine import SearchMode
from tmxplorer.core.worker.engine_task import EngineChannel, serve
from tmxplorer.core.worker.protocol import (
    DataLoaded,
    EngineFailed,
    LoadData,
    Reply,
    Search,
    SearchResults,
    Shutdown,
)
from tmxplorer.errors import DecodeFailure, EngineError
from tmxplorer.models.unit import QueryResult, TranslationUnit


class SearchSession:
    """Run a search engine task and talk to it through its channel.

    The engine answers every request in order and never drops a reply.
    The session keeps "latest wins" semantics on top of that: a search
    reply that arrives after a newer search was issued resolves to None.

    Use as an async context manager::

        async with SearchSession() as session:
            await session.load(document)
            result = await session.search(SearchMode.FULL_TEXT, "bonjour")
    """

    def __init__(self) -> None:
        self.document: LoadedDocument | None = None
        self._channel = EngineChannel()
        self._ids = itertools.count(1)
        self._latest_search = 0
        self._pending: dict[int, asyncio.Future[Reply]] = {}
        self._engine_task: asyncio.Task[None] | None = None
        self._reader_task: asyncio.Task[None] | None = None

    async def __aenter__(self) -> "SearchSession":
        self._engine_task = asyncio.create_task(serve(self._channel))
        self._reader_task = asyncio.create_task(self._read_replies())
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            if self._engine_task is not None:
                task, self._engine_task = self._engine_task, None
                await self._channel.requests.put(Shutdown())
                await task
        finally:
            if self._reader_task is not None:
                self._reader_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._reader_task
                self._reader_task = None
            for future in self._pending.values():
                future.cancel()
            self._pending.clear()

    async def _read_replies(self) -> None:
        while True:
            reply = await self._channel.replies.get()
            future = self._pending.pop(reply.request_id, None)
            if future is None or future.done():
                continue
            if isinstance(reply, EngineFailed):
                future.set_exception(EngineError(reply.message))
            else:
                future.set_result(reply)

    async def _send(self, message: LoadData | Search) -> Reply:
        if self._engine_task is None:
            msg = "SearchSession is not running; use it as an async context manager"
            raise RuntimeError(msg)
        future: asyncio.Future[Reply] = asyncio.get_running_loop().create_future()
        self._pending[message.request_id] = future
        await self._channel.requests.put(message)
        return await future

    async def load(self, document: LoadedDocument) -> int:
        """Send the document's units to the engine and wait for indexing.

        Raises:
            EngineError: The engine failed to index the units. The session
                is left with no document.
        """
        self.document = None
        self._latest_search = 0
        reply = await self._send(LoadData(units=document.units, request_id=next(self._ids)))
        if not isinstance(reply, DataLoaded):
            msg = f"Unexpected reply to LoadData: {reply!r}"
            raise TypeError(msg)
        self.document = document
        logger.debug("Engine indexed {} units", reply.count)
        return reply.count

    async def clear(self) -> None:
        """Drop the current document and empty the engine's index."""
        self.document = None
        self._latest_search = 0
        await self._send(LoadData(units=(), request_id=next(self._ids)))

    async def load_content(self, content: bytes | str) -> int:
        """Decode, normalize and index a TMX document.

        Raises:
            DecodeFailure: The content is not a TMX document. The previous
                document is cleared first, so nothing stale remains searchable.
        """
        try:
            document = load_tmx_content(content)
        except DecodeFailure:
            await self.clear()
            raise
        return await self.load(document)

    async def load_file(self, path: Path) -> int:
        """Like load_content, reading the document from disk."""
        try:
            document = load_tmx_file(path)
        except (DecodeFailure, OSError):
            await self.clear()
            raise
        return await self.load(document)

    async def search(
        self,
        mode: SearchMode | str,
        query: str = "",
        batch_ids: Iterable[str] | None = None,
    ) -> QueryResult | None:
        """Run a query on the engine.

        Returns:
            The query result, or None when a newer search was issued before
            this one's reply arrived.

        Raises:
            EngineError: The engine failed while evaluating the query.
        """
        request_id = next(self._ids)
        self._latest_search = request_id
        message = Search(
            mode=SearchMode(mode),
            query=query,
            batch_ids=tuple(batch_ids or ()),
            request_id=request_id,
        )
        reply = await self._send(message)
        if request_id != self._latest_search:
            logger.debug("Discarding stale reply for request {}", request_id)
            return None
        if not isinstance(reply, SearchResults):
            msg = f"Unexpected reply to Search: {reply!r}"
            raise TypeError(msg)
        return QueryResult(positions=reply.positions, truncated=reply.truncated)

    def units_at(self, positions: Iterable[int]) -> list[TranslationUnit]:
        """Map engine positions back to this session's copy of the units."""
        if self.document is None:
            return []
        units = self.document.units
        return [units[p] for p in positions]


class Debouncer:
    """Delay a coroutine until calls have been quiet for ``delay`` seconds.

    Each new call cancels the one still waiting, so only the last call in
    a burst runs.
    """

    def __init__(self, delay: float = DEBOUNCE_SECONDS) -> None:
        self.delay = delay
        self._pending: asyncio.Task[Any] | None = None

    def call(self, func: Callable[[], Awaitable[Any]]) -> asyncio.Task[Any]:
        self.cancel()
        self._pending = asyncio.create_task(self._run_later(func))
        return self._pending

    async def _run_later(self, func: Callable[[], Awaitable[Any]]) -> Any:
        await asyncio.sleep(self.delay)
        return await func()

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
