"""Background search engine driven by an ordered request queue."""

import asyncio
from dataclasses import dataclass, field

from loguru import logger

from tmxplorer.config import CHANNEL_SIZE
from tmxplorer.core.search.engine import run_query
from tmxplorer.core.search.index import build_index
from tmxplorer.core.worker.protocol import (
    DataLoaded,
    EngineFailed,
    LoadData,
    Reply,
    Request,
    Search,
    SearchResults,
    Shutdown,
)
from tmxplorer.models.unit import SearchIndexEntry


class SearchEngine:
    """Holds the index for one loaded document and answers queries on it."""

    def __init__(self) -> None:
        self._index: tuple[SearchIndexEntry, ...] = ()

    @property
    def size(self) -> int:
        return len(self._index)

    def handle(self, message: LoadData | Search) -> Reply:
        if isinstance(message, LoadData):
            # Last load wins: the old index is dropped before the new one is built.
            self._index = ()
            self._index = build_index(message.units)
            logger.debug("Search index built for {} units", len(self._index))
            return DataLoaded(count=len(self._index), request_id=message.request_id)

        result = run_query(self._index, message.mode, message.query, message.batch_ids)
        return SearchResults(
            positions=result.positions,
            truncated=result.truncated,
            request_id=message.request_id,
        )


@dataclass
class EngineChannel:
    """The pair of bounded FIFO queues connecting caller and engine."""

    requests: asyncio.Queue[Request] = field(
        default_factory=lambda: asyncio.Queue(maxsize=CHANNEL_SIZE)
    )
    replies: asyncio.Queue[Reply] = field(
        default_factory=lambda: asyncio.Queue(maxsize=CHANNEL_SIZE)
    )


async def serve(channel: EngineChannel, engine: SearchEngine | None = None) -> None:
    """Process requests strictly in arrival order until Shutdown.

    Each message runs to completion in a worker thread before the next one is
    taken, so the caller's event loop stays responsive while the index is
    built or scanned and the index is never touched concurrently.
    """
    engine = engine or SearchEngine()
    while True:
        message = await channel.requests.get()
        try:
            if isinstance(message, Shutdown):
                logger.debug("Search engine stopping")
                return
            try:
                reply = await asyncio.to_thread(engine.handle, message)
            except Exception as e:
                logger.exception("Search engine failed on request {}", message.request_id)
                reply = EngineFailed(request_id=message.request_id, message=str(e))
            await channel.replies.put(reply)
        finally:
            channel.requests.task_done()
