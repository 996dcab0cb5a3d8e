"""Search and inspect TMX translation memories."""

from tmxplorer.core.importer.loader import LoadedDocument, load_tmx_content, load_tmx_file
from tmxplorer.core.search.engine import SearchMode, run_query
from tmxplorer.core.search.index import build_index
from tmxplorer.errors import DecodeFailure, EngineError, MalformedUnitError
from tmxplorer.session import Debouncer, SearchSession

__all__ = [
    "DecodeFailure",
    "Debouncer",
    "EngineError",
    "LoadedDocument",
    "MalformedUnitError",
    "SearchMode",
    "SearchSession",
    "build_index",
    "load_tmx_content",
    "load_tmx_file",
    "run_query",
]
