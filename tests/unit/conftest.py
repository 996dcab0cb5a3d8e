"""Shared test fixtures."""

from pathlib import Path

import pytest

from tests.unit.samples import SAMPLE_TMX
from tmxplorer.core.importer.loader import LoadedDocument, load_tmx_content


@pytest.fixture
def sample_document() -> LoadedDocument:
    """The two-unit English/French sample, normalized."""
    return load_tmx_content(SAMPLE_TMX)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.tmx"
    path.write_text(SAMPLE_TMX, encoding="utf-8")
    return path
