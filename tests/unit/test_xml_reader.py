"""Tests for decoding TMX markup into a nested dict tree."""

import pytest

from tests.unit.samples import SAMPLE_TMX
from tmxplorer.core.importer.xml_reader import decode_tmx
from tmxplorer.errors import DecodeFailure


def test_decode_prefixes_attributes_and_keeps_xml_lang() -> None:
    tree = decode_tmx(SAMPLE_TMX)
    header = tree["tmx"]["header"]
    assert tree["tmx"]["@_version"] == "1.4"
    assert header["@_srclang"] == "en-US"
    assert header["@_creationtool"] == "TestTool"

    first = tree["tmx"]["body"]["tu"][0]
    assert first["@_tuid"] == "u1"
    assert first["tuv"][0]["@_xml:lang"] == "en-US"
    assert first["tuv"][0]["seg"] == "Hello"


def test_decode_always_returns_lists_for_repeated_elements() -> None:
    tree = decode_tmx(
        '<tmx><header/><body><tu><tuv xml:lang="en"><seg>One</seg></tuv></tu></body></tmx>'
    )
    body = tree["tmx"]["body"]
    assert isinstance(body["tu"], list)
    assert len(body["tu"]) == 1
    assert isinstance(body["tu"][0]["tuv"], list)
    assert body["tu"][0]["prop"] == []


def test_decode_materializes_empty_lists() -> None:
    tree = decode_tmx("<tmx><body><tu tuid='x'/></body></tmx>")
    assert tree["tmx"]["body"]["tu"][0]["tuv"] == []


def test_decode_wraps_prop_text() -> None:
    tree = decode_tmx(SAMPLE_TMX)
    prop = tree["tmx"]["body"]["tu"][0]["prop"][0]
    assert prop == {"@_type": "x-segment-id", "#text": "ABC123"}


def test_decode_keeps_inline_markup_as_nested_node() -> None:
    tree = decode_tmx(
        '<tmx><body><tu><tuv xml:lang="en">'
        '<seg>Press <bpt i="1">&lt;b&gt;</bpt>OK<ept i="1">&lt;/b&gt;</ept></seg>'
        "</tuv></tu></body></tmx>"
    )
    seg = tree["tmx"]["body"]["tu"][0]["tuv"][0]["seg"]
    assert isinstance(seg, dict)
    assert seg["bpt"] == {"@_i": "1", "#text": "<b>"}
    assert seg["#text"] == "Press OK"


def test_decode_accepts_bytes_with_declared_encoding() -> None:
    content = SAMPLE_TMX.replace('encoding="UTF-8"', 'encoding="UTF-16"').encode("utf-16")
    tree = decode_tmx(content)
    assert tree["tmx"]["body"]["tu"][1]["tuv"][1]["seg"] == "Au revoir"


def test_decode_rejects_malformed_xml() -> None:
    with pytest.raises(DecodeFailure, match="Failed to parse XML"):
        decode_tmx("<tmx><body>")


def test_decode_rejects_non_tmx_root() -> None:
    with pytest.raises(DecodeFailure, match="missing root <tmx>"):
        decode_tmx("<xliff version='1.2'/>")
