"""Decode TMX markup into a plain nested key/value tree."""

from typing import Any

from lxml import etree
from loguru import logger

from tmxplorer.config import ATTRIBUTE_PREFIX, REPEATED_ELEMENTS, TEXT_KEY
from tmxplorer.errors import DecodeFailure

_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def _local_name(qname: str) -> str:
    """Map a Clark-notation name to the name used as a tree key."""
    if not qname.startswith("{"):
        return qname
    namespace, local = qname[1:].split("}", 1)
    if namespace == _XML_NAMESPACE:
        return f"xml:{local}"
    return local


def _element_text(elem: etree._Element) -> str:
    parts = [elem.text or ""]
    parts.extend(child.tail or "" for child in elem)
    return "".join(parts).strip()


def _element_to_value(elem: etree._Element) -> Any:
    """Convert one element to a string (plain leaf) or a dict."""
    tag = _local_name(elem.tag)
    children = [child for child in elem if isinstance(child.tag, str)]
    text = _element_text(elem)

    if not elem.attrib and not children and tag not in REPEATED_ELEMENTS:
        return text

    node: dict[str, Any] = {
        f"{ATTRIBUTE_PREFIX}{_local_name(name)}": value for name, value in elem.attrib.items()
    }
    for name in REPEATED_ELEMENTS.get(tag, ()):
        node[name] = []

    for child in children:
        name = _local_name(child.tag)
        value = _element_to_value(child)
        if name in REPEATED_ELEMENTS.get(tag, ()):
            node[name].append(value)
        elif name in node:
            existing = node[name]
            node[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            node[name] = value

    if text:
        node[TEXT_KEY] = text
    return node


def decode_tmx(content: bytes | str) -> dict[str, Any]:
    """Decode a TMX document into a nested dict rooted at ``"tmx"``.

    Attributes become ``@_``-prefixed keys, ``xml:lang`` keeps its prefix,
    and ``tu``/``tuv``/``prop`` children are always lists.

    Raises:
        DecodeFailure: The content is not well-formed XML or has no <tmx> root.
    """
    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=True,
        encoding="utf-8" if isinstance(content, str) else None,
    )
    raw = content.encode("utf-8") if isinstance(content, str) else content

    try:
        root = etree.fromstring(raw, parser)
    except etree.XMLSyntaxError as e:
        logger.debug("XML syntax error: {}", e)
        msg = f"Failed to parse XML content: {e}"
        raise DecodeFailure(msg) from e

    if root is None or _local_name(root.tag) != "tmx":
        msg = "Invalid TMX file: missing root <tmx> element"
        raise DecodeFailure(msg)

    tree = _element_to_value(root)
    if not isinstance(tree, dict):
        tree = {TEXT_KEY: tree} if tree else {}
    return {"tmx": tree}
