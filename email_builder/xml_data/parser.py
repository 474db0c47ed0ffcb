"""
XML feed parsing.

Feeds are converted to plain dicts and lists, then searched for the first
collection that looks like a list of content items. The search is
best-effort: exports from different views nest their items differently
(``<response><item>``, ``<rss><channel><item>``, bare repeated nodes).
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

import structlog
from lxml import etree

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        strip_cdata=True,
        remove_comments=True,
        remove_pis=True,
    )


def _prefixed_name(name: str, nsmap: Dict[Optional[str], str]) -> str:
    """``{uri}local`` -> ``prefix:local`` using the element's namespace map."""
    qname = etree.QName(name)
    if not qname.namespace:
        return qname.localname
    for prefix, uri in nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _element_text(element: etree._Element) -> str:
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts).strip()


def _element_value(element: etree._Element) -> Any:
    children = [child for child in element if isinstance(child.tag, str)]
    text = _element_text(element)

    if not children and not element.attrib:
        return text

    value: Dict[str, Any] = {}
    for name, attr in element.attrib.items():
        value[ATTRIBUTE_PREFIX + _prefixed_name(name, element.nsmap)] = attr

    for child in children:
        key = _prefixed_name(child.tag, child.nsmap)
        child_value = _element_value(child)
        if key not in value:
            value[key] = child_value
        elif isinstance(value[key], list):
            value[key].append(child_value)
        else:
            value[key] = [value[key], child_value]

    if text:
        value[TEXT_KEY] = text
    return value


def xml_to_dict(text: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse an XML document into nested dicts, lists and strings.

    - Elements holding only text become strings (CDATA unwrapped).
    - Repeated sibling elements become lists.
    - Attributes become ``@_name`` keys; text next to them is kept under ``#text``.
    - Values are never coerced; ``<nid>12</nid>`` stays ``"12"``.

    Raises:
        etree.XMLSyntaxError: If the text is not well-formed XML
    """
    if isinstance(text, bytes):
        root = etree.fromstring(text, _make_parser())
    else:
        # lxml refuses str input that still carries an encoding declaration
        root = etree.fromstring(_DECLARATION_RE.sub("", text, count=1), _make_parser())
    return {_prefixed_name(root.tag, root.nsmap): _element_value(root)}


def _is_candidate(entry: Any, markers: Sequence[str]) -> bool:
    return isinstance(entry, dict) and any(entry.get(marker) for marker in markers)


def _search(node: Any, markers: Sequence[str]) -> Optional[List[Any]]:
    if isinstance(node, list):
        if node and _is_candidate(node[0], markers):
            return node
        for entry in node:
            found = _search(entry, markers)
            if found:
                return found
    elif isinstance(node, dict):
        item = node.get("item")
        if isinstance(item, list) and item:
            return item
        if isinstance(item, dict) and item:
            return [item]
        for child in node.values():
            found = _search(child, markers)
            if found:
                return found
    return None


def find_items(tree: Any, markers: Sequence[str]) -> List[Any]:
    """
    Depth-first search for the first item collection in a parsed feed.

    A hit is either a list whose first element is a mapping with a truthy
    marker key, or the value of an ``item`` key (a single mapping is wrapped
    in a list). Returns ``[]`` when nothing qualifies.
    """
    return _search(tree, markers) or []


def parse_feed(
    text: Optional[Union[str, bytes]],
    markers: Sequence[str],
    mapper: Callable[[Dict[str, Any]], T],
    number_of_items: int,
) -> List[T]:
    """
    Parse a feed body into at most ``number_of_items`` mapped items.

    Never raises: malformed XML or a failing mapper yields ``[]`` and a
    warning in the log.
    """
    if not text:
        return []

    try:
        tree = xml_to_dict(text)
        entries = [entry for entry in find_items(tree, markers) if isinstance(entry, dict)]
        return [mapper(entry) for entry in entries[: max(number_of_items, 0)]]
    except Exception as e:
        logger.warning(
            "Failed to parse XML feed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return []
