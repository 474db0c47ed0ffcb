"""
Traversal and editor mutations over raw (JSON-shaped) documents.

Every mutation returns a new document; the input is never modified.
"""

from __future__ import annotations

import copy
import time
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import structlog

from email_builder.core.exceptions import DocumentOperationError

logger = structlog.get_logger(__name__)

Document = Dict[str, Dict[str, Any]]

ROOT_BLOCK_ID = "root"


def _child_lists(block: Optional[Dict[str, Any]]) -> Iterator[Tuple[Optional[int], List[Any]]]:
    """Yield ``(column_index, children_ids)`` for every child list a block owns."""
    if not isinstance(block, dict):
        return
    data = block.get("data")
    if not isinstance(data, dict):
        return

    # EmailLayout keeps children on the data itself
    if isinstance(data.get("childrenIds"), list):
        yield None, data["childrenIds"]

    props = data.get("props")
    if not isinstance(props, dict):
        return
    if isinstance(props.get("childrenIds"), list):
        yield None, props["childrenIds"]

    columns = props.get("columns")
    if isinstance(columns, list):
        for index, column in enumerate(columns):
            if isinstance(column, dict) and isinstance(column.get("childrenIds"), list):
                yield index, column["childrenIds"]


def child_ids(block: Optional[Dict[str, Any]]) -> List[str]:
    """All child ids of a block, in render order."""
    ids: List[str] = []
    for _, children in _child_lists(block):
        ids.extend(child for child in children if isinstance(child, str))
    return ids


def walk(document: Document, root_id: str = ROOT_BLOCK_ID) -> Iterator[str]:
    """Depth-first block ids reachable from ``root_id``; each id is visited once."""
    visited: Set[str] = set()
    stack = [root_id]
    while stack:
        block_id = stack.pop()
        if block_id in visited or block_id not in document:
            continue
        visited.add(block_id)
        yield block_id
        stack.extend(reversed(child_ids(document[block_id])))


def extract_xml_urls(document: Document, xml_block_types: Iterable[str]) -> List[str]:
    """
    Collect the distinct feed URLs of XML blocks anywhere in the document.

    Every block id is used as a traversal start, so detached subtrees are
    included. Order follows first discovery.
    """
    feed_types = set(xml_block_types)
    urls: List[str] = []
    visited: Set[str] = set()

    for key in document:
        # depth-first, children in document order
        stack = [key]
        while stack:
            block_id = stack.pop()
            if block_id in visited:
                continue
            visited.add(block_id)
            block = document.get(block_id)
            if not isinstance(block, dict):
                continue

            if block.get("type") in feed_types:
                props = (block.get("data") or {}).get("props") or {}
                url = props.get("url") if isinstance(props, dict) else None
                if isinstance(url, str) and url.strip():
                    urls.append(url)

            stack.extend(reversed(child_ids(block)))

    return list(dict.fromkeys(urls))


def find_parent(document: Document, block_id: str) -> Optional[Tuple[str, Optional[int], int]]:
    """Locate ``(parent_id, column_index, position)`` of a block, if it has a parent."""
    for parent_id, block in document.items():
        for column_index, children in _child_lists(block):
            if block_id in children:
                return parent_id, column_index, children.index(block_id)
    return None


def generate_block_id(document: Document) -> str:
    """``block-<epoch millis>``, bumped until it is unused."""
    stamp = int(time.time() * 1000)
    while f"block-{stamp}" in document:
        stamp += 1
    return f"block-{stamp}"


def _target_children(block: Dict[str, Any], column_index: Optional[int]) -> List[Any]:
    lists = dict(_child_lists(block))
    if column_index is not None:
        if column_index not in lists:
            raise DocumentOperationError(f"Block has no column {column_index}")
        return lists[column_index]
    if None not in lists:
        raise DocumentOperationError("Block cannot hold children")
    return lists[None]


def insert_block(
    document: Document,
    parent_id: str,
    block: Dict[str, Any],
    index: Optional[int] = None,
    column_index: Optional[int] = None,
    block_id: Optional[str] = None,
) -> Tuple[Document, str]:
    """Add ``block`` under ``parent_id`` at ``index`` (appended when ``None``)."""
    if parent_id not in document:
        raise DocumentOperationError(f'Parent block "{parent_id}" does not exist')
    if not isinstance(block, dict) or "type" not in block:
        raise DocumentOperationError("Block must have a type")

    new_document = copy.deepcopy(document)
    new_id = block_id or generate_block_id(new_document)
    if new_id in new_document:
        raise DocumentOperationError(f'Block id "{new_id}" already exists')

    children = _target_children(new_document[parent_id], column_index)
    position = len(children) if index is None else max(0, min(index, len(children)))
    children.insert(position, new_id)
    new_document[new_id] = copy.deepcopy(block)

    logger.debug("Inserted block", block_id=new_id, parent_id=parent_id, index=position)
    return new_document, new_id


def delete_block(document: Document, block_id: str) -> Document:
    """Remove a block, its subtree, and every reference to it."""
    if block_id == ROOT_BLOCK_ID:
        raise DocumentOperationError("The root block cannot be deleted")
    if block_id not in document:
        raise DocumentOperationError(f'Block "{block_id}" does not exist')

    new_document = copy.deepcopy(document)
    subtree = set(walk(new_document, block_id))

    for block in new_document.values():
        for _, children in _child_lists(block):
            children[:] = [child for child in children if child != block_id]
    new_document.pop(block_id)

    # Descendants still reachable from outside the subtree survive
    kept: Set[str] = set()
    for other_id in [key for key in new_document if key not in subtree]:
        kept.update(walk(new_document, other_id))
    for removed in subtree - kept - {block_id}:
        new_document.pop(removed, None)

    return new_document


def move_block(document: Document, block_id: str, direction: str) -> Document:
    """Swap a block with its previous (``up``) or next (``down``) sibling."""
    if direction not in ("up", "down"):
        raise DocumentOperationError(f"Unknown direction: {direction}")

    location = find_parent(document, block_id)
    if location is None:
        raise DocumentOperationError(f'Block "{block_id}" has no parent')

    new_document = copy.deepcopy(document)
    parent_id, column_index, position = location
    children = _target_children(new_document[parent_id], column_index)

    target = position - 1 if direction == "up" else position + 1
    if 0 <= target < len(children):
        children[position], children[target] = children[target], children[position]
    return new_document
