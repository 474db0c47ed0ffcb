"""
Block document model.

A document is a flat mapping of block id to typed block; containers refer to
their children by id.
"""

from .core import (
    BaseBlock,
    BlockDefinition,
    build_block_component,
    build_block_configuration_dictionary,
    build_block_configuration_schema,
    build_document_schema,
    validate_document,
)
from .tree import ROOT_BLOCK_ID, Document, delete_block, extract_xml_urls, insert_block, move_block

__all__ = [
    "BaseBlock",
    "BlockDefinition",
    "build_block_component",
    "build_block_configuration_dictionary",
    "build_block_configuration_schema",
    "build_document_schema",
    "validate_document",
    "ROOT_BLOCK_ID",
    "Document",
    "delete_block",
    "extract_xml_urls",
    "insert_block",
    "move_block",
]
