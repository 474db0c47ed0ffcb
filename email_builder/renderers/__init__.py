"""Reader (static HTML) and editor renderers."""

from .editor import EDITOR_DICTIONARY, render_editor_markup
from .reader import READER_DICTIONARY, XML_BLOCK_TYPES, Reader, ReaderBlockSchema, ReaderDocumentSchema, render_to_static_markup

__all__ = [
    "EDITOR_DICTIONARY",
    "render_editor_markup",
    "READER_DICTIONARY",
    "XML_BLOCK_TYPES",
    "Reader",
    "ReaderBlockSchema",
    "ReaderDocumentSchema",
    "render_to_static_markup",
]
