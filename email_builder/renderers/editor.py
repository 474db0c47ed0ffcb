"""
Editor-mode rendering.

Uses the reader components with the same schemas, but wraps every block in
a selectable element and puts insertion slots around container children.
The browser shell attaches its click handlers to the ``data-*`` attributes.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from markupsafe import Markup

from email_builder.blocks.base import RenderContext, template
from email_builder.document.core import (
    BlockComponent,
    BlockDefinition,
    build_block_configuration_dictionary,
    build_block_configuration_schema,
    build_document_schema,
    validate_document,
)
from email_builder.document.styles import css
from email_builder.document.tree import ROOT_BLOCK_ID
from email_builder.renderers.reader import READER_DICTIONARY, Reader, fetch_xml_data, run_reader
from email_builder.xml_data.fetcher import FeedFetcher, XmlDataMap

SELECTED_OUTLINE = "2px solid rgba(0,121,204, 1)"
MOBILE_CANVAS_WIDTH = 370

SCREEN_SIZES = ("desktop", "mobile")

_WRAPPER = template('<div data-block-id="{{ block_id }}" style="{{ style }}">{{ content }}</div>')

_SLOT = template(
    '<div data-add-block="true" data-parent-id="{{ parent_id }}" data-index="{{ index }}"'
    '{% if column_index is not none %} data-column-index="{{ column_index }}"{% endif %}></div>'
)

_MOBILE_FRAME = template('<div style="{{ style }}">{{ content }}</div>')


class EditorRenderContext(RenderContext):
    editor = True

    def __init__(self, render_block, xml_data: Optional[XmlDataMap] = None, selected_block_id: Optional[str] = None):
        super().__init__(render_block, xml_data)
        self.selected_block_id = selected_block_id

    def slot(self, parent_id: str, index: int, column_index: Optional[int] = None) -> Markup:
        return Markup(_SLOT.render(parent_id=parent_id, index=index, column_index=column_index))

    def children(self, block_ids: Iterable[str], parent_id: str, column_index: Optional[int] = None) -> Markup:
        ids = list(block_ids or [])
        parts = []
        for index, block_id in enumerate(ids):
            parts.append(self.slot(parent_id, index, column_index))
            parts.append(self.child(block_id))
        parts.append(self.slot(parent_id, len(ids), column_index))
        return Markup("").join(parts)


def editor_component(component: BlockComponent) -> BlockComponent:
    """Wrap a reader component in the selectable editor frame."""

    def render(block_id: str, data: Any, ctx: EditorRenderContext) -> str:
        selected = getattr(ctx, "selected_block_id", None) == block_id
        return _WRAPPER.render(
            block_id=block_id,
            style=css(
                {
                    "position": "relative",
                    "maxWidth": "100%",
                    "outlineOffset": "-1px",
                    "outline": SELECTED_OUTLINE if selected else None,
                }
            ),
            content=Markup(component(block_id, data, ctx)),
        )

    return render


EDITOR_DICTIONARY = build_block_configuration_dictionary(
    {
        name: BlockDefinition(definition.schema, editor_component(definition.component), definition.fetches_xml)
        for name, definition in READER_DICTIONARY.items()
    }
)

EditorBlockSchema = build_block_configuration_schema(EDITOR_DICTIONARY)
EditorConfigurationSchema = build_document_schema(EDITOR_DICTIONARY)


class EditorRenderer(Reader):
    def __init__(self, document, root_block_id: str = ROOT_BLOCK_ID, xml_data=None, selected_block_id=None):
        self.selected_block_id = selected_block_id
        super().__init__(document, root_block_id, xml_data, dictionary=EDITOR_DICTIONARY)

    def make_context(self) -> EditorRenderContext:
        return EditorRenderContext(self.render_block, self.xml_data, self.selected_block_id)


def render_editor_markup(
    document: Dict[str, Any],
    selected_block_id: Optional[str] = None,
    screen_size: str = "desktop",
    root_block_id: str = ROOT_BLOCK_ID,
    fetcher: Optional[FeedFetcher] = None,
    xml_data: Optional[XmlDataMap] = None,
) -> str:
    """Render the editable canvas for a document (markup fragment, no page shell)."""
    if screen_size not in SCREEN_SIZES:
        raise ValueError(f"Unknown screen size: {screen_size}")

    validated = validate_document(EditorConfigurationSchema, document)
    if xml_data is None:
        xml_data = fetch_xml_data(document, fetcher)

    body = run_reader(EditorRenderer(validated, root_block_id, xml_data, selected_block_id))
    if screen_size == "mobile":
        return _MOBILE_FRAME.render(
            style=css(
                {
                    "margin": "32px auto",
                    "width": MOBILE_CANVAS_WIDTH,
                    "height": 800,
                    "boxShadow": "rgba(33, 36, 67, 0.04) 0px 10px 20px, rgba(33, 36, 67, 0.04) 0px 2px 6px, rgba(33, 36, 67, 0.04) 0px 0px 1px",
                }
            ),
            content=Markup(body),
        )
    return body
