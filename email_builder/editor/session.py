"""
Editor session state.

Holds the document being edited and the UI selections around it. All
document changes go through the pure tree operations, so the session only
ever swaps in new document objects.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog

from email_builder.core.exceptions import EmailBuilderError
from email_builder.document.tree import Document, delete_block, insert_block, move_block
from email_builder.editor.configuration import (
    encode_configuration_hash,
    get_configuration,
    get_configuration_from_api,
)

logger = structlog.get_logger(__name__)

SIDEBAR_TABS = ("styles", "block-configuration")
MAIN_TABS = ("editor", "preview", "json", "html")
SCREEN_SIZES = ("desktop", "mobile")


def _check_choice(value: str, choices: tuple, name: str) -> str:
    if value not in choices:
        raise ValueError(f"Invalid {name}: {value!r} (expected one of {', '.join(choices)})")
    return value


@dataclass
class EditorSession:
    """Mutable editor state; one per open editor."""

    document: Document = field(default_factory=lambda: get_configuration(""))
    selected_block_id: Optional[str] = None
    selected_sidebar_tab: str = "styles"
    selected_main_tab: str = "editor"
    selected_screen_size: str = "desktop"
    inspector_drawer_open: bool = True
    samples_drawer_open: bool = True
    is_loading: bool = False
    load_error: Optional[str] = None

    @classmethod
    def from_hash(cls, hash_value: str) -> "EditorSession":
        return cls(document=get_configuration(hash_value))

    # Selection and tabs

    def set_selected_block_id(self, block_id: Optional[str]) -> None:
        self.selected_block_id = block_id
        self.selected_sidebar_tab = "styles" if block_id is None else "block-configuration"
        if block_id is not None:
            self.inspector_drawer_open = True

    def set_sidebar_tab(self, tab: str) -> None:
        self.selected_sidebar_tab = _check_choice(tab, SIDEBAR_TABS, "sidebar tab")

    def set_selected_main_tab(self, tab: str) -> None:
        self.selected_main_tab = _check_choice(tab, MAIN_TABS, "main tab")

    def set_selected_screen_size(self, size: str) -> None:
        self.selected_screen_size = _check_choice(size, SCREEN_SIZES, "screen size")

    def toggle_inspector_drawer_open(self) -> bool:
        self.inspector_drawer_open = not self.inspector_drawer_open
        return self.inspector_drawer_open

    def toggle_samples_drawer_open(self) -> bool:
        self.samples_drawer_open = not self.samples_drawer_open
        return self.samples_drawer_open

    # Document

    def reset_document(self, document: Document) -> None:
        """Replace the document and drop the selection."""
        self.document = document
        self.selected_sidebar_tab = "styles"
        self.selected_block_id = None

    def set_document(self, blocks: Dict[str, Any]) -> None:
        """Shallow-merge blocks into the current document."""
        self.document = {**self.document, **blocks}

    def load_template_from_hash(self, hash_value: str, client) -> bool:
        """
        Load a document for a hash, using the API for ``#template/`` hashes.

        Returns True on success. On failure the current document is kept and
        ``load_error`` holds the message.
        """
        self.is_loading = True
        self.load_error = None
        try:
            document = get_configuration_from_api(hash_value, client)
        except EmailBuilderError as e:
            logger.warning("Failed to load template", hash=hash_value, error=e.message)
            self.load_error = e.message or "Failed to load template"
            return False
        finally:
            self.is_loading = False

        self.document = document
        return True

    # Editing

    def add_block(
        self,
        parent_id: str,
        block: Dict[str, Any],
        index: Optional[int] = None,
        column_index: Optional[int] = None,
    ) -> str:
        """Insert a block and select it."""
        self.document, block_id = insert_block(self.document, parent_id, block, index, column_index)
        self.set_selected_block_id(block_id)
        return block_id

    def delete_block(self, block_id: str) -> None:
        self.document = delete_block(self.document, block_id)
        if self.selected_block_id not in self.document:
            self.set_selected_block_id(None)

    def move_block(self, block_id: str, direction: str) -> None:
        self.document = move_block(self.document, block_id, direction)

    # Output

    def share_hash(self) -> str:
        return encode_configuration_hash(self.document)

    def to_json(self) -> str:
        """The JSON tab contents."""
        return json.dumps(self.document, indent=2)

    def render_html(self, **kwargs) -> str:
        """The HTML tab contents."""
        from email_builder.renderers.reader import render_to_static_markup

        return render_to_static_markup(self.document, **kwargs)

    def render_canvas(self, **kwargs) -> str:
        """Editor canvas for the current selection and screen size."""
        from email_builder.renderers.editor import render_editor_markup

        return render_editor_markup(
            self.document,
            selected_block_id=self.selected_block_id,
            screen_size=self.selected_screen_size,
            **kwargs,
        )
