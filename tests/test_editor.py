"""
Test suite for editor session state and hash-based configuration loading.
"""

import base64
import json
from urllib.parse import quote

import pytest

from email_builder.core.exceptions import ApiClientError
from email_builder.editor.configuration import (
    decode_configuration,
    empty_email_message,
    encode_configuration,
    encode_configuration_hash,
    get_configuration,
    get_configuration_from_api,
    load_sample,
)
from email_builder.editor.session import EditorSession
from email_builder.xml_data.fetcher import XmlDataMap

from sample_data import layout_document, text_block


class StubTemplatesClient:
    """Serves canned templates the way TemplatesClient does."""

    def __init__(self, templates=None):
        self.templates = templates or {}
        self.requested = []

    def fetch_template(self, slug):
        self.requested.append(slug)
        if slug not in self.templates:
            raise ApiClientError(f'Template "{slug}" not found', status_code=404)
        return {"slug": slug, "configuration": self.templates[slug]}


class TestConfigurationCodes:
    """Test share-link encoding."""

    def test_encoding_format(self):
        """Test codes are base64 of the URI-component-encoded JSON."""
        code = encode_configuration({"a": "b c"})
        assert base64.b64decode(code).decode("ascii") == quote('{"a":"b c"}', safe="-_.!~*'()")
        assert base64.b64decode(code).decode("ascii") == "%7B%22a%22%3A%22b%20c%22%7D"

    def test_round_trip_with_unicode(self):
        """Test non-ASCII text survives a share link."""
        document = layout_document({"t": text_block("Café ✓")})
        assert decode_configuration(encode_configuration(document)) == document

    def test_hash_prefix(self):
        """Test share hashes use the #code/ prefix."""
        assert encode_configuration_hash({"root": {}}).startswith("#code/")

    def test_decode_rejects_garbage(self):
        """Test invalid base64 and non-object payloads raise ValueError."""
        with pytest.raises(ValueError):
            decode_configuration("!!!not-base64!!!")
        listed = base64.b64encode(quote("[1, 2]").encode("ascii")).decode("ascii")
        with pytest.raises(ValueError):
            decode_configuration(listed)


class TestGetConfiguration:
    """Test resolving URL hashes to documents."""

    def test_sample_hash(self):
        """Test bundled samples load by name."""
        assert get_configuration("#sample/rheumnow-daily") == load_sample("rheumnow-daily")

    def test_code_hash(self):
        """Test shared codes decode to their document."""
        document = layout_document({"t": text_block("Shared")})
        assert get_configuration(encode_configuration_hash(document)) == document

    @pytest.mark.parametrize("hash_value", ["", "#", "#sample/unknown", "#code/%%%", "#other/thing", None])
    def test_fallback_to_empty_message(self, hash_value):
        """Test anything unrecognised yields the empty email message."""
        assert get_configuration(hash_value) == empty_email_message()

    def test_samples_are_fresh_copies(self):
        """Test mutating a loaded sample does not leak into the next load."""
        first = load_sample("empty-email-message")
        first["root"]["data"]["childrenIds"].append("x")
        assert load_sample("empty-email-message")["root"]["data"]["childrenIds"] == []

    def test_unknown_sample(self):
        """Test unknown sample names raise KeyError."""
        with pytest.raises(KeyError):
            load_sample("nope")

    def test_template_hash_uses_api(self):
        """Test #template/ hashes are fetched through the client."""
        document = layout_document({"t": text_block("Stored")})
        client = StubTemplatesClient({"weekly": document})
        assert get_configuration_from_api("#template/weekly", client) == document
        assert client.requested == ["weekly"]

    def test_other_hashes_skip_api(self):
        """Test non-template hashes never touch the client."""
        client = StubTemplatesClient()
        assert get_configuration_from_api("#sample/empty-email-message", client) == empty_email_message()
        assert client.requested == []


class TestEditorSession:
    """Test session state transitions."""

    def test_defaults(self):
        """Test a new session starts on the empty message."""
        session = EditorSession()
        assert session.document == empty_email_message()
        assert session.selected_block_id is None
        assert session.selected_sidebar_tab == "styles"
        assert session.selected_main_tab == "editor"
        assert session.selected_screen_size == "desktop"
        assert session.inspector_drawer_open and session.samples_drawer_open
        assert not session.is_loading
        assert session.load_error is None

    def test_selection_switches_sidebar(self):
        """Test selecting opens block configuration and clearing returns to styles."""
        session = EditorSession()
        session.toggle_inspector_drawer_open()
        assert not session.inspector_drawer_open

        session.set_selected_block_id("root")
        assert session.selected_sidebar_tab == "block-configuration"
        assert session.inspector_drawer_open

        session.set_selected_block_id(None)
        assert session.selected_sidebar_tab == "styles"

    def test_setters_validate(self):
        """Test tab and screen size setters reject unknown values."""
        session = EditorSession()
        session.set_selected_main_tab("html")
        session.set_selected_screen_size("mobile")
        session.set_sidebar_tab("block-configuration")
        assert (session.selected_main_tab, session.selected_screen_size) == ("html", "mobile")

        with pytest.raises(ValueError):
            session.set_selected_main_tab("code")
        with pytest.raises(ValueError):
            session.set_selected_screen_size("tablet")
        with pytest.raises(ValueError):
            session.set_sidebar_tab("layers")

    def test_toggles(self):
        """Test drawer toggles flip and report their state."""
        session = EditorSession()
        assert session.toggle_samples_drawer_open() is False
        assert session.toggle_samples_drawer_open() is True

    def test_reset_document_clears_selection(self):
        """Test resetting drops the selection."""
        session = EditorSession()
        session.set_selected_block_id("root")
        session.reset_document(load_sample("rheumnow-daily"))
        assert session.selected_block_id is None
        assert session.selected_sidebar_tab == "styles"
        assert "block-1768334883321" in session.document

    def test_set_document_merges(self):
        """Test set_document shallow-merges blocks."""
        session = EditorSession()
        session.set_document({"extra": text_block("More")})
        assert set(session.document) == {"root", "extra"}

    def test_add_move_delete(self):
        """Test editing goes through the tree operations."""
        session = EditorSession()
        first = session.add_block("root", text_block("One"))
        assert session.selected_block_id == first
        second = session.add_block("root", text_block("Two"))
        assert session.document["root"]["data"]["childrenIds"] == [first, second]

        session.move_block(second, "up")
        assert session.document["root"]["data"]["childrenIds"] == [second, first]

        session.delete_block(second)
        assert second not in session.document
        assert session.selected_block_id is None

    def test_share_hash_round_trip(self):
        """Test the share hash restores the same document."""
        session = EditorSession.from_hash("#sample/rheumnow-daily")
        assert EditorSession.from_hash(session.share_hash()).document == session.document

    def test_json_and_html_tabs(self):
        """Test the JSON and HTML tab contents."""
        session = EditorSession()
        session.add_block("root", text_block("Hello tab"))
        assert json.loads(session.to_json()) == session.document
        assert "Hello tab" in session.render_html(xml_data=XmlDataMap())

    def test_canvas_follows_selection(self):
        """Test the canvas renders with the session selection and screen size."""
        session = EditorSession()
        block_id = session.add_block("root", text_block("Pick me"))
        session.set_selected_screen_size("mobile")
        canvas = session.render_canvas(xml_data=XmlDataMap())
        assert f'data-block-id="{block_id}"' in canvas
        assert "width: 370px" in canvas

    def test_load_template_from_hash(self):
        """Test loading a stored template replaces the document."""
        document = layout_document({"t": text_block("Stored")})
        session = EditorSession()
        assert session.load_template_from_hash("#template/weekly", StubTemplatesClient({"weekly": document}))
        assert session.document == document
        assert session.load_error is None
        assert not session.is_loading

    def test_load_template_failure_keeps_document(self):
        """Test a failed load records the error and keeps the current document."""
        session = EditorSession()
        before = session.document
        assert not session.load_template_from_hash("#template/missing", StubTemplatesClient())
        assert session.document == before
        assert session.load_error == 'Template "missing" not found'
        assert not session.is_loading
