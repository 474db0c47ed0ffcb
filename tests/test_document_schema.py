"""
Test suite for block schemas and document validation.

Validates the discriminated block union, camelCase payload handling and
the shared style helpers.
"""

import pytest

from email_builder.blocks.content import TextProps
from email_builder.core.exceptions import DocumentValidationError
from email_builder.document.core import BlockDefinition, build_block_configuration_dictionary, validate_document
from email_builder.document.styles import FontWeight, Padding, css, get_font_family, get_padding
from email_builder.editor.configuration import load_sample
from email_builder.renderers.editor import EditorConfigurationSchema
from email_builder.renderers.reader import READER_DICTIONARY, XML_BLOCK_TYPES, ReaderBlockSchema, ReaderDocumentSchema

from sample_data import layout_document, text_block


class TestDocumentValidation:
    """Test validation of whole documents."""

    def test_sample_document_is_valid(self):
        """Test the bundled sample passes the reader schema."""
        document = load_sample("rheumnow-daily")
        validated = validate_document(ReaderDocumentSchema, document)
        assert set(validated) == set(document)
        assert validated["root"].type == "EmailLayout"

    def test_editor_schema_matches_reader_schema(self):
        """Test both dictionaries accept the same documents."""
        document = load_sample("rheumnow-daily")
        reader = validate_document(ReaderDocumentSchema, document)
        editor = validate_document(EditorConfigurationSchema, document)
        assert {k: v.model_dump() for k, v in reader.items()} == {k: v.model_dump() for k, v in editor.items()}

    def test_unknown_block_type(self):
        """Test unregistered types are rejected with the block id in the path."""
        document = layout_document({"mystery": {"type": "Carousel", "data": {}}})
        with pytest.raises(DocumentValidationError) as exc_info:
            validate_document(ReaderDocumentSchema, document)
        assert exc_info.value.errors
        assert exc_info.value.errors[0]["path"].startswith("mystery")

    def test_invalid_color(self):
        """Test colors must be #RRGGBB."""
        block = {"type": "Text", "data": {"style": {"color": "red"}, "props": {"text": "hi"}}}
        with pytest.raises(DocumentValidationError) as exc_info:
            validate_document(ReaderDocumentSchema, layout_document({"t": block}))
        assert any(err["path"].endswith("color") for err in exc_info.value.errors)

    def test_non_mapping_document(self):
        """Test a document must be a mapping."""
        with pytest.raises(DocumentValidationError):
            validate_document(ReaderDocumentSchema, ["root"])

    def test_single_block_schema(self):
        """Test the single-block validator discriminates on type."""
        block = ReaderBlockSchema.validate_python(text_block("Hello"))
        assert block.type == "Text"
        assert block.data.props.text == "Hello"

    def test_unknown_keys_are_ignored(self):
        """Test extra payload keys do not fail validation."""
        props = TextProps.model_validate({"props": {"text": "x", "somethingNew": 1}})
        assert props.props.text == "x"

    def test_camel_and_snake_case(self):
        """Test payloads accept wire names and Python names."""
        wire = TextProps.model_validate({"style": {"backgroundColor": "#FFFFFF"}})
        python = TextProps.model_validate({"style": {"background_color": "#FFFFFF"}})
        assert wire.style.background_color == python.style.background_color == "#FFFFFF"
        assert wire.to_json() == {"style": {"backgroundColor": "#FFFFFF"}}


class TestBlockDictionary:
    """Test the registered block types."""

    def test_every_block_type_is_registered(self):
        """Test the reader dictionary covers all block types."""
        assert set(READER_DICTIONARY) == {
            "EmailLayout", "Container", "ColumnsContainer", "Text", "Heading", "Image", "Button",
            "Divider", "Spacer", "Html", "Avatar", "NewsPanelXml", "BlogXml", "VideoXml",
            "FeaturedStoryXml", "TherapeuticUpdateXml", "DailyDownloadXml",
            "Advertisement300250Xml", "Advertisement72890Xml",
        }

    def test_xml_block_types(self):
        """Test exactly the feed blocks are flagged as fetching XML."""
        assert len(XML_BLOCK_TYPES) == 8
        assert all(name.endswith("Xml") for name in XML_BLOCK_TYPES)

    def test_empty_type_name_rejected(self):
        """Test block type names must be non-empty."""
        with pytest.raises(ValueError):
            build_block_configuration_dictionary({"": BlockDefinition(TextProps, lambda *args: "")})


class TestStyleHelpers:
    """Test inline style serialization."""

    def test_css(self):
        """Test kebab-casing, px suffixes, unitless properties and None dropping."""
        style = css(
            {
                "fontSize": 16,
                "lineHeight": 1.5,
                "margin": 0,
                "fontWeight": FontWeight.BOLD,
                "color": None,
                "padding": "4px 8px",
            }
        )
        assert style == "font-size: 16px; line-height: 1.5; margin: 0; font-weight: bold; padding: 4px 8px"

    def test_get_padding(self):
        """Test padding is emitted top, right, bottom, left."""
        padding = Padding(top=16.0, bottom=8, right=24, left=0)
        assert get_padding(padding) == "16px 24px 8px 0px"
        assert get_padding(None) is None

    def test_get_font_family(self):
        """Test font family keys map to their stacks."""
        assert get_font_family("MONOSPACE").endswith("monospace")
        assert get_font_family(None) is None
