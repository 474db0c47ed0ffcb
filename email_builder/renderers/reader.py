"""
Reader: renders a document to static HTML for email clients.

Rendering is split into two phases. Every XML feed the document refers to
is fetched first (concurrently); the block tree is then rendered
synchronously against the fetched data, so components never do I/O.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import structlog
from jinja2 import TemplateError

from email_builder.blocks import advertisement, blog, daily_download, featured_story, news_panel
from email_builder.blocks import therapeutic_update, video
from email_builder.blocks.base import RenderContext
from email_builder.blocks.content import (
    DividerProps,
    HeadingProps,
    HtmlProps,
    SpacerProps,
    TextProps,
    render_divider,
    render_heading,
    render_html,
    render_spacer,
    render_text,
)
from email_builder.blocks.layout import (
    ColumnsContainerProps,
    ContainerProps,
    EmailLayoutProps,
    render_columns_container,
    render_container,
    render_email_layout,
)
from email_builder.blocks.media import AvatarProps, ButtonProps, ImageProps, render_avatar, render_button, render_image
from email_builder.core.exceptions import RenderError
from email_builder.document.core import (
    BaseBlock,
    BlockConfigurationDictionary,
    BlockDefinition,
    build_block_component,
    build_block_configuration_dictionary,
    build_block_configuration_schema,
    build_document_schema,
    validate_document,
)
from email_builder.document.tree import ROOT_BLOCK_ID, extract_xml_urls
from email_builder.xml_data.fetcher import FeedFetcher, XmlDataMap

logger = structlog.get_logger(__name__)

READER_DICTIONARY = build_block_configuration_dictionary(
    {
        "EmailLayout": BlockDefinition(EmailLayoutProps, render_email_layout),
        "Container": BlockDefinition(ContainerProps, render_container),
        "ColumnsContainer": BlockDefinition(ColumnsContainerProps, render_columns_container),
        "Text": BlockDefinition(TextProps, render_text),
        "Heading": BlockDefinition(HeadingProps, render_heading),
        "Image": BlockDefinition(ImageProps, render_image),
        "Button": BlockDefinition(ButtonProps, render_button),
        "Divider": BlockDefinition(DividerProps, render_divider),
        "Spacer": BlockDefinition(SpacerProps, render_spacer),
        "Html": BlockDefinition(HtmlProps, render_html),
        "Avatar": BlockDefinition(AvatarProps, render_avatar),
        "NewsPanelXml": BlockDefinition(
            news_panel.NewsPanelXmlProps, news_panel.PANEL.render, fetches_xml=True
        ),
        "BlogXml": BlockDefinition(blog.BlogXmlProps, blog.PANEL.render, fetches_xml=True),
        "VideoXml": BlockDefinition(video.VideoXmlProps, video.PANEL.render, fetches_xml=True),
        "FeaturedStoryXml": BlockDefinition(
            featured_story.FeaturedStoryXmlProps, featured_story.PANEL.render, fetches_xml=True
        ),
        "TherapeuticUpdateXml": BlockDefinition(
            therapeutic_update.TherapeuticUpdateXmlProps, therapeutic_update.PANEL.render, fetches_xml=True
        ),
        "DailyDownloadXml": BlockDefinition(
            daily_download.DailyDownloadXmlProps, daily_download.PANEL.render, fetches_xml=True
        ),
        "Advertisement300250Xml": BlockDefinition(
            advertisement.Advertisement300250XmlProps, advertisement.PANEL_300_250.render, fetches_xml=True
        ),
        "Advertisement72890Xml": BlockDefinition(
            advertisement.Advertisement72890XmlProps, advertisement.PANEL_728_90.render, fetches_xml=True
        ),
    }
)

XML_BLOCK_TYPES = tuple(name for name, definition in READER_DICTIONARY.items() if definition.fetches_xml)

ReaderBlockSchema = build_block_configuration_schema(READER_DICTIONARY)
ReaderDocumentSchema = build_document_schema(READER_DICTIONARY)


class Reader:
    """Renders a validated document from ``root_block_id`` down."""

    def __init__(
        self,
        document: Mapping[str, BaseBlock],
        root_block_id: str = ROOT_BLOCK_ID,
        xml_data: Optional[XmlDataMap] = None,
        dictionary: BlockConfigurationDictionary = READER_DICTIONARY,
    ):
        self.document = document
        self.root_block_id = root_block_id
        self.xml_data = xml_data if xml_data is not None else XmlDataMap()
        self._render_component = build_block_component(dictionary)
        self._stack: List[str] = []
        self.context = self.make_context()

    def make_context(self) -> RenderContext:
        return RenderContext(self.render_block, self.xml_data)

    def render_block(self, block_id: str) -> str:
        block = self.document.get(block_id)
        if block is None:
            return ""
        if block_id in self._stack:
            logger.warning("Skipping block already being rendered", block_id=block_id)
            return ""

        self._stack.append(block_id)
        try:
            return self._render_component(block_id, block, self.context)
        finally:
            self._stack.pop()

    def render(self) -> str:
        return self.render_block(self.root_block_id)


def fetch_xml_data(document: Mapping[str, Any], fetcher: Optional[FeedFetcher] = None) -> XmlDataMap:
    """Fetch every feed referenced by the document's XML blocks."""
    urls = extract_xml_urls(dict(document), XML_BLOCK_TYPES)
    if not urls:
        return XmlDataMap()
    if fetcher is not None:
        return fetcher.fetch_all(urls)
    with FeedFetcher.from_settings() as owned:
        return owned.fetch_all(urls)


def run_reader(reader: Reader) -> str:
    try:
        return reader.render()
    except TemplateError as e:
        raise RenderError(f"Template rendering failed: {e}") from e
    except RecursionError as e:
        raise RenderError("Document is nested too deeply to render") from e


def render_to_static_markup(
    document: Dict[str, Any],
    root_block_id: str = ROOT_BLOCK_ID,
    fetcher: Optional[FeedFetcher] = None,
    xml_data: Optional[XmlDataMap] = None,
) -> str:
    """
    Render a raw document to a complete HTML page.

    Args:
        document: Mapping of block id to ``{"type", "data"}``
        root_block_id: Block to start rendering from
        fetcher: Feed fetcher to use; one is built from settings when omitted
        xml_data: Pre-fetched feeds; skips fetching entirely when given

    Raises:
        DocumentValidationError: If the document does not match the block schemas
        RenderError: If a block template fails to render
    """
    validated = validate_document(ReaderDocumentSchema, document)
    if xml_data is None:
        xml_data = fetch_xml_data(document, fetcher)

    body = run_reader(Reader(validated, root_block_id, xml_data))
    logger.info("Rendered document", blocks=len(validated), feeds=len(xml_data), bytes=len(body))
    return f"<!DOCTYPE html><html><body>{body}</body></html>"
