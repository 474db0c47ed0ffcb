"""
Shared schema and panel chrome for blocks fed from an XML URL.

Every XML block has the same payload (``style.padding`` plus ``props.url``,
``props.title`` and ``props.numberOfItems``) and the same states: not
configured, failed (editor only), empty, and populated. Only the item
mapping and the item markup differ per block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

import structlog
from jinja2 import Template
from markupsafe import Markup
from pydantic import Field

from email_builder.blocks.base import RenderContext, template
from email_builder.document.styles import Padding, SchemaModel, css, get_padding
from email_builder.xml_data.fetcher import FeedBody
from email_builder.xml_data.parser import parse_feed

logger = structlog.get_logger(__name__)

DEFAULT_NUMBER_OF_ITEMS = 3
MAX_NUMBER_OF_ITEMS = 10

TITLE_STYLE = (
    "font-size: 18px; margin-bottom: 12px; color: #333; text-transform: uppercase; "
    "border-left: 4px solid #1585fe; padding-left: 10px; line-height: 1.2; margin: 0 0 16px 0"
)


class XmlFeedStyle(SchemaModel):
    padding: Optional[Padding] = None


class XmlFeedSettings(SchemaModel):
    url: Optional[str] = None
    title: Optional[str] = None
    number_of_items: Optional[int] = Field(default=None, ge=1, le=MAX_NUMBER_OF_ITEMS)


class XmlFeedProps(SchemaModel):
    style: Optional[XmlFeedStyle] = None
    props: Optional[XmlFeedSettings] = None


_STATE = template('<div style="{{ style }}">{{ message }}</div>')

_PANEL = template(
    """
<div style="{{ style }}">
{% if title %}
<h2 style="{{ title_style }}">{{ title }}</h2>
{% endif %}
{{ body }}
</div>
"""
)


@dataclass(frozen=True)
class FeedPanel:
    """How one XML block type finds, maps and lays out its items."""

    label: str
    empty_message: str
    markers: Sequence[str]
    mapper: Callable[[Dict[str, Any]], Any]
    items_template: Template

    def parse(self, text: Optional[FeedBody], number_of_items: int = DEFAULT_NUMBER_OF_ITEMS) -> list:
        return parse_feed(text, self.markers, self.mapper, number_of_items)

    def render(self, block_id: str, data: XmlFeedProps, ctx: RenderContext) -> str:
        style = data.style or XmlFeedStyle()
        settings = data.props or XmlFeedSettings()
        url = settings.url or ""
        title = settings.title or ""
        number_of_items = settings.number_of_items or DEFAULT_NUMBER_OF_ITEMS

        wrapper = {"padding": get_padding(style.padding), "fontFamily": "sans-serif"}

        if not url.strip():
            return _STATE.render(
                style=css({**wrapper, "border": "1px dashed #ccc", "textAlign": "center", "padding": "20px"}),
                message=f"Configure {self.label} XML URL",
            )

        if ctx.editor and ctx.feed_failed(url):
            return _STATE.render(
                style=css({**wrapper, "color": "red", "textAlign": "center", "padding": "20px"}),
                message="Error: Failed to load data",
            )

        items = self.parse(ctx.feed(url), number_of_items)
        if not items:
            logger.debug("XML block has no items", block_id=block_id, url=url)
            return _STATE.render(
                style=css({**wrapper, "textAlign": "center", "padding": "20px"}),
                message=self.empty_message,
            )

        return _PANEL.render(
            style=css(wrapper),
            title=title,
            title_style=TITLE_STYLE,
            body=Markup(self.items_template.render(items=items)),
        )
