"""
Rendering primitives shared by every block component.

Components are plain functions ``component(block_id, data, ctx) -> str``.
Markup is produced by Jinja2 with autoescaping on; values that are
already trusted HTML (rendered children, sanitised Markdown, raw Html
block contents) are passed in as ``Markup``.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import bleach
import markdown
from jinja2 import DictLoader, Environment, Template, select_autoescape
from markupsafe import Markup

from email_builder.document.styles import css
from email_builder.xml_data.fetcher import FeedBody, XmlDataMap

# Shared macros, importable from any block template
MACROS = {
    "macros.html": """
{% macro link_or_plain(href, style) -%}
{% if href %}<a href="{{ href }}" target="_blank" style="{{ style }}">{{ caller() }}</a>{% else %}{{ caller() }}{% endif %}
{%- endmacro %}

{% macro play_icon() -%}
<div style="position: absolute; top: 50%; left: 50%; transform: translate(-50%, -50%); width: 48px; height: 48px; background-color: rgba(0, 0, 0, 0.6); border-radius: 50%; display: flex; align-items: center; justify-content: center; pointer-events: none"><div style="width: 0; height: 0; border-top: 10px solid transparent; border-bottom: 10px solid transparent; border-left: 16px solid white; margin-left: 4px"></div></div>
{%- endmacro %}
""",
}

environment = Environment(
    loader=DictLoader(MACROS),
    autoescape=select_autoescape(default=True, default_for_string=True),
    trim_blocks=True,
    lstrip_blocks=True,
)
environment.filters["css"] = css


def template(source: str, **globals) -> Template:
    """Compile a block template against the shared environment."""
    return environment.from_string(source.strip(), globals=globals or None)


# Tags and attributes allowed through Markdown sanitising
MARKDOWN_TAGS = [
    "a", "article", "b", "blockquote", "br", "caption", "code", "del", "details", "div", "em",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li", "main", "ol",
    "p", "pre", "section", "span", "strike", "strong", "sub", "summary", "sup", "table",
    "tbody", "td", "th", "thead", "tr", "u", "ul",
]
MARKDOWN_ATTRIBUTES = {
    "a": ["href", "target", "title"],
    "img": ["src", "alt", "title", "width", "height"],
    "td": ["align", "colspan", "rowspan"],
    "th": ["align", "colspan", "rowspan"],
}


def render_markdown(text: str) -> Markup:
    """Markdown to sanitised HTML, safe to embed as-is."""
    html = markdown.markdown(text or "", extensions=["nl2br", "sane_lists", "tables", "fenced_code"])
    return Markup(
        bleach.clean(
            html,
            tags=MARKDOWN_TAGS,
            attributes=MARKDOWN_ATTRIBUTES,
            protocols=["http", "https", "mailto"],
            strip=True,
        )
    )


class RenderContext:
    """
    Per-render state handed to every component.

    Containers call ``children`` to render their child ids; XML blocks read
    their pre-fetched feeds through ``feed``.
    """

    editor = False

    def __init__(self, render_block: Callable[[str], str], xml_data: Optional[XmlDataMap] = None):
        self._render_block = render_block
        self.xml_data = xml_data if xml_data is not None else XmlDataMap()

    def child(self, block_id: str) -> Markup:
        return Markup(self._render_block(block_id))

    def children(
        self,
        block_ids: Iterable[str],
        parent_id: str,
        column_index: Optional[int] = None,
    ) -> Markup:
        return Markup("").join(self.child(block_id) for block_id in block_ids or [])

    def feed(self, url: Optional[str]) -> Optional[FeedBody]:
        return self.xml_data.get(url)

    def feed_failed(self, url: Optional[str]) -> bool:
        return self.xml_data.failed(url)

