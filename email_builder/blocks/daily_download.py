"""Daily download panel: a thumbnail, a title and a download button per item."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import text_of

MARKERS = ("title", "thumbnail__target_id", "view_node", "nid")


class DailyDownloadXmlProps(XmlFeedProps):
    pass


@dataclass
class DailyDownloadItem:
    title: str
    image: str
    view_node: str


def map_item(item: Dict[str, Any]) -> DailyDownloadItem:
    return DailyDownloadItem(
        title=text_of(item.get("title")),
        image=text_of(item.get("thumbnail__target_id")),
        view_node=text_of(item.get("view_node")),
    )


ITEMS = template(
    """
{% for item in items %}
<div style="margin-bottom: 24px; padding-bottom: 16px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}">
{% set image %}{% if item.image %}<img src="{{ item.image }}" alt="{{ item.title }}" style="width: 100%; max-width: 100%; height: auto; display: block; margin-bottom: 12px; border-radius: 4px">{% endif %}{% endset %}
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit; display: block">{{ image }}<h3 style="margin: 0 0 12px 0; font-size: 18px; line-height: 1.4; color: #333">{{ item.title }}</h3></a>
<a href="{{ item.view_node }}" target="_blank" style="display: inline-block; padding: 12px 24px; background-color: #1585fe; color: #ffffff; text-decoration: none; border-radius: 4px; font-size: 14px; font-weight: bold; text-align: center">Download</a>
{% else %}
{{ image }}<h3 style="margin: 0 0 12px 0; font-size: 18px; line-height: 1.4">{{ item.title }}</h3>
{% endif %}
</div>
{% endfor %}
"""
)

PANEL = FeedPanel(
    label="Daily Download",
    empty_message="No downloads found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
