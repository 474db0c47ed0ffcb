"""Video panel: thumbnails with a play overlay linking to the embed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import text_of

MARKERS = ("title", "field_media_image")


class VideoXmlProps(XmlFeedProps):
    pass


@dataclass
class VideoItem:
    title: str
    image: str
    caption: str
    link: str


def map_item(item: Dict[str, Any]) -> VideoItem:
    return VideoItem(
        title=text_of(item.get("title")),
        image=text_of(item.get("field_media_image")),
        caption=text_of(item.get("field_captions")),
        link=text_of(item.get("field_media_video_embed_field")),
    )


ITEMS = template(
    """
{% from "macros.html" import link_or_plain, play_icon %}
{% for item in items %}
<div style="margin-bottom: 24px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}; padding-bottom: 16px">
{% call link_or_plain(item.link, "text-decoration: none; color: inherit; display: block") %}
{% if item.image %}
<div style="position: relative; margin-bottom: 12px"><img src="{{ item.image }}" alt="{{ item.title }}" style="width: 100%; max-width: 100%; height: auto; display: block; border-radius: 4px">{{ play_icon() }}</div>
{% endif %}
<h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4; color: #333">{{ item.title }}</h3>
{% endcall %}
{% if item.caption %}
<p style="margin: 0; font-size: 14px; line-height: 1.5; color: #666">{{ item.caption }}</p>
{% endif %}
</div>
{% endfor %}
"""
)

PANEL = FeedPanel(
    label="Video",
    empty_message="No videos found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
