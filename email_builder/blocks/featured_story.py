"""Featured story panel; video stories get a play overlay on their image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import extract_time_text, is_flag_set, scrub, strip_tags, text_of

MARKERS = ("title", "field_media_image", "nid")


class FeaturedStoryXmlProps(XmlFeedProps):
    pass


@dataclass
class FeaturedStoryItem:
    title: str
    created_date: str
    author_attribution: str
    image: str
    body: str
    type: str
    show_author: bool
    view_node: str

    @property
    def is_video(self) -> bool:
        return self.type.lower() == "video"


def map_item(item: Dict[str, Any]) -> FeaturedStoryItem:
    return FeaturedStoryItem(
        title=text_of(item.get("title")),
        created_date=extract_time_text(item.get("created")),
        author_attribution=strip_tags(item.get("field_author_attribution")).strip(),
        image=text_of(item.get("field_media_image")),
        body=scrub(item.get("body")),
        type=text_of(item.get("type")),
        show_author=is_flag_set(item.get("field_show_author")),
        view_node=text_of(item.get("view_node")),
    )


ITEMS = template(
    """
{% from "macros.html" import play_icon %}
{% for item in items %}
<div style="margin-bottom: 24px; padding-bottom: 16px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}">
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit; display: block"><h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4; color: #333">{{ item.title }}</h3></a>
{% else %}
<h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4">{{ item.title }}</h3>
{% endif %}
<div style="font-size: 12px; color: #666; margin-bottom: 8px">
{%- if item.show_author and item.author_attribution -%}
<span style="font-weight: bold">{{ item.author_attribution }}</span>{% if item.created_date %}<span style="margin: 0 8px">•</span>{% endif %}
{%- endif -%}
{%- if item.created_date -%}
<span>{{ item.created_date }}</span>
{%- endif -%}
</div>
{% if item.image %}
{% set figure %}<div style="position: relative; margin-bottom: 12px"><img src="{{ item.image }}" alt="{{ item.title }}" style="width: 100%; max-width: 100%; height: auto; display: block; border-radius: 4px">{% if item.is_video %}{{ play_icon() }}{% endif %}</div>{% endset %}
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit; display: block">{{ figure }}</a>
{% else %}
{{ figure }}
{% endif %}
{% endif %}
{% if item.body %}
<div style="font-size: 14px; line-height: 1.5; color: #666">{{ item.body }}</div>
{% endif %}
</div>
{% endfor %}
"""
)

PANEL = FeedPanel(
    label="Featured Story",
    empty_message="No stories found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
