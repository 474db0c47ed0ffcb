"""Blog panel: posts with optional series branding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import extract_time_text, is_flag_set, scrub, text_of

MARKERS = ("title", "thumbnail__target_id", "nid", "view_node")

# field_article_type -> series banner
BRANDING_IMAGES = {
    "Advanced Practice Rheum": "https://rheumnow.com/sites/default/files/advanced_practice_rheum_logo.jpg",
    "RheumThought": "http://localhost:9001/sites/default/files/2023-02/Rheumthoughts%20final.png",
}


class BlogXmlProps(XmlFeedProps):
    pass


@dataclass
class BlogItem:
    title: str
    author: str
    created_date: str
    image: str
    body: str
    view_node: str
    show_author: bool
    article_type: str

    @property
    def branding_image(self) -> Optional[str]:
        return BRANDING_IMAGES.get(self.article_type)


def map_item(item: Dict[str, Any]) -> BlogItem:
    return BlogItem(
        title=text_of(item.get("title")),
        author=text_of(item.get("field_author_attribution")),
        created_date=extract_time_text(item.get("created")),
        image=text_of(item.get("field_media_image")) or text_of(item.get("thumbnail__target_id")),
        body=scrub(item.get("body")),
        view_node=text_of(item.get("view_node")),
        show_author=is_flag_set(item.get("field_show_author")),
        article_type=text_of(item.get("field_article_type")),
    )


ITEMS = template(
    """
{% for item in items %}
<div style="margin-bottom: 24px; padding-bottom: 16px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}">
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit; display: block"><h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4; color: #333">{{ item.title }}</h3></a>
{% else %}
<h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4">{{ item.title }}</h3>
{% endif %}
<div style="font-size: 12px; color: #666; margin-bottom: 8px">
{%- if item.show_author and item.author -%}
<span style="font-weight: bold">{{ item.author }}</span>{% if item.created_date %}<span style="margin: 0 8px">•</span>{% endif %}
{%- endif -%}
{%- if item.created_date -%}
<span>{{ item.created_date }}</span>
{%- endif -%}
</div>
{% if item.branding_image %}
<div style="margin-bottom: 12px"><img src="{{ item.branding_image }}" alt="{{ item.article_type }}" style="max-width: 100%; height: auto; display: block"></div>
{% endif %}
{% if item.image %}
{% set image %}<img src="{{ item.image }}" alt="{{ item.title }}" style="width: 100%; max-width: 100%; height: auto; display: block; margin-bottom: 12px; border-radius: 4px">{% endset %}
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit; display: block">{{ image }}</a>
{% else %}
{{ image }}
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
    label="Blog",
    empty_message="No blog posts found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
