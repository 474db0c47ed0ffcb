"""Therapeutic update panel; sponsored attributions are highlighted."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import extract_time_text, is_flag_set, scrub, strip_tags, text_of

MARKERS = ("title", "field_media_image", "nid")

SPONSORED_COLOR = "#800080"


class TherapeuticUpdateXmlProps(XmlFeedProps):
    pass


@dataclass
class TherapeuticUpdateItem:
    title: str
    created_date: str
    author_attribution: str
    image: str
    body: str
    is_sponsored: bool
    show_author: bool


def map_item(item: Dict[str, Any]) -> TherapeuticUpdateItem:
    return TherapeuticUpdateItem(
        title=text_of(item.get("title")),
        created_date=extract_time_text(item.get("created")),
        author_attribution=strip_tags(item.get("field_author_attribution")).strip(),
        image=text_of(item.get("field_media_image")),
        body=scrub(item.get("body")),
        is_sponsored=text_of(item.get("field_rxu_is_sponsored")) == "On",
        show_author=is_flag_set(item.get("field_show_author")),
    )


ITEMS = template(
    """
{% for item in items %}
<div style="margin-bottom: 24px; padding-bottom: 16px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}">
<h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4">{{ item.title }}</h3>
<div style="font-size: 12px; color: #666; margin-bottom: 8px">
{% if item.show_author and item.author_attribution %}
<div><span style="color: {{ sponsored_color if item.is_sponsored else 'inherit' }}; font-weight: {{ 'bold' if item.is_sponsored else 'normal' }}">{{ item.author_attribution }}</span></div>
{% endif %}
<div><span>{{ item.created_date }}</span></div>
</div>
{% if item.image %}
<img src="{{ item.image }}" alt="{{ item.title }}" style="width: 100%; max-width: 100%; height: auto; display: block; margin-bottom: 12px; border-radius: 4px">
{% endif %}
{% if item.body %}
<div style="font-size: 14px; line-height: 1.5; color: #666">{{ item.body }}</div>
{% endif %}
</div>
{% endfor %}
""",
    sponsored_color=SPONSORED_COLOR,
)

PANEL = FeedPanel(
    label="Therapeutic Update",
    empty_message="No updates found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
