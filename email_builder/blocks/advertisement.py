"""
Advertisement panels in the two IAB sizes the newsletter carries.

Ad feeds bundle a third-party tracking snippet with each creative; it is
emitted verbatim inside a hidden ``div``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from markupsafe import Markup

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import scrub, strip_cdata, text_of

MARKERS = ("field_ad_image", "title")


class Advertisement300250XmlProps(XmlFeedProps):
    pass


class Advertisement72890XmlProps(XmlFeedProps):
    pass


@dataclass
class AdvertisementItem:
    image: str
    alt_text: str
    destination_url: str
    tracking_code: Markup


def map_item(item: Dict[str, Any]) -> AdvertisementItem:
    return AdvertisementItem(
        image=text_of(item.get("field_ad_image")),
        alt_text=scrub(item.get("field_ad_image_1")),
        destination_url=strip_cdata(item.get("field_destination_url")).strip(),
        tracking_code=Markup(strip_cdata(item.get("field_tracking_code")).strip()),
    )


_ITEMS_SOURCE = """
{% for item in items %}
<div style="margin-bottom: 6px; text-align: center">
{% set image %}<img src="{{ item.image }}" alt="{{ item.alt_text }}" style="max-width: {{ max_width }}px; width: 100%; height: auto; display: block; margin: 0 auto">{% endset %}
{% if item.destination_url %}
<a href="{{ item.destination_url }}" target="_blank" rel="noopener noreferrer" style="text-decoration: none; display: inline-block">{{ image }}</a>
{% else %}
{{ image }}
{% endif %}
{% if item.tracking_code %}
<div class="tracking-code" style="display: none; height: 1px; background-color: #000">{{ item.tracking_code }}</div>
{% endif %}
<div style="font-size: 11px; color: #999; text-align: center">Advertisement</div>
</div>
{% endfor %}
"""


def _panel(label: str, max_width: int) -> FeedPanel:
    return FeedPanel(
        label=label,
        empty_message="No advertisements found.",
        markers=MARKERS,
        mapper=map_item,
        items_template=template(_ITEMS_SOURCE, max_width=max_width),
    )


PANEL_300_250 = _panel("Advertisement 300x250", 300)
PANEL_728_90 = _panel("Advertisement 728x90", 728)
