"""News panel: a mixed feed of articles and tweets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from email_builder.blocks.base import template
from email_builder.blocks.xml_base import FeedPanel, XmlFeedProps
from email_builder.xml_data.scrub import extract_time_text, is_flag_set, parse_links, scrub, strip_cdata, strip_tags, text_of

X_LOGO_URL = "https://rkrn-images.s3.us-east-1.amazonaws.com/x_logo.png"

MARKERS = ("title", "field_media_image", "nid", "type")


class NewsPanelXmlProps(XmlFeedProps):
    pass


@dataclass
class ArticleItem:
    title: str
    author: str
    created_date: str
    image: str
    body: str
    view_node: str
    show_author: bool
    type: str = "Article"

    @property
    def link(self) -> str:
        return self.view_node

    @property
    def image_alt(self) -> str:
        return self.title


@dataclass
class TweetItem:
    image: str
    tweet_content: str
    author_name: str
    created_date: str
    tweet_id: str
    links: List[Dict[str, str]] = field(default_factory=list)
    type: str = "Tweet"

    @property
    def link(self) -> str:
        return self.tweet_id

    @property
    def image_alt(self) -> str:
        return "Tweet"


NewsPanelItem = Union[ArticleItem, TweetItem]


def map_item(item: Dict[str, Any]) -> NewsPanelItem:
    """Anything not typed ``article`` is treated as a tweet."""
    created_date = extract_time_text(item.get("created_1"))

    if text_of(item.get("type")).lower() == "article":
        return ArticleItem(
            title=text_of(item.get("title")),
            author=strip_tags(item.get("field_full_name")).strip(),
            created_date=created_date,
            image=text_of(item.get("field_media_image")),
            body=scrub(item.get("body")),
            view_node=text_of(item.get("view_node")),
            show_author=is_flag_set(item.get("field_show_author")),
        )

    return TweetItem(
        image=text_of(item.get("field_tweet_external_image")) or text_of(item.get("field_social_author_image1")),
        tweet_content=strip_cdata(item.get("field_tweet_content")),
        links=parse_links(item.get("field_links")),
        author_name=text_of(item.get("field_social_author_name")),
        created_date=created_date,
        tweet_id=text_of(item.get("field_tweet_id")),
    )


ITEMS = template(
    """
{% from "macros.html" import link_or_plain %}
{% for item in items %}
<div style="margin-bottom: 24px; padding-bottom: 16px; border-bottom: {{ 'none' if loop.last else '1px solid #eee' }}">
<table width="100%" cellpadding="0" cellspacing="0" style="border-collapse: collapse"><tbody><tr>
{% if item.image %}
<td width="160" valign="top" style="padding-right: 16px; padding-bottom: 0">{% call link_or_plain(item.link, "text-decoration: none; color: inherit; display: block") %}<img src="{{ item.image }}" alt="{{ item.image_alt }}" width="160" style="width: 160px; max-width: 100%; height: auto; display: block; border-radius: 4px">{% endcall %}</td>
{% endif %}
<td valign="top" style="padding-bottom: 0">
{% if item.type == "Article" %}
{% if item.view_node %}
<a href="{{ item.view_node }}" target="_blank" style="text-decoration: none; color: inherit"><h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4; color: #333">{{ item.title }}</h3></a>
{% else %}
<h3 style="margin: 0 0 8px 0; font-size: 18px; line-height: 1.4">{{ item.title }}</h3>
{% endif %}
<div style="font-size: 12px; color: #666; margin-bottom: 8px">
{%- if item.show_author and item.author -%}
<span style="font-weight: bold">{{ item.author }}</span>{% if item.created_date %}<span style="margin: 0 8px">•</span><span>{{ item.created_date }}</span>{% endif %}
{%- elif not item.show_author and item.created_date -%}
<span>{{ item.created_date }}</span>
{%- endif -%}
</div>
{% if item.body %}
<div style="font-size: 14px; line-height: 1.5; color: #666">{{ item.body }}</div>
{% endif %}
{% else %}
{% call link_or_plain(item.tweet_id, "text-decoration: none; color: inherit") %}<div style="font-size: 14px; line-height: 1.5; color: #666; margin-bottom: 12px">{{ item.tweet_content }}</div>{% endcall %}

{% if item.links %}
<div style="margin-bottom: 12px">
{% for link in item.links %}
<div style="margin-bottom: 8px"><a href="{{ link.href }}" target="_blank" style="color: #1585fe; text-decoration: none; font-size: 14px">{{ link.text or link.href }}</a></div>
{% endfor %}
</div>
{% endif %}
<div style="font-size: 12px; color: #666"><img src="{{ x_logo }}" alt="Twitter/X" width="14" height="14" style="width: 14px; height: 14px; display: inline-block; vertical-align: middle; margin-right: 6px">
{%- if item.author_name -%}
<span style="font-weight: bold">{{ item.author_name }}</span>{% if item.created_date %}<span style="margin: 0 8px">•</span><span>{{ item.created_date }}</span>{% endif %}
{%- elif item.created_date -%}
<span>{{ item.created_date }}</span>
{%- endif -%}
</div>
{% endif %}
</td>
</tr></tbody></table>
</div>
{% endfor %}
""",
    x_logo=X_LOGO_URL,
)

PANEL = FeedPanel(
    label="News Panel",
    empty_message="No news items found.",
    markers=MARKERS,
    mapper=map_item,
    items_template=ITEMS,
)
