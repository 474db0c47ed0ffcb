"""
XML feed ingestion for the content panel blocks.

Fetches remote feeds, converts them to plain Python structures and scrubs
the HTML fragments embedded in their fields.
"""

from .fetcher import FeedFetcher, XmlDataMap
from .parser import find_items, parse_feed, xml_to_dict
from .scrub import extract_time_text, is_flag_set, parse_links, scrub, strip_cdata, strip_tags, text_of

__all__ = [
    "FeedFetcher",
    "XmlDataMap",
    "find_items",
    "parse_feed",
    "xml_to_dict",
    "extract_time_text",
    "is_flag_set",
    "parse_links",
    "scrub",
    "strip_cdata",
    "strip_tags",
    "text_of",
]
