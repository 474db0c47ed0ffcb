"""
Regex scrubbers for the HTML fragments that feeds embed in text fields.

Feed exports wrap markup in CDATA sections and ``<time>`` elements; these
helpers reduce such values to the plain text the panels display.
"""

import re
from typing import Any, Dict, List

CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")
TAG_RE = re.compile(r"<[^>]*>?")
TIME_RE = re.compile(r">([^<]+)</time>")
LINK_RE = re.compile(r"""<a[^>]*href=["']([^"']+)["'][^>]*>(.*?)</a>""", re.IGNORECASE)


def text_of(value: Any) -> str:
    """
    Coerce a parsed XML value to a string.

    Missing values become ``""``; elements that carried attributes
    contribute their ``#text``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return text_of(value.get("#text"))
    if isinstance(value, list):
        return text_of(value[0]) if value else ""
    return str(value)


def strip_cdata(value: Any) -> str:
    return CDATA_RE.sub("", text_of(value))


def strip_tags(value: Any) -> str:
    return TAG_RE.sub("", text_of(value))


def scrub(value: Any) -> str:
    """CDATA markers and tags removed, surrounding whitespace trimmed."""
    return strip_tags(strip_cdata(value)).strip()


def extract_time_text(value: Any) -> str:
    """Text of the first ``<time>`` element, or the input unchanged."""
    text = text_of(value)
    if not text:
        return ""
    match = TIME_RE.search(text)
    if match and match.group(1):
        return match.group(1)
    return text


def parse_links(value: Any) -> List[Dict[str, str]]:
    """Anchors in an HTML fragment as ``{"href", "text"}`` pairs, in order."""
    html = text_of(value)
    if not html:
        return []
    return [
        {"href": match.group(1), "text": strip_tags(match.group(2)).strip()}
        for match in LINK_RE.finditer(html)
    ]


def is_flag_set(value: Any) -> bool:
    """Drupal boolean fields export as ``1``/``"1"``."""
    if isinstance(value, str):
        return value.strip() == "1"
    return value == 1
