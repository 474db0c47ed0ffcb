"""
Block types: payload schemas and their static-markup components.

Standard blocks live in ``layout``, ``content`` and ``media``; XML-fed
content panels each have their own module built on ``xml_base``.
"""

from .base import RenderContext
from .xml_base import FeedPanel, XmlFeedProps

__all__ = ["RenderContext", "FeedPanel", "XmlFeedProps"]
