"""
Email builder.

Block-based email documents, static HTML rendering with XML-fed content
panels, and a templates API.
"""

__version__ = "1.0.0"
