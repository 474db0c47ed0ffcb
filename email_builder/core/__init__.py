"""Core configuration, logging and error types for the email builder."""

from .config import Settings, get_settings
from .exceptions import EmailBuilderError

__all__ = ["Settings", "get_settings", "EmailBuilderError"]
