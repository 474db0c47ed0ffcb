"""
Loading editor documents from URL hashes.

Supported hashes:

- ``#sample/<name>``: a bundled sample document
- ``#code/<payload>``: a shared document, base64 of the URL-encoded JSON
- ``#template/<slug>``: a stored template, fetched through the API client

Anything unrecognised falls back to the empty email message.
"""

from __future__ import annotations

import base64
import binascii
import json
from pathlib import Path
from typing import Any, Dict
from urllib.parse import quote, unquote

import structlog

from email_builder.document.tree import Document

logger = structlog.get_logger(__name__)

SAMPLES_DIR = Path(__file__).parent / "samples"

SAMPLES = {
    "rheumnow-daily": "rheumnow_daily.json",
    "empty-email-message": "empty_email_message.json",
}

SAMPLE_PREFIX = "#sample/"
CODE_PREFIX = "#code/"
TEMPLATE_PREFIX = "#template/"

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def load_sample(name: str) -> Document:
    """A fresh copy of a bundled sample document."""
    filename = SAMPLES.get(name)
    if filename is None:
        raise KeyError(f"Unknown sample: {name}")
    with open(SAMPLES_DIR / filename, encoding="utf-8") as f:
        return json.load(f)


def empty_email_message() -> Document:
    return load_sample("empty-email-message")


def encode_configuration(document: Dict[str, Any]) -> str:
    payload = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(quote(payload, safe=_URI_COMPONENT_SAFE).encode("ascii")).decode("ascii")


def decode_configuration(code: str) -> Document:
    """
    Reverse of ``encode_configuration``.

    Raises:
        ValueError: If the payload is not valid base64, or not a JSON object
    """
    try:
        decoded = base64.b64decode(code, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid configuration code: {e}") from e

    document = json.loads(unquote(decoded))
    if not isinstance(document, dict):
        raise ValueError("Configuration code does not contain a document")
    return document


def encode_configuration_hash(document: Dict[str, Any]) -> str:
    """Share link fragment for a document."""
    return CODE_PREFIX + encode_configuration(document)


def get_configuration(hash_value: str) -> Document:
    """Resolve a URL hash to a document; never raises."""
    hash_value = hash_value or ""

    if hash_value.startswith(SAMPLE_PREFIX):
        name = hash_value[len(SAMPLE_PREFIX):]
        if name in SAMPLES:
            return load_sample(name)

    if hash_value.startswith(CODE_PREFIX):
        try:
            return decode_configuration(hash_value[len(CODE_PREFIX):])
        except ValueError as e:
            logger.warning("Couldn't load configuration from hash", error=str(e))

    return empty_email_message()


def get_configuration_from_api(hash_value: str, client) -> Document:
    """
    Resolve a hash, fetching ``#template/<slug>`` through the templates API.

    Raises:
        ApiClientError: If the template cannot be fetched
    """
    if hash_value and hash_value.startswith(TEMPLATE_PREFIX):
        slug = hash_value[len(TEMPLATE_PREFIX):]
        template = client.fetch_template(slug)
        return template["configuration"]
    return get_configuration(hash_value)
