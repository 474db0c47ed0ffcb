"""
Concurrent XML feed fetching.

All feeds referenced by a document are fetched up front so that rendering
itself stays synchronous and side-effect free.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse

import httpx
import structlog

from email_builder.core.config import Settings, get_settings
from email_builder.core.exceptions import FeedFetchError
from email_builder.utils.reliability import ParallelProcessor, with_retry

logger = structlog.get_logger(__name__)

# Undecoded bytes as fetched; str bodies are accepted for in-memory data
FeedBody = Union[str, bytes]


@dataclass
class XmlDataMap:
    """Fetched feed bodies keyed by the URL as written in the document."""

    texts: Dict[str, FeedBody] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def get(self, url: Optional[str]) -> Optional[FeedBody]:
        if not url:
            return None
        return self.texts.get(url)

    def failed(self, url: Optional[str]) -> bool:
        return bool(url) and url in self.errors

    def __contains__(self, url: object) -> bool:
        return url in self.texts

    def __len__(self) -> int:
        return len(self.texts)

    @classmethod
    def from_texts(cls, texts: Dict[str, FeedBody]) -> "XmlDataMap":
        return cls(texts=dict(texts))


class FeedFetcher:
    """
    Fetches XML feeds over HTTP on a worker pool.

    Transport errors are retried with exponential backoff; non-2xx responses
    are not. Nothing is raised from ``fetch_all``: failures land in
    ``XmlDataMap.errors``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        max_retries: int = 3,
        max_workers: int = 6,
        backoff_base: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.processor = ParallelProcessor(max_workers=max_workers)
        self.client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={"Accept": "application/xml, text/xml;q=0.9, */*;q=0.8"},
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "FeedFetcher":
        config = (settings or get_settings()).feeds
        options = {
            "base_url": config.base_url,
            "timeout": config.timeout,
            "max_retries": config.max_retries,
            "max_workers": config.max_workers,
        }
        options.update(overrides)
        return cls(**options)

    def resolve_url(self, url: str) -> str:
        """Absolute URLs pass through; relative ones are joined to ``base_url``."""
        if urlparse(url).scheme or not self.base_url:
            return url
        return urljoin(self.base_url, url)

    def fetch(self, url: str) -> bytes:
        """Fetch one feed body undecoded, raising ``FeedFetchError`` on failure."""
        target = self.resolve_url(url)

        @with_retry(
            max_attempts=self.max_retries,
            backoff_base=self.backoff_base,
            retry_exceptions=(httpx.TransportError,),
        )
        def _get() -> httpx.Response:
            return self.client.get(target)

        try:
            response = _get()
        except httpx.HTTPError as e:
            raise FeedFetchError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FeedFetchError(url, f"Status: {response.status_code}", status_code=response.status_code)

        logger.debug("Fetched feed", url=target, bytes=len(response.content))
        return response.content

    def _fetch_safely(self, url: str) -> Tuple[Optional[bytes], Optional[str]]:
        try:
            return self.fetch(url), None
        except FeedFetchError as e:
            logger.warning("Feed fetch failed", url=url, error=e.message)
            return None, e.message

    def fetch_all(self, urls: Iterable[str]) -> XmlDataMap:
        """Fetch every distinct URL concurrently."""
        unique = list(dict.fromkeys(url for url in urls if url and url.strip()))
        data = XmlDataMap()
        if not unique:
            return data

        results = self.processor.process_batch(unique, self._fetch_safely)
        for url in unique:
            outcome = results.get(url)
            if outcome is None:
                data.errors[url] = "Fetch failed"
                continue
            text, error = outcome
            if error is not None:
                data.errors[url] = error
            else:
                data.texts[url] = text

        logger.info("Fetched XML feeds", requested=len(unique), fetched=len(data.texts), failed=len(data.errors))
        return data

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
