"""
Test suite for XML feed fetching.

HTTP is served by httpx.MockTransport handlers.
"""

import threading

import httpx
import pytest

from email_builder.core.exceptions import FeedFetchError
from email_builder.renderers.reader import render_to_static_markup
from email_builder.xml_data.fetcher import FeedFetcher, XmlDataMap

from sample_data import BLOG_FEED, NEWS_FEED, NEWS_URL, layout_document, xml_block

BLOG_URL = "https://feeds.example.com/blog.xml"


class FeedServer:
    """Serves canned bodies by URL and counts requests."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        self._lock = threading.Lock()

    def __call__(self, request):
        with self._lock:
            self.requests.append(str(request.url))
        body = self.routes.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="missing")
        return httpx.Response(200, text=body, headers={"Content-Type": "application/xml"})


def _fetcher(handler, **kwargs):
    kwargs.setdefault("backoff_base", 0.001)
    return FeedFetcher(transport=httpx.MockTransport(handler), **kwargs)


class TestXmlDataMap:
    """Test the fetched-data container."""

    def test_lookup(self):
        """Test bodies and errors are looked up by URL."""
        data = XmlDataMap(texts={NEWS_URL: "<x/>"}, errors={BLOG_URL: "Status: 500"})
        assert data.get(NEWS_URL) == "<x/>"
        assert data.get(BLOG_URL) is None
        assert data.get(None) is None
        assert data.failed(BLOG_URL)
        assert not data.failed(NEWS_URL)
        assert not data.failed("")
        assert NEWS_URL in data
        assert len(data) == 1


class TestFeedFetcher:
    """Test batch and single fetches."""

    def test_fetch_all(self):
        """Test every feed is fetched and keyed by URL."""
        server = FeedServer({NEWS_URL: NEWS_FEED, BLOG_URL: BLOG_FEED})
        with _fetcher(server) as fetcher:
            data = fetcher.fetch_all([NEWS_URL, BLOG_URL])
        assert data.texts == {NEWS_URL: NEWS_FEED.encode(), BLOG_URL: BLOG_FEED.encode()}
        assert data.errors == {}

    def test_http_errors_are_recorded(self):
        """Test non-2xx responses land in errors without retrying."""
        server = FeedServer({NEWS_URL: NEWS_FEED})
        missing = "https://feeds.example.com/gone.xml"
        with _fetcher(server) as fetcher:
            data = fetcher.fetch_all([NEWS_URL, missing])
        assert NEWS_URL in data
        assert data.errors[missing].endswith("Status: 404")
        assert server.requests.count(missing) == 1

    def test_duplicates_fetched_once(self):
        """Test repeated URLs are requested once."""
        server = FeedServer({NEWS_URL: NEWS_FEED})
        with _fetcher(server) as fetcher:
            fetcher.fetch_all([NEWS_URL, NEWS_URL, NEWS_URL])
        assert server.requests == [NEWS_URL]

    def test_blank_urls_skipped(self):
        """Test empty and whitespace URLs are ignored."""
        server = FeedServer({})
        with _fetcher(server) as fetcher:
            data = fetcher.fetch_all(["", "   ", None])
        assert server.requests == []
        assert len(data) == 0
        assert data.errors == {}

    def test_relative_urls_use_base(self):
        """Test relative URLs resolve against base_url but keep their key."""
        server = FeedServer({"https://rheumnow.example.com/feeds/news.xml": NEWS_FEED})
        with _fetcher(server, base_url="https://rheumnow.example.com/") as fetcher:
            data = fetcher.fetch_all(["/feeds/news.xml"])
        assert data.get("/feeds/news.xml") == NEWS_FEED.encode()

    def test_relative_url_without_base(self):
        """Test relative URLs are left alone when no base is configured."""
        fetcher = FeedFetcher()
        assert fetcher.resolve_url("/feeds/news.xml") == "/feeds/news.xml"
        assert fetcher.resolve_url(NEWS_URL) == NEWS_URL
        fetcher.close()

    def test_transport_errors_are_retried(self):
        """Test a transient connection failure is retried."""
        attempts = []

        def flaky(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(200, text=NEWS_FEED)

        with _fetcher(flaky, max_retries=2) as fetcher:
            data = fetcher.fetch_all([NEWS_URL])
        assert data.get(NEWS_URL) == NEWS_FEED.encode()
        assert len(attempts) == 2

    def test_exhausted_retries_are_recorded(self):
        """Test feeds that never connect end up in errors."""
        attempts = []

        def down(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with _fetcher(down, max_retries=3) as fetcher:
            data = fetcher.fetch_all([NEWS_URL])
        assert len(attempts) == 3
        assert "connection refused" in data.errors[NEWS_URL]
        assert NEWS_URL not in data

    def test_fetch_raises(self):
        """Test single fetches raise FeedFetchError with the status."""
        with _fetcher(lambda request: httpx.Response(503)) as fetcher:
            with pytest.raises(FeedFetchError) as exc_info:
                fetcher.fetch(NEWS_URL)
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == NEWS_URL

    def test_from_settings(self, monkeypatch):
        """Test fetchers pick up feed settings from the environment."""
        monkeypatch.setenv("FEED_BASE_URL", "https://rheumnow.example.com")
        monkeypatch.setenv("FEED_MAX_RETRIES", "5")
        fetcher = FeedFetcher.from_settings(max_workers=2)
        assert fetcher.base_url == "https://rheumnow.example.com"
        assert fetcher.max_retries == 5
        assert fetcher.processor.max_workers == 2
        fetcher.close()


class TestFeedEncoding:
    """Test feed bodies reach the XML parser undecoded."""

    LATIN1_FEED = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
        "<response><item><type>Article</type><title>Café notes</title><nid>1</nid></item></response>"
    ).encode("iso-8859-1")

    def _serve(self, request):
        # no charset in the content type, only the XML declaration names one
        return httpx.Response(200, content=self.LATIN1_FEED, headers={"Content-Type": "application/xml"})

    def test_fetch_keeps_bytes(self):
        """Test fetched bodies are the raw response bytes."""
        with _fetcher(self._serve) as fetcher:
            assert fetcher.fetch(NEWS_URL) == self.LATIN1_FEED

    def test_declared_encoding_is_honoured(self):
        """Test a Latin-1 feed renders its accented characters intact."""
        document = layout_document({"n": xml_block("NewsPanelXml", NEWS_URL)})
        with _fetcher(self._serve) as fetcher:
            html = render_to_static_markup(document, fetcher=fetcher)
        assert "Café notes" in html
