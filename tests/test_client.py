"""
Test suite for the templates API client.

The client talks to a real app instance through TestClient, which is an
httpx.Client, so no network is involved.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from email_builder.api.app import build_app
from email_builder.client import TemplatesClient, slugify
from email_builder.core.exceptions import ApiClientError
from email_builder.editor.session import EditorSession
from email_builder.xml_data.fetcher import XmlDataMap

from sample_data import layout_document, text_block


class NullFetcher:
    def fetch_all(self, urls):
        return XmlDataMap()

    def close(self):
        pass


@pytest.fixture
def client(settings):
    app = build_app(settings, feed_fetcher=NullFetcher())
    with TestClient(app) as http:
        yield TemplatesClient(api_url="http://testserver/api/", http=http, settings=settings)


@pytest.fixture
def welcome(client):
    return client.create_template(
        name="Welcome",
        slug="welcome",
        description="Sent on signup",
        configuration=layout_document({"t": text_block("Welcome aboard")}),
    )


class TestSlugify:
    """Test slug generation from names."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Welcome", "welcome"),
            ("Welcome (Copy)", "welcome-copy"),
            ("  Daily -- Digest!  ", "daily-digest"),
            ("Q3 2024 Update", "q3-2024-update"),
            ("Ünïcode Name", "n-code-name"),
        ],
    )
    def test_slugify(self, name, expected):
        """Test non-alphanumeric runs collapse into single dashes."""
        assert slugify(name) == expected


class TestTemplatesClient:
    """Test CRUD calls against the API."""

    def test_trailing_slash_is_trimmed(self, client):
        """Test the base URL is normalised."""
        assert client.api_url == "http://testserver/api"

    def test_create_and_fetch(self, client, welcome):
        """Test a created template can be fetched back."""
        assert welcome["slug"] == "welcome"
        fetched = client.fetch_template("welcome")
        assert fetched["configuration"] == welcome["configuration"]

    def test_fetch_templates(self, client, welcome):
        """Test listing returns summaries."""
        items = client.fetch_templates()
        assert [item["slug"] for item in items] == ["welcome"]
        assert "configuration" not in items[0]

    def test_fetch_missing(self, client):
        """Test a missing template raises with the slug in the message."""
        with pytest.raises(ApiClientError) as exc_info:
            client.fetch_template("missing")
        assert exc_info.value.message == 'Template "missing" not found'
        assert exc_info.value.status_code == 404

    def test_create_conflict_uses_server_message(self, client, welcome):
        """Test server error bodies are surfaced."""
        with pytest.raises(ApiClientError) as exc_info:
            client.create_template(name="Again", slug="welcome", configuration={"root": {}})
        assert exc_info.value.message == 'Template with slug "welcome" already exists'
        assert exc_info.value.status_code == 409

    def test_update(self, client, welcome):
        """Test partial updates."""
        updated = client.update_template("welcome", name="Welcome v2")
        assert updated["name"] == "Welcome v2"
        assert updated["description"] == "Sent on signup"

    def test_update_missing(self, client):
        """Test updating a missing template surfaces the 404 message."""
        with pytest.raises(ApiClientError, match='Template with slug "missing" not found'):
            client.update_template("missing", name="x")

    def test_delete(self, client, welcome):
        """Test deleted templates are gone."""
        client.delete_template("welcome")
        assert client.fetch_templates() == []

    def test_delete_missing(self, client):
        """Test deleting a missing template reports the status text."""
        with pytest.raises(ApiClientError) as exc_info:
            client.delete_template("missing")
        assert exc_info.value.message == "Failed to delete template: Not Found"

    def test_duplicate(self, client, welcome):
        """Test duplicates get a "(Copy)" name and matching slug."""
        copy = client.duplicate_template("welcome")
        assert copy["name"] == "Welcome (Copy)"
        assert copy["slug"] == "welcome-copy"
        assert copy["description"] == "Sent on signup"
        assert copy["configuration"] == welcome["configuration"]

    def test_duplicate_twice_conflicts(self, client, welcome):
        """Test a second duplicate collides on the derived slug."""
        client.duplicate_template("welcome")
        with pytest.raises(ApiClientError, match="already exists"):
            client.duplicate_template("welcome")


class TestTransportErrors:
    """Test failures below HTTP."""

    def test_connection_refused(self, settings):
        """Test transport errors become ApiClientError."""

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(transport=httpx.MockTransport(refuse))
        with TemplatesClient(api_url="http://api.invalid/api", http=http, settings=settings) as client:
            with pytest.raises(ApiClientError) as exc_info:
                client.fetch_templates()
        assert exc_info.value.message == "Failed to fetch templates: connection refused"
        http.close()

    def test_server_error_without_body(self, settings):
        """Test non-JSON error bodies fall back to the status text."""
        http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway")))
        client = TemplatesClient(api_url="http://api.invalid/api", http=http, settings=settings)
        with pytest.raises(ApiClientError) as exc_info:
            client.create_template(name="A", slug="a", configuration={"root": {}})
        assert exc_info.value.message == "Failed to create template: Bad Gateway"
        assert exc_info.value.status_code == 502

    def test_settings_supply_url(self, settings):
        """Test the API URL defaults to settings."""
        client = TemplatesClient(settings=settings)
        assert client.api_url == settings.api_client.api_url.rstrip("/")
        client.close()


class TestEditorTemplateLoading:
    """Test #template/ hashes resolved through the client."""

    def test_load_template(self, client, welcome):
        """Test a stored template replaces the document."""
        session = EditorSession()
        assert session.load_template_from_hash("#template/welcome", client)
        assert session.document == welcome["configuration"]
        assert session.load_error is None
        assert session.is_loading is False

    def test_load_missing_template(self, client):
        """Test failures keep the current document and record the error."""
        session = EditorSession()
        before = session.document
        assert not session.load_template_from_hash("#template/missing", client)
        assert session.document == before
        assert session.load_error == 'Template "missing" not found'
