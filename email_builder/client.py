"""
HTTP client for the templates API.

Used by the editor session to load ``#template/<slug>`` hashes and by the
``templates`` CLI commands.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import httpx
import structlog

from email_builder.core.config import Settings, get_settings
from email_builder.core.exceptions import ApiClientError

logger = structlog.get_logger(__name__)

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse everything else into single dashes."""
    return _NON_SLUG_RE.sub("-", name.lower()).strip("-")


class TemplatesClient:
    """Thin wrapper over the ``/templates`` routes."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        config = (settings or get_settings()).api_client
        self.api_url = (api_url or config.api_url).rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout or config.timeout)

    def _url(self, slug: Optional[str] = None) -> str:
        if slug is None:
            return f"{self.api_url}/templates"
        return f"{self.api_url}/templates/{slug}"

    def _request(self, method: str, url: str, action: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Templates API request failed", method=method, url=url, error=str(e))
            raise ApiClientError(f"Failed to {action}: {e}") from e

    @staticmethod
    def _error_from_body(response: httpx.Response, fallback: str) -> ApiClientError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") if isinstance(body, dict) else None
        return ApiClientError(message or fallback, status_code=response.status_code)

    def fetch_templates(self) -> List[Dict[str, Any]]:
        """Active templates, newest first, without configuration."""
        response = self._request("GET", self._url(), "fetch templates")
        if not response.is_success:
            raise ApiClientError(
                f"Failed to fetch templates: {response.reason_phrase}", status_code=response.status_code
            )
        return response.json()

    def fetch_template(self, slug: str) -> Dict[str, Any]:
        """A single template including its configuration."""
        response = self._request("GET", self._url(slug), "fetch template")
        if response.status_code == 404:
            raise ApiClientError(f'Template "{slug}" not found', status_code=404)
        if not response.is_success:
            raise ApiClientError(
                f"Failed to fetch template: {response.reason_phrase}", status_code=response.status_code
            )
        return response.json()

    def create_template(
        self,
        name: str,
        slug: str,
        configuration: Dict[str, Any],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {"name": name, "slug": slug, "description": description, "configuration": configuration}
        response = self._request("POST", self._url(), "create template", json=payload)
        if not response.is_success:
            raise self._error_from_body(response, f"Failed to create template: {response.reason_phrase}")
        return response.json()

    def update_template(self, slug: str, **changes: Any) -> Dict[str, Any]:
        response = self._request("PUT", self._url(slug), "update template", json=changes)
        if not response.is_success:
            raise self._error_from_body(response, f"Failed to update template: {response.reason_phrase}")
        return response.json()

    def delete_template(self, slug: str) -> None:
        response = self._request("DELETE", self._url(slug), "delete template")
        if not response.is_success:
            raise ApiClientError(
                f"Failed to delete template: {response.reason_phrase}", status_code=response.status_code
            )

    def duplicate_template(self, slug: str) -> Dict[str, Any]:
        """Copy a template under ``"<name> (Copy)"`` with a slug derived from that name."""
        original = self.fetch_template(slug)
        name = f"{original['name']} (Copy)"
        return self.create_template(
            name=name,
            slug=slugify(name),
            description=original.get("description"),
            configuration=original["configuration"],
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TemplatesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
