"""Configure pytest fixtures and environment for email builder tests."""

import pytest
from dotenv import load_dotenv

from email_builder.core.config import DatabaseConfig, Settings, reset_settings
from email_builder.xml_data.fetcher import XmlDataMap


def pytest_sessionstart(session):
    """Load environment variables from .env when present."""
    load_dotenv()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        ENVIRONMENT="test",
        database=DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'templates.db'}"),
    )


@pytest.fixture
def empty_xml_data():
    return XmlDataMap()
