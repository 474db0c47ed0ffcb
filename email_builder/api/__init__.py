"""Templates CRUD API backed by SQLModel."""

from .app import build_app
from .db import EmailTemplate, create_engine_for_url, init_db
from .store import TemplateStore

__all__ = ["build_app", "EmailTemplate", "create_engine_for_url", "init_db", "TemplateStore"]
