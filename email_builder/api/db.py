"""Database model and engine helpers for the templates API."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, Text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite does not keep offsets."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EmailTemplate(SQLModel, table=True):
    """A named, stored editor document."""

    __tablename__ = "email_templates"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=255, unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    configuration: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    created_by: Optional[str] = None
    is_active: bool = Field(default=True, index=True)


def create_engine_for_url(url: str, echo: bool = False) -> Engine:
    """Return an engine for the configured database URL."""
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, or every session sees an empty database
            options["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **options)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Ensure all tables exist."""
    SQLModel.metadata.create_all(engine)


def get_session(engine: Engine) -> Session:
    """Create a session bound to the shared engine."""
    return Session(engine)
