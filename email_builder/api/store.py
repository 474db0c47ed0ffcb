"""Persistence helpers for stored templates."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import func, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from email_builder.core.exceptions import ConflictError

from .db import EmailTemplate, get_session, utcnow

logger = structlog.get_logger(__name__)

# Columns a partial update may touch
UPDATABLE_FIELDS = ("name", "slug", "description", "configuration", "is_active")


class TemplateStore:
    """Queries over ``email_templates``; soft-deleted rows are hidden from reads."""

    def __init__(self, engine) -> None:
        self._engine = engine

    def session(self) -> Session:
        return get_session(self._engine)

    def ping(self) -> Dict[str, Any]:
        with self.session() as session:
            session.execute(text("SELECT 1"))
        return {"database": "connected"}

    def list_active(self) -> List[EmailTemplate]:
        statement = (
            select(EmailTemplate)
            .where(EmailTemplate.is_active == True)  # noqa: E712
            .order_by(EmailTemplate.created_at.desc())
        )
        with self.session() as session:
            return list(session.exec(statement))

    def count(self, include_inactive: bool = False) -> int:
        statement = select(func.count()).select_from(EmailTemplate)
        if not include_inactive:
            statement = statement.where(EmailTemplate.is_active == True)  # noqa: E712
        with self.session() as session:
            return session.exec(statement).one()

    def _active_by_slug(self, session: Session, slug: str) -> Optional[EmailTemplate]:
        statement = select(EmailTemplate).where(
            EmailTemplate.slug == slug,
            EmailTemplate.is_active == True,  # noqa: E712
        )
        return session.exec(statement).first()

    def get_by_slug(self, slug: str) -> Optional[EmailTemplate]:
        with self.session() as session:
            return self._active_by_slug(session, slug)

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """Whether any row, active or not, holds ``slug``."""
        statement = select(EmailTemplate.id).where(EmailTemplate.slug == slug)
        if exclude_id:
            statement = statement.where(EmailTemplate.id != exclude_id)
        with self.session() as session:
            return session.exec(statement).first() is not None

    def _commit(self, session: Session, template: EmailTemplate) -> EmailTemplate:
        session.add(template)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise ConflictError(f'Template with slug "{template.slug}" already exists') from e
        session.refresh(template)
        return template

    def create(
        self,
        name: str,
        slug: str,
        configuration: Dict[str, Any],
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> EmailTemplate:
        template = EmailTemplate(
            name=name,
            slug=slug,
            description=description or None,
            configuration=configuration,
            created_by=created_by,
        )
        with self.session() as session:
            template = self._commit(session, template)
        logger.info("Created template", slug=slug, template_id=template.id)
        return template

    def update(self, slug: str, updates: Dict[str, Any]) -> Optional[EmailTemplate]:
        """Apply a partial update to an active template; ``None`` if there is none."""
        changes = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
        with self.session() as session:
            template = self._active_by_slug(session, slug)
            if template is None:
                return None
            if not changes:
                return template

            for key, value in changes.items():
                setattr(template, key, value)
            template.updated_at = utcnow()
            template = self._commit(session, template)

        logger.info("Updated template", slug=slug, fields=sorted(changes))
        return template

    def soft_delete(self, slug: str) -> bool:
        with self.session() as session:
            template = self._active_by_slug(session, slug)
            if template is None:
                return False
            template.is_active = False
            template.updated_at = utcnow()
            session.add(template)
            session.commit()
        logger.info("Deleted template", slug=slug)
        return True
