"""FastAPI application wiring for the templates API."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.engine import Engine

from email_builder import __version__
from email_builder.core.config import Settings, get_settings
from email_builder.core.exceptions import ConflictError, NotFoundError, ValidationError
from email_builder.renderers.reader import render_to_static_markup
from email_builder.utils.reliability import HealthChecker
from email_builder.xml_data.fetcher import FeedFetcher

from .db import create_engine_for_url, init_db
from .errors import register_error_handlers
from .models import RenderRequest, TemplateCreate, TemplateListItem, TemplateResponse, TemplateUpdate
from .store import TemplateStore

logger = structlog.get_logger(__name__)

SERVICE_NAME = "email-builder-api"


def _slug_taken(slug: str) -> ConflictError:
    return ConflictError(f'Template with slug "{slug}" already exists')


def _template_missing(slug: str) -> NotFoundError:
    return NotFoundError("Template", f'slug "{slug}"')


def build_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    feed_fetcher: Optional[FeedFetcher] = None,
) -> FastAPI:
    """Create a configured FastAPI instance."""
    settings = settings or get_settings()
    engine = engine or create_engine_for_url(settings.database.url, settings.database.echo)
    init_db(engine)

    store = TemplateStore(engine)
    owns_fetcher = feed_fetcher is None
    fetcher = feed_fetcher or FeedFetcher.from_settings(settings)

    health_checker = HealthChecker()
    health_checker.register_check("database", store.ping)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Templates API starting", database=settings.database.url, environment=settings.environment)
        yield
        if owns_fetcher:
            fetcher.close()

    app = FastAPI(title="Email Builder API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.server.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app, settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.time() - start) * 1000, 1),
        )
        return response

    # Dependency factories
    def get_store() -> TemplateStore:
        return store

    def get_fetcher() -> FeedFetcher:
        return fetcher

    @app.get("/")
    def root() -> dict:
        return {
            "name": "Email Builder API",
            "version": __version__,
            "endpoints": {
                "health": "/api/health",
                "templates": "/api/templates",
            },
        }

    @app.get("/api/health")
    def health():
        results = health_checker.check_all()
        healthy = health_checker.is_healthy()
        body = {
            "status": "ok" if healthy else "error",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if health_checker.is_healthy("database") else "disconnected",
            "checks": results,
        }
        return JSONResponse(status_code=200 if healthy else 503, content=body)

    @app.get("/api/templates", response_model=List[TemplateListItem])
    def list_templates(templates: TemplateStore = Depends(get_store)) -> List[TemplateListItem]:
        return [TemplateListItem.model_validate(template) for template in templates.list_active()]

    @app.get("/api/templates/{slug}", response_model=TemplateResponse)
    def get_template(slug: str, templates: TemplateStore = Depends(get_store)) -> TemplateResponse:
        template = templates.get_by_slug(slug)
        if template is None:
            raise _template_missing(slug)
        return TemplateResponse.model_validate(template)

    @app.post("/api/templates", response_model=TemplateResponse, status_code=201)
    def create_template(payload: TemplateCreate, templates: TemplateStore = Depends(get_store)) -> TemplateResponse:
        if templates.slug_exists(payload.slug):
            raise _slug_taken(payload.slug)
        template = templates.create(
            name=payload.name,
            slug=payload.slug,
            description=payload.description,
            configuration=payload.configuration,
        )
        return TemplateResponse.model_validate(template)

    @app.put("/api/templates/{slug}", response_model=TemplateResponse)
    def update_template(
        slug: str,
        payload: TemplateUpdate,
        templates: TemplateStore = Depends(get_store),
    ) -> TemplateResponse:
        existing = templates.get_by_slug(slug)
        if existing is None:
            raise _template_missing(slug)

        changes = payload.changes()
        new_slug = changes.get("slug")
        if new_slug and new_slug != slug and templates.slug_exists(new_slug, exclude_id=existing.id):
            raise _slug_taken(new_slug)

        template = templates.update(slug, changes)
        if template is None:
            raise _template_missing(slug)
        return TemplateResponse.model_validate(template)

    @app.delete("/api/templates/{slug}", status_code=204)
    def delete_template(slug: str, templates: TemplateStore = Depends(get_store)) -> Response:
        if not templates.soft_delete(slug):
            raise _template_missing(slug)
        return Response(status_code=204)

    @app.get("/api/templates/{slug}/html", response_class=HTMLResponse)
    def render_template(
        slug: str,
        templates: TemplateStore = Depends(get_store),
        feeds: FeedFetcher = Depends(get_fetcher),
    ) -> HTMLResponse:
        template = templates.get_by_slug(slug)
        if template is None:
            raise _template_missing(slug)
        return HTMLResponse(render_to_static_markup(template.configuration, fetcher=feeds))

    @app.post("/api/render", response_class=HTMLResponse)
    def render_document(payload: RenderRequest, feeds: FeedFetcher = Depends(get_fetcher)) -> HTMLResponse:
        if payload.root_block_id not in payload.document:
            message = f'Block "{payload.root_block_id}" not found in document'
            raise ValidationError(message, errors=[{"path": "rootBlockId", "message": message, "code": "not_found"}])
        html = render_to_static_markup(payload.document, root_block_id=payload.root_block_id, fetcher=feeds)
        return HTMLResponse(html)

    return app
