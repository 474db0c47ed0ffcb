"""Entrypoint for running the templates API."""

from __future__ import annotations

from typing import Optional

import structlog
import uvicorn

from email_builder.core.config import get_settings, validate_required_settings
from email_builder.core.exceptions import ConfigurationError
from email_builder.core.logging import setup_logging

from .app import build_app

logger = structlog.get_logger(__name__)


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Serve the templates API with uvicorn.

    Raises:
        ConfigurationError: If required server settings are missing
    """
    missing = validate_required_settings("server")
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}", details={"missing": missing}
        )

    settings = get_settings()
    host = host or settings.server.host
    port = port or settings.server.port
    logger.info("Starting templates API", host=host, port=port)
    uvicorn.run(build_app(settings), host=host, port=port, reload=False)


def main() -> None:
    settings = get_settings()
    setup_logging(debug=settings.debug, rich_output=settings.is_development)
    run()


if __name__ == "__main__":
    main()
