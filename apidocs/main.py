# =============================================================================
# Application Factory
# =============================================================================
#
# create_app() wires a FastAPI application with versioned documentation:
#   1. Logging at settings.log_level
#   2. FastAPI with the built-in /docs, /redoc and /openapi.json disabled
#   3. Health router plus the caller's routers
#   4. Version discovery from the route paths
#   5. configure_documentation() → publish_documentation()
#
# Routers must be passed in (or included before documentation is published)
# so that their versions are discovered.
#
# Run locally:
#   uvicorn apidocs.main:get_application --factory --reload
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from fastapi import APIRouter, FastAPI

from apidocs.api import health
from apidocs.api.docs import (
    SwaggerUIOptions,
    configure_documentation,
    publish_documentation,
)
from apidocs.config import Settings, get_settings
from apidocs.models.documents import DocumentInfo
from apidocs.services.generator import DocumentationOptions
from apidocs.services.versioning import add_api_versioning

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    routers: Iterable[APIRouter] = (),
    configure_docs: Callable[[DocumentationOptions], None] | None = None,
    configure_ui: Callable[[SwaggerUIOptions], None] | None = None,
) -> FastAPI:
    """
    Create the FastAPI application and publish its versioned documentation.

    Raises whatever documentation configuration raises; startup must not
    continue with incomplete documentation.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    app.include_router(health.router)
    for router in routers:
        app.include_router(router)

    provider = add_api_versioning(app, deprecated=settings.deprecated_versions)

    info = DocumentInfo(
        title=settings.docs_title,
        description=settings.docs_description,
    )
    options = configure_documentation(
        info,
        provider,
        use_extra_validation_rules=settings.docs_use_validation_rules,
        configuration=configure_docs,
        settings=settings,
    )
    publish_documentation(
        app,
        options,
        provider,
        configuration=configure_ui,
        settings=settings,
    )

    logger.info(
        "%s %s started with %d API document(s)",
        settings.app_name,
        settings.app_version,
        len(options.documents),
    )
    return app


def get_application() -> FastAPI:
    """Entry point for ASGI servers."""
    return create_app()
