# =============================================================================
# Documentation API — Configuration & Publishing
# =============================================================================
#
# Two startup entry points, called in this order by the application factory:
#
#   configure_documentation(info, version_provider, ...) -> DocumentationOptions
#       Registers one document per API version, the operation filters, the
#       optional validation rules and the XML comment files.
#
#   publish_documentation(app, options, version_provider, ...) -> SwaggerUIOptions
#       Serves each document as JSON at /swagger/{group_name}/swagger.json
#       and serves Swagger UI with a selector listing every version.
#
# Both accept an optional `configuration` callback that receives the live
# options object last, so callers can customise further:
#
#   options = configure_documentation(
#       info, provider,
#       configuration=lambda o: o.swagger_doc("internal", internal_info),
#   )
#
# Any exception raised here is a startup failure and must abort startup.
# =============================================================================

from __future__ import annotations

import html
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse

from apidocs.config import Settings, get_settings
from apidocs.exceptions import MissingCollaboratorError, UnknownDocumentError
from apidocs.models.documents import DocumentationEndpoint, DocumentInfo
from apidocs.services.comments import discover_comment_files, load_comment_files
from apidocs.services.descriptors import build_document_info
from apidocs.services.filters import (
    ResponseHeader,
    auth_responses_filter,
    response_headers_filter,
    validation_rules_schema_filter,
    xml_comments_filter,
)
from apidocs.services.generator import DocumentationOptions, DocumentGenerator
from apidocs.services.versioning import VersionProvider

logger = logging.getLogger(__name__)

SWAGGER_UI_CDN = "https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/"


@dataclass
class SwaggerUIOptions:
    """How Swagger UI is served and which documents it lists."""

    route_prefix: str = ""
    document_title: str = "API Documentation"
    endpoints: list[DocumentationEndpoint] = field(default_factory=list)
    parameters: dict[str, Any] = field(default_factory=dict)
    swagger_js_url: str = SWAGGER_UI_CDN + "swagger-ui-bundle.js"
    swagger_preset_url: str = SWAGGER_UI_CDN + "swagger-ui-standalone-preset.js"
    swagger_css_url: str = SWAGGER_UI_CDN + "swagger-ui.css"

    def swagger_endpoint(self, url: str, label: str) -> None:
        """Add a document link. A second link to the same URL is ignored."""
        if any(endpoint.url == url for endpoint in self.endpoints):
            return
        self.endpoints.append(DocumentationEndpoint(url=url, label=label))

    @property
    def ui_path(self) -> str:
        return "/" + self.route_prefix.strip("/")


# ---------------------------------------------------------------------------
# configure_documentation — build the generator options
# ---------------------------------------------------------------------------


def configure_documentation(
    info: DocumentInfo,
    version_provider: VersionProvider | None,
    use_extra_validation_rules: bool = False,
    configuration: Callable[[DocumentationOptions], None] | None = None,
    *,
    base_path: str | Path | None = None,
    settings: Settings | None = None,
) -> DocumentationOptions:
    """
    Build the documentation options for every discovered API version.

    Comment files are discovered and loaded before any document is
    registered, so a filesystem failure leaves nothing half-configured.

    Raises:
        MissingCollaboratorError: no version provider was supplied.
        FilesystemError: the comment-file directory cannot be listed.
        CommentFileError: a comment file is not well-formed XML.
    """
    settings = settings or get_settings()

    if version_provider is None:
        logger.error("configure_documentation called without a version provider")
        raise MissingCollaboratorError("API version provider")

    comment_dir = Path(base_path or settings.docs_base_path or Path.cwd())
    comment_files = discover_comment_files(comment_dir, settings.docs_comment_pattern)
    comments = load_comment_files(comment_files)

    options = DocumentationOptions(
        comment_files=list(comment_files),
        comments=comments,
    )

    descriptions = version_provider.api_version_descriptions
    if not descriptions:
        logger.warning("No API versions discovered; no documents will be published")

    for description in descriptions:
        options.swagger_doc(
            description.group_name,
            build_document_info(info, description),
        )
        logger.info(
            "Registered API document '%s' (version %s%s)",
            description.group_name,
            description.api_version,
            ", deprecated" if description.is_deprecated else "",
        )

    if use_extra_validation_rules:
        options.schema_filter(validation_rules_schema_filter)

    default_headers = []
    if settings.correlation_header:
        default_headers.append(ResponseHeader(
            name=settings.correlation_header,
            description="Identifier correlating this response with its request.",
        ))

    options.operation_filter(xml_comments_filter(options.comments))
    options.operation_filter(auth_responses_filter)
    options.operation_filter(response_headers_filter(default_headers))

    if configuration is not None:
        configuration(options)

    return options


# ---------------------------------------------------------------------------
# publish_documentation — serve the documents and Swagger UI
# ---------------------------------------------------------------------------


def publish_documentation(
    app: FastAPI,
    options: DocumentationOptions,
    version_provider: VersionProvider | None,
    configuration: Callable[[SwaggerUIOptions], None] | None = None,
    *,
    settings: Settings | None = None,
) -> SwaggerUIOptions:
    """
    Mount the JSON document endpoint and Swagger UI on `app`.

    The generator is stored on app.state.documentation_generator so that
    documents can be invalidated or exported later.

    Raises:
        MissingCollaboratorError: no version provider was supplied.
    """
    settings = settings or get_settings()

    if version_provider is None:
        logger.error("publish_documentation called without a version provider")
        raise MissingCollaboratorError("API version provider")

    generator = DocumentGenerator(app.router.routes, options)
    app.state.documentation_generator = generator
    _mount_document_route(app, generator)

    ui_options = SwaggerUIOptions(document_title=f"{settings.docs_title} - Swagger UI")
    for description in version_provider.api_version_descriptions:
        ui_options.swagger_endpoint(
            "." + options.document_url(description.group_name),
            description.group_name.upper(),
        )
        ui_options.route_prefix = ""

    if configuration is not None:
        configuration(ui_options)

    _mount_ui_route(app, ui_options)

    for endpoint in ui_options.endpoints:
        logger.info("Published %s at %s", endpoint.label, endpoint.url)
    return ui_options


def _mount_document_route(app: FastAPI, generator: DocumentGenerator) -> None:
    def swagger_json(group_name: str) -> JSONResponse:
        try:
            return JSONResponse(generator.generate(group_name))
        except UnknownDocumentError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    app.add_api_route(
        generator.options.route_template,
        swagger_json,
        methods=["GET"],
        include_in_schema=False,
    )


def render_swagger_ui(ui_options: SwaggerUIOptions) -> str:
    """
    Render the Swagger UI page with the standalone preset.

    The version selector lives in StandaloneLayout, which ships in
    swagger-ui-standalone-preset.js rather than the bundle.
    """
    config = {
        "dom_id": "#swagger-ui",
        "urls": [endpoint.to_swagger_ui() for endpoint in ui_options.endpoints],
        "layout": "StandaloneLayout",
        "deepLinking": True,
        **ui_options.parameters,
    }
    if ui_options.endpoints:
        config.setdefault("url", ui_options.endpoints[0].url)
    config_json = json.dumps(config).replace("</", "<\\/")

    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{html.escape(ui_options.document_title)}</title>
    <link rel="stylesheet" type="text/css" href="{ui_options.swagger_css_url}" />
</head>
<body>
    <div id="swagger-ui"></div>
    <script src="{ui_options.swagger_js_url}"></script>
    <script src="{ui_options.swagger_preset_url}"></script>
    <script>
        window.onload = function() {{
            const config = {config_json};
            config.presets = [
                SwaggerUIBundle.presets.apis,
                SwaggerUIStandalonePreset
            ];
            window.ui = SwaggerUIBundle(config);
        }};
    </script>
</body>
</html>
"""


def _mount_ui_route(app: FastAPI, ui_options: SwaggerUIOptions) -> None:
    if not ui_options.endpoints:
        logger.warning("Swagger UI has no documents to list")

    page = render_swagger_ui(ui_options)

    def swagger_ui() -> HTMLResponse:
        return HTMLResponse(page)

    app.add_api_route(
        ui_options.ui_path,
        swagger_ui,
        methods=["GET"],
        include_in_schema=False,
    )
