# =============================================================================
# Versioned Document Generation
# =============================================================================
#
# DocumentationOptions is the configuration built once at startup by
# configure_documentation(). It is passed explicitly to the generator and to
# the HTTP layer; nothing is kept in module globals.
#
# DocumentGenerator turns the application's routes into one OpenAPI document
# per registered group:
#   1. Select the routes of that version plus every version-neutral route
#   2. Build the document with FastAPI's get_openapi() and the group's info
#   3. Run schema filters over components.schemas
#   4. Run operation filters over every operation, in registration order
#
# Documents are built on first request and cached. Callers get a deep copy,
# so mutating a returned document never changes later responses.
# invalidate() drops the cache after the options or routes change.
# =============================================================================

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute

from apidocs.exceptions import UnknownDocumentError
from apidocs.models.documents import DocumentInfo
from apidocs.services.comments import MemberComments, load_comment_file
from apidocs.services.filters import (
    OperationFilter,
    OperationFilterContext,
    SchemaFilter,
    SchemaFilterContext,
)
from apidocs.services.versioning import parse_route_version

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_TEMPLATE = "/swagger/{group_name}/swagger.json"


@dataclass
class DocumentationOptions:
    """Everything the generator needs to know, in registration order."""

    documents: dict[str, DocumentInfo] = field(default_factory=dict)
    operation_filters: list[OperationFilter] = field(default_factory=list)
    schema_filters: list[SchemaFilter] = field(default_factory=list)
    comment_files: list[Path] = field(default_factory=list)
    comments: dict[str, MemberComments] = field(default_factory=dict)
    route_template: str = DEFAULT_ROUTE_TEMPLATE

    def swagger_doc(self, group_name: str, info: DocumentInfo) -> None:
        """Register (or replace) the document published under `group_name`."""
        self.documents[group_name] = info

    def operation_filter(self, operation_filter: OperationFilter) -> None:
        self.operation_filters.append(operation_filter)

    def schema_filter(self, schema_filter: SchemaFilter) -> None:
        self.schema_filters.append(schema_filter)

    def include_xml_comments(self, path: Path) -> None:
        """Load one more comment file into the shared comment table."""
        self.comments.update(load_comment_file(path))
        self.comment_files.append(path)

    def document_url(self, group_name: str) -> str:
        return self.route_template.format(group_name=group_name)


def _belongs_to(route: APIRoute, group_name: str) -> bool:
    parsed = parse_route_version(route.path_format)
    return parsed is None or parsed[0] == group_name


class DocumentGenerator:
    """Builds and caches the OpenAPI document of each registered group."""

    def __init__(
        self,
        routes: Sequence[BaseRoute],
        options: DocumentationOptions,
    ) -> None:
        self._routes = routes
        self.options = options
        self._cache: dict[str, dict[str, Any]] = {}

    @property
    def group_names(self) -> list[str]:
        return list(self.options.documents)

    def invalidate(self) -> None:
        self._cache.clear()

    def generate(self, group_name: str) -> dict[str, Any]:
        """
        Return a copy of the OpenAPI document for one group.

        Raises:
            UnknownDocumentError: no document is registered under that name.
        """
        if group_name in self._cache:
            return copy.deepcopy(self._cache[group_name])

        info = self.options.documents.get(group_name)
        if info is None:
            raise UnknownDocumentError(group_name)

        routes = [
            route for route in self._routes
            if isinstance(route, APIRoute) and _belongs_to(route, group_name)
        ]
        document = get_openapi(
            title=info.title,
            version=info.version,
            description=info.description,
            routes=routes,
            terms_of_service=info.terms_of_service,
            contact=info.contact,
            license_info=info.license,
        )

        self._apply_schema_filters(document, group_name)
        self._apply_operation_filters(document, routes, group_name)

        logger.info(
            "Generated API document '%s' (%d paths)",
            group_name,
            len(document.get("paths", {})),
        )
        self._cache[group_name] = document
        return copy.deepcopy(document)

    def _apply_schema_filters(self, document: dict[str, Any], group_name: str) -> None:
        if not self.options.schema_filters:
            return
        schemas = document.get("components", {}).get("schemas", {})
        for name, schema in schemas.items():
            context = SchemaFilterContext(name=name, group_name=group_name)
            for schema_filter in self.options.schema_filters:
                schema_filter(schema, context)

    def _apply_operation_filters(
        self,
        document: dict[str, Any],
        routes: list[APIRoute],
        group_name: str,
    ) -> None:
        if not self.options.operation_filters:
            return
        paths = document.get("paths", {})
        for route in routes:
            path_item = paths.get(route.path_format)
            if not path_item:
                continue
            for method in sorted(route.methods or ()):
                operation = path_item.get(method.lower())
                if operation is None:
                    continue
                context = OperationFilterContext(
                    route=route,
                    method=method,
                    group_name=group_name,
                    security=operation.get("security", []),
                )
                for operation_filter in self.options.operation_filters:
                    operation_filter(operation, context)
