# =============================================================================
# Operation & Schema Filters
# =============================================================================
#
# Filters run while a versioned document is generated (services/generator.py):
#
#   OperationFilter(operation: dict, context: OperationFilterContext) -> None
#   SchemaFilter(schema: dict, context: SchemaFilterContext) -> None
#
# Both mutate the OpenAPI dict in place. Filters only fill gaps: an entry
# that the route or the framework already defined is never replaced.
#
# Operation filters shipped here:
#   - response_headers_filter(): documents response headers (the correlation
#     header plus headers declared with @response_header)
#   - auth_responses_filter: documents 401/403 on secured operations
#   - xml_comments_filter(): fills summaries and descriptions from XML files
#
# Schema filters:
#   - validation_rules_schema_filter: turns not-empty rules into "required"
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from fastapi.routing import APIRoute

from apidocs.services.comments import MemberComments

logger = logging.getLogger(__name__)

RESPONSE_HEADERS_ATTR = "__response_headers__"

# Response descriptions FastAPI generates when the route gives none.
_DEFAULT_RESPONSE_DESCRIPTIONS = {"Successful Response", "Validation Error"}

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class OperationFilterContext:
    """What a filter knows about the operation it is augmenting."""

    route: APIRoute
    method: str
    group_name: str
    security: list[dict[str, Any]] = field(default_factory=list)

    @property
    def requires_authorization(self) -> bool:
        return bool(self.security)


@dataclass
class SchemaFilterContext:
    name: str
    group_name: str


OperationFilter = Callable[[dict[str, Any], OperationFilterContext], None]
SchemaFilter = Callable[[dict[str, Any], SchemaFilterContext], None]


# ---------------------------------------------------------------------------
# Response headers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResponseHeader:
    """
    A header documented on responses.

    status_code=None documents the header on every response of the
    operation; otherwise only on that status code.
    """

    name: str
    description: str = ""
    type: str = "string"
    format: str | None = None
    status_code: int | None = None

    def to_openapi(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type}
        if self.format:
            schema["format"] = self.format
        header: dict[str, Any] = {"schema": schema}
        if self.description:
            header["description"] = self.description
        return header

    def applies_to(self, status_code: str) -> bool:
        return self.status_code is None or str(self.status_code) == status_code


def response_header(
    name: str,
    *,
    status_code: int | None = None,
    description: str = "",
    type: str = "string",
    format: str | None = None,
) -> Callable[[F], F]:
    """
    Declare a response header on an endpoint function.

        @router.get("/orders")
        @response_header("X-Total-Count", status_code=200, type="integer")
        async def list_orders(): ...

    Decorators are applied bottom-up, so headers are kept in the order
    they are written.
    """
    header = ResponseHeader(
        name=name,
        description=description,
        type=type,
        format=format,
        status_code=status_code,
    )

    def decorator(func: F) -> F:
        declared = getattr(func, RESPONSE_HEADERS_ATTR, ())
        setattr(func, RESPONSE_HEADERS_ATTR, (header, *declared))
        return func

    return decorator


def response_headers_filter(
    defaults: Sequence[ResponseHeader] = (),
) -> OperationFilter:
    """
    Build a filter that adds `defaults` and the endpoint's declared headers
    to every response already present on the operation.
    """
    defaults = tuple(defaults)

    def add_response_headers(
        operation: dict[str, Any],
        context: OperationFilterContext,
    ) -> None:
        declared = getattr(context.route.endpoint, RESPONSE_HEADERS_ATTR, ())
        headers = (*defaults, *declared)
        if not headers:
            return

        for status_code, response in operation.get("responses", {}).items():
            for header in headers:
                if not header.applies_to(status_code):
                    continue
                response.setdefault("headers", {}).setdefault(
                    header.name, header.to_openapi(),
                )

    return add_response_headers


# ---------------------------------------------------------------------------
# Auth responses
# ---------------------------------------------------------------------------


def auth_responses_filter(
    operation: dict[str, Any],
    context: OperationFilterContext,
) -> None:
    """Document 401 and 403 on operations that require authorization."""
    if not context.requires_authorization:
        return

    responses = operation.setdefault("responses", {})
    responses.setdefault("401", {"description": "Unauthorized"})
    responses.setdefault("403", {"description": "Forbidden"})


# ---------------------------------------------------------------------------
# XML comments
# ---------------------------------------------------------------------------


def member_name(route: APIRoute) -> str:
    """The comment-file key of a route: "module.qualname" of its endpoint."""
    endpoint = route.endpoint
    return f"{endpoint.__module__}.{endpoint.__qualname__}"


def xml_comments_filter(comments: dict[str, MemberComments]) -> OperationFilter:
    """
    Build a filter that fills operation text from loaded comment files.

    Only text the route did not set explicitly is filled: the summary when
    the route has no summary, the description when the endpoint has no
    docstring, and parameter/response descriptions that are missing or
    FastAPI defaults.
    """

    def apply_xml_comments(
        operation: dict[str, Any],
        context: OperationFilterContext,
    ) -> None:
        member = comments.get(member_name(context.route))
        if member is None:
            return

        if member.summary and context.route.summary is None:
            operation["summary"] = member.summary
        if member.remarks and not operation.get("description"):
            operation["description"] = member.remarks

        for parameter in operation.get("parameters", []):
            text = member.params.get(parameter.get("name"))
            if text and not parameter.get("description"):
                parameter["description"] = text

        responses = operation.setdefault("responses", {})
        for status_code, text in member.responses.items():
            response = responses.setdefault(status_code, {"description": text})
            if response.get("description") in _DEFAULT_RESPONSE_DESCRIPTIONS:
                response["description"] = text

    return apply_xml_comments


# ---------------------------------------------------------------------------
# Validation rules
# ---------------------------------------------------------------------------


def _has_not_empty_rule(prop: dict[str, Any]) -> bool:
    return prop.get("minLength", 0) >= 1 or prop.get("minItems", 0) >= 1


def validation_rules_schema_filter(
    schema: dict[str, Any],
    context: SchemaFilterContext,
) -> None:
    """Mark properties with a not-empty rule as required."""
    properties = schema.get("properties")
    if not properties:
        return

    required = list(schema.get("required", []))
    added = [
        name for name, prop in properties.items()
        if name not in required and _has_not_empty_rule(prop)
    ]
    if added:
        schema["required"] = required + added
        logger.debug("Schema %s: marked %s as required", context.name, added)
