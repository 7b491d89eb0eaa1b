# =============================================================================
# API Version Discovery
# =============================================================================
#
# Versions are read from the route paths: the first path segment shaped like
# "v1", "v1.1" or "v2beta" names the version group. Routes without such a
# segment are version-neutral and appear in every document.
#
#   /v1/orders          → group "v1",     version "1.0"
#   /api/v2beta/orders  → group "v2beta", version "2.0-beta"
#   /health             → version-neutral
#
# A version is deprecated when it is listed explicitly, or when every
# documented route in its group is declared with deprecated=True (e.g.
# APIRouter(prefix="/v1", deprecated=True)).
#
# Providers are re-enumerable: RouteVersionProvider reads the live route
# list each time, so routers included after the provider was created are
# still discovered.
# =============================================================================

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from fastapi import FastAPI
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute

from apidocs.exceptions import MissingCollaboratorError

logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:-?(?P<status>[A-Za-z][A-Za-z0-9]*))?$"
)
_SEGMENT_PATTERN = re.compile(
    r"^v\d+(?:\.\d+)?(?:-?[A-Za-z][A-Za-z0-9]*)?$"
)


@dataclass(frozen=True)
class ApiVersion:
    """A major.minor API version with an optional status such as "beta"."""

    major: int
    minor: int = 0
    status: str | None = None

    @classmethod
    def parse(cls, text: str) -> ApiVersion:
        """Parse "1", "1.1", "v2beta" or "2.0-beta". Raises ValueError."""
        match = _VERSION_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid API version: {text!r}")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"] or 0),
            status=match["status"],
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}"
        if self.status:
            text += f"-{self.status}"
        return text


@dataclass(frozen=True)
class ApiVersionDescriptor:
    """One discovered API version and the document group it is published in."""

    api_version: ApiVersion
    group_name: str
    is_deprecated: bool = False


class VersionProvider(Protocol):
    """Anything that can enumerate the API versions of an application."""

    @property
    def api_version_descriptions(self) -> list[ApiVersionDescriptor]: ...


def parse_route_version(path: str) -> tuple[str, ApiVersion] | None:
    """
    Return (group_name, version) for the first version segment in a path.

    Returns None for version-neutral paths.
    """
    for segment in path.strip("/").split("/"):
        if _SEGMENT_PATTERN.match(segment):
            return segment, ApiVersion.parse(segment)
    return None


class RouteVersionProvider:
    """Discovers API versions from the path segments of FastAPI routes."""

    def __init__(
        self,
        routes: Sequence[BaseRoute],
        deprecated: Iterable[str] = (),
    ) -> None:
        self._routes = routes
        self._deprecated = set(deprecated)

    @property
    def api_version_descriptions(self) -> list[ApiVersionDescriptor]:
        versions: dict[str, ApiVersion] = {}
        all_deprecated: dict[str, bool] = {}

        for route in self._routes:
            if not isinstance(route, APIRoute) or not route.include_in_schema:
                continue
            parsed = parse_route_version(route.path_format)
            if parsed is None:
                continue
            group_name, version = parsed
            versions.setdefault(group_name, version)
            all_deprecated[group_name] = (
                all_deprecated.get(group_name, True) and bool(route.deprecated)
            )

        return [
            ApiVersionDescriptor(
                api_version=version,
                group_name=group_name,
                is_deprecated=(
                    group_name in self._deprecated or all_deprecated[group_name]
                ),
            )
            for group_name, version in versions.items()
        ]


class StaticVersionProvider:
    """A fixed list of versions, for applications that declare them up front."""

    def __init__(self, descriptions: Iterable[ApiVersionDescriptor]) -> None:
        self._descriptions = list(descriptions)

    @property
    def api_version_descriptions(self) -> list[ApiVersionDescriptor]:
        return list(self._descriptions)


def add_api_versioning(
    app: FastAPI,
    deprecated: Iterable[str] = (),
) -> RouteVersionProvider:
    """Attach a route-based version provider to app.state and return it."""
    deprecated = tuple(deprecated)
    provider = RouteVersionProvider(app.router.routes, deprecated=deprecated)
    app.state.api_version_provider = provider
    logger.info("API versioning enabled (deprecated groups: %s)", sorted(set(deprecated)))
    return provider


def get_version_provider(app: FastAPI) -> VersionProvider:
    """
    Return the version provider registered with add_api_versioning().

    Raises:
        MissingCollaboratorError: versioning was never added to the app.
    """
    provider = getattr(app.state, "api_version_provider", None)
    if provider is None:
        logger.error("No API version provider registered on the application")
        raise MissingCollaboratorError("API version provider")
    return provider
