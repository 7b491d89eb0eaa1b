# =============================================================================
# Documentation Models — Pydantic V2 Schemas
# =============================================================================
#
# DocumentInfo is the "info" block of one generated OpenAPI document.
# A single base instance is supplied at startup; each API version gets a
# copy with its own version string (see services/descriptors.py).
#
# DocumentationEndpoint is one entry of the Swagger UI version selector.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class DocumentInfo(BaseModel):
    """Title, version and description of one API document."""

    title: str
    version: str = ""
    description: str | None = None
    terms_of_service: str | None = Field(
        default=None,
        description="URL of the terms of service for the API",
    )
    contact: dict[str, str] | None = Field(
        default=None,
        description="OpenAPI contact object (name, url, email)",
    )
    license: dict[str, str] | None = Field(
        default=None,
        description="OpenAPI license object (name, url)",
    )

    model_config = ConfigDict(frozen=True)


class DocumentationEndpoint(BaseModel):
    """
    One document link shown in the Swagger UI selector.

    Swagger UI expects the label under the key "name"; use to_swagger_ui()
    when handing the link to the UI.
    """

    url: str
    label: str

    def to_swagger_ui(self) -> dict[str, str]:
        return {"url": self.url, "name": self.label}


class HealthResponse(BaseModel):
    """Response for GET /health — confirms the API is running."""

    status: str = "ok"
    version: str
    service: str
