# =============================================================================
# Document Descriptor Builder
# =============================================================================
#
# Derives the info block of one versioned document from the base template.
# The template is never modified, so rebuilding after a configuration
# reload yields identical results.
# =============================================================================

from __future__ import annotations

from apidocs.models.documents import DocumentInfo
from apidocs.services.versioning import ApiVersionDescriptor

DEPRECATION_NOTICE = " This API version has been deprecated."


def build_document_info(
    info: DocumentInfo,
    description: ApiVersionDescriptor,
) -> DocumentInfo:
    """
    Return a copy of `info` for one API version.

    The version string is replaced with the descriptor's version, and the
    deprecation notice is appended to the description of deprecated
    versions.
    """
    update: dict[str, str] = {"version": str(description.api_version)}
    if description.is_deprecated:
        update["description"] = (info.description or "") + DEPRECATION_NOTICE
    return info.model_copy(update=update)
