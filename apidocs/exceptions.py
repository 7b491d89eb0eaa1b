# =============================================================================
# Documentation Errors
# =============================================================================
#
# Everything except UnknownDocumentError is raised while the application is
# starting up and is meant to abort startup. UnknownDocumentError is raised
# per request and mapped to HTTP 404 by the JSON document endpoint.
# =============================================================================

from __future__ import annotations


class DocumentationError(Exception):
    """Base class for documentation configuration errors."""


class FilesystemError(DocumentationError):
    """The base path for comment files could not be listed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read documentation base path '{path}': {reason}")


class CommentFileError(DocumentationError):
    """A comment file exists but is not well-formed XML."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid XML comment file '{path}': {reason}")


class MissingCollaboratorError(DocumentationError):
    """A required collaborator was not registered before configuration ran."""

    def __init__(self, collaborator: str) -> None:
        self.collaborator = collaborator
        super().__init__(
            f"{collaborator} is not registered. "
            "Register it before configuring documentation."
        )


class UnknownDocumentError(DocumentationError):
    """No document is registered under the requested group name."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"No API document registered for '{group_name}'")
