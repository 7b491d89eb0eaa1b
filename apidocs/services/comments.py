# =============================================================================
# XML Comment Files — Discovery & Loading
# =============================================================================
#
# Endpoint documentation can be kept outside the code in XML files placed in
# the deployment directory. Every file matching the pattern (default *.xml)
# is loaded at startup and used to fill in operation summaries and
# descriptions that the route itself does not provide.
#
# File format:
#
#   <doc>
#     <members>
#       <member name="orders.api.list_orders">
#         <summary>List orders.</summary>
#         <remarks>Orders are returned newest first.</remarks>
#         <param name="limit">Maximum number of orders.</param>
#         <response code="404">Customer not found.</response>
#       </member>
#     </members>
#   </doc>
#
# Member names are the endpoint function's "module.qualname". A leading
# "M:" type prefix is accepted and ignored.
#
# Listing the directory is the only filesystem access. A missing or
# unreadable directory raises FilesystemError and aborts startup.
# =============================================================================

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from apidocs.exceptions import CommentFileError, FilesystemError

logger = logging.getLogger(__name__)


@dataclass
class MemberComments:
    """Documentation text for one endpoint function."""

    summary: str | None = None
    remarks: str | None = None
    params: dict[str, str] = field(default_factory=dict)
    responses: dict[str, str] = field(default_factory=dict)


def discover_comment_files(base_path: Path, pattern: str = "*.xml") -> list[Path]:
    """
    List the comment files directly inside `base_path`, sorted by name.

    Raises:
        FilesystemError: the directory is missing or cannot be read.
    """
    try:
        files = sorted(
            entry for entry in base_path.iterdir()
            if entry.is_file() and entry.match(pattern)
        )
    except OSError as e:
        logger.error("Cannot list comment files in %s: %s", base_path, e)
        raise FilesystemError(str(base_path), e.strerror or str(e)) from e

    logger.info("Found %d comment file(s) in %s", len(files), base_path)
    return files


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    text = " ".join("".join(element.itertext()).split())
    return text or None


def load_comment_file(path: Path) -> dict[str, MemberComments]:
    """
    Parse one comment file into {member name: MemberComments}.

    Raises:
        FilesystemError: the file cannot be read.
        CommentFileError: the file is not well-formed XML.
    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        logger.error("Malformed comment file %s: %s", path, e)
        raise CommentFileError(str(path), str(e)) from e
    except OSError as e:
        logger.error("Cannot read comment file %s: %s", path, e)
        raise FilesystemError(str(path), e.strerror or str(e)) from e

    members: dict[str, MemberComments] = {}
    for member in root.iter("member"):
        name = member.get("name", "")
        if name.startswith("M:"):
            name = name[2:]
        if not name:
            continue

        comments = MemberComments(
            summary=_text(member.find("summary")),
            remarks=_text(member.find("remarks")),
        )
        for param in member.findall("param"):
            text = _text(param)
            if param.get("name") and text:
                comments.params[param.get("name")] = text
        for response in member.findall("response"):
            text = _text(response)
            if response.get("code") and text:
                comments.responses[response.get("code")] = text
        members[name] = comments

    logger.debug("Loaded %d member comment(s) from %s", len(members), path)
    return members


def load_comment_files(paths: list[Path]) -> dict[str, MemberComments]:
    """Merge several comment files. Later files win on duplicate members."""
    merged: dict[str, MemberComments] = {}
    for path in paths:
        merged.update(load_comment_file(path))
    return merged
