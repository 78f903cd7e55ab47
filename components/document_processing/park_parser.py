"""
Parsing of raw park text files into indexable records.

A park file follows a loose convention: the first line is the park name, the
second line carries the region marker (``State(s): ME``), and somewhere below
a ``Description:`` section holds the prose that is embedded for search.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from .models import ParsedRecord

logger = logging.getLogger(__name__)

DESCRIPTION_HEADER = "Description:"
REGION_MARKER = "State(s):"
UNKNOWN_REGION = "Unknown"

# Multi-word headers recognised as section boundaries. Other multi-word
# headers (e.g. "Camping Information:") are treated as description text.
KNOWN_SECTION_PREFIXES: Tuple[str, ...] = ("directions", "operating", "weather")


def _is_section_header(line: str) -> bool:
    """Return True if a trimmed line starts a new section."""
    if not line or not line.endswith(":"):
        return False
    if " " not in line:
        return True
    return line.lower().startswith(KNOWN_SECTION_PREFIXES)


def extract_description(content: str) -> str:
    """
    Extracts the description section of a park document.

    Falls back to the entire content when there is no ``Description:`` header
    or when the section has no body.

    Args:
        content: The raw document text.

    Returns:
        The description lines joined by single spaces, or the original content.
    """
    desc_index = content.lower().find(DESCRIPTION_HEADER.lower())
    if desc_index < 0:
        return content

    remaining = content[desc_index + len(DESCRIPTION_HEADER) :]
    description_lines = []

    for line in remaining.split("\n"):
        trimmed = line.strip()
        if description_lines and _is_section_header(trimmed):
            break
        description_lines.append(trimmed)

    description = " ".join(description_lines).strip()
    return description or content


def _parse_region(line: str) -> str:
    if REGION_MARKER not in line:
        return UNKNOWN_REGION
    return line.replace(REGION_MARKER, "").strip()


def parse_document(file_name: str, content: str) -> Optional[ParsedRecord]:
    """
    Converts a raw park file into a ParsedRecord.

    Args:
        file_name: The file name; its stem becomes the park code.
        content: The raw document text.

    Returns:
        The parsed record, or None when the document has fewer than two lines
        and must be skipped.
    """
    lines = content.split("\n")
    if len(lines) < 2:
        logger.warning(f"Skipping {file_name}: insufficient content")
        return None

    return ParsedRecord(
        code=Path(file_name).stem,
        name=lines[0].strip(),
        region=_parse_region(lines[1]),
        full_content=content,
        description=extract_description(content),
    )
