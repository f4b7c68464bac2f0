"""Line classification shared by the section parser and the reassembler."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from template_customizer.schemas import SectionMetadata

METADATA_MARKER = "\U0001f3f7"

_HEADING_RE = re.compile(r"^\s*(#{1,6}|={1,6})\s+(.*)$")
_ATTRIBUTE_RE = re.compile(r"^\s*:[^:\s][^:]*:.*$")
# Both ``//🏷{...}`` and ``<!-- 🏷{...} -->``.
_METADATA_RE = re.compile(
    r"^\s*(?://\s*|<!--\s*)" + METADATA_MARKER + r"\s*(\{.*\})\s*(?:-->)?\s*$"
)
_ANCHOR_RE = re.compile(r"^\s*\[#[^\]\s]+\]\s*$")
_SEE_ALSO_RE = re.compile(r"^\s*TIP:\s+\S")
_PREFILLED_RE = re.compile(r"^\[PRE-FILLED\]$", re.IGNORECASE)
_BLOCK_DELIMITER_RE = re.compile(r"^={4,}$")
_NEWLINE_RE = re.compile(r"\r?\n")


class LineKind(str, Enum):
    """Tagged variants a source or output line can take."""

    HEADING = "heading"
    ATTRIBUTE = "attribute"
    METADATA = "metadata"
    ANCHOR = "anchor"
    SEE_ALSO = "see_also"
    PREFILLED = "prefilled"
    DELIMITER = "delimiter"
    BLANK = "blank"
    OTHER = "other"


@dataclass(frozen=True)
class ClassifiedLine:
    """Result of classifying one line.

    ``level`` and ``title`` are only set for headings, ``payload`` only for
    metadata markers (the JSON text, not yet decoded).
    """

    kind: LineKind
    level: int = 0
    title: str = ""
    payload: str = ""


def split_lines(text: str) -> list[str]:
    """Split on LF or CRLF, keeping a trailing empty entry like ``str.split``."""
    return _NEWLINE_RE.split(text)


def classify_line(line: str) -> ClassifiedLine:
    """Classify a single line without any surrounding context."""
    stripped = line.strip()
    if not stripped:
        return ClassifiedLine(LineKind.BLANK)

    metadata_match = _METADATA_RE.match(stripped)
    if metadata_match:
        return ClassifiedLine(LineKind.METADATA, payload=metadata_match.group(1))

    heading_match = _HEADING_RE.match(line.rstrip())
    if heading_match:
        markers, title = heading_match.groups()
        return ClassifiedLine(LineKind.HEADING, level=len(markers), title=title.strip())

    if _ATTRIBUTE_RE.match(stripped):
        return ClassifiedLine(LineKind.ATTRIBUTE)
    if _ANCHOR_RE.match(stripped):
        return ClassifiedLine(LineKind.ANCHOR)
    if _SEE_ALSO_RE.match(stripped):
        return ClassifiedLine(LineKind.SEE_ALSO)
    if _PREFILLED_RE.match(stripped):
        return ClassifiedLine(LineKind.PREFILLED)
    if _BLOCK_DELIMITER_RE.match(stripped):
        return ClassifiedLine(LineKind.DELIMITER)
    return ClassifiedLine(LineKind.OTHER)


def parse_metadata(payload: str) -> SectionMetadata | None:
    """Decode a metadata JSON object.

    Returns None for malformed JSON or non-object values; invalid field
    types are dropped rather than rejected.
    """
    try:
        parsed = json.loads(payload)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    metadata = SectionMetadata(raw=parsed)

    section_id = parsed.get("id")
    if isinstance(section_id, str):
        metadata.id = section_id

    labels = parsed.get("labels")
    if isinstance(labels, list):
        metadata.labels = [label for label in labels if isinstance(label, str)]

    metadata.link_to = _as_string_list(
        parsed["link_to"] if "link_to" in parsed else parsed.get("links")
    )

    keep_content = parsed.get("keep_content")
    if isinstance(keep_content, bool):
        metadata.keep_content = keep_content

    return metadata


def _as_string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [entry for entry in value if isinstance(entry, str)]
    return []
