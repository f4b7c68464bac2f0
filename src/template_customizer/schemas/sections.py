"""Section tree models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SectionMetadata(BaseModel):
    """Inline metadata attached to a heading.

    ``raw`` keeps the decoded JSON object untouched so that keys unknown to
    this version survive a round trip.
    """

    id: str | None = None
    labels: list[str] = Field(default_factory=list)
    link_to: list[str] = Field(default_factory=list)
    keep_content: bool = False
    raw: dict[str, Any] = Field(default_factory=dict)


class Section(BaseModel):
    """A hierarchical section node."""

    title: str
    level: int = Field(..., ge=1, le=6)
    metadata: SectionMetadata | None = None
    children: list["Section"] = Field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return self.metadata.labels if self.metadata else []

    @property
    def section_id(self) -> str | None:
        if self.metadata and self.metadata.id:
            return self.metadata.id.strip() or None
        return None


class SectionWithLocation(Section):
    """Section node carrying its 0-based source line range.

    ``start_line`` points at the metadata marker when one precedes the
    heading, ``heading_line`` always points at the heading itself, and
    ``end_line`` is the last line of the subtree (inclusive).
    """

    start_line: int
    heading_line: int
    end_line: int
    children: list["SectionWithLocation"] = Field(default_factory=list)
