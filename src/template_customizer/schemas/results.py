"""Filtering and generation output models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from template_customizer.schemas.manifest import ImportGroup, ManifestFetchResult
from template_customizer.schemas.sections import SectionWithLocation


class LinkTarget(BaseModel):
    """Where a section id points to."""

    title: str
    file: str | None = None


class FilterResult(BaseModel):
    """Output of filtering a single part."""

    template_content: str
    blank_content: str
    kept_sections: int


class Part(BaseModel):
    """A fetched part document with its parsed sections."""

    name: str
    file: str
    url: str | None = None
    content: str = ""
    sections: list[SectionWithLocation] = Field(default_factory=list)


class Readme(BaseModel):
    """README shipped at the root of the base template."""

    file: str
    content: str


class TemplateWithParts(BaseModel):
    """Manifest plus every fetched part."""

    metadata: ManifestFetchResult
    parts: list[Part] = Field(default_factory=list)
    readme: Readme | None = None


class FilteredPart(BaseModel):
    """Per-part generation output."""

    name: str
    file: str
    template_content: str
    blank_content: str


class SectionTreeItem(BaseModel):
    """Flattened entry of a part's section tree."""

    title: str
    level: int


class LoadFilteredPartsResult(BaseModel):
    """Everything needed to assemble the customized archive."""

    filtered_parts: list[FilteredPart] = Field(default_factory=list)
    readme: Readme | None = None
    selectable_labels: list[str] = Field(default_factory=list)
    available_sections_by_part: dict[str, list[str]] = Field(default_factory=dict)
    part_names_by_file: dict[str, str] = Field(default_factory=dict)
    import_groups: list[ImportGroup] = Field(default_factory=list)
    template_import_groups: list[ImportGroup] = Field(default_factory=list)
