"""Shared schemas for template_customizer."""

from template_customizer.schemas.manifest import (
    ImportGroup,
    LabelDefinition,
    ManifestFetchResult,
    PartRef,
    TemplateManifest,
)
from template_customizer.schemas.results import (
    FilteredPart,
    FilterResult,
    LinkTarget,
    LoadFilteredPartsResult,
    Part,
    Readme,
    SectionTreeItem,
    TemplateWithParts,
)
from template_customizer.schemas.sections import Section, SectionMetadata, SectionWithLocation

__all__ = [
    "FilterResult",
    "FilteredPart",
    "ImportGroup",
    "LabelDefinition",
    "LinkTarget",
    "LoadFilteredPartsResult",
    "ManifestFetchResult",
    "Part",
    "PartRef",
    "Readme",
    "Section",
    "SectionMetadata",
    "SectionTreeItem",
    "SectionWithLocation",
    "TemplateManifest",
    "TemplateWithParts",
]
