"""template_customizer: filter labelled base templates into customized templates."""

from template_customizer.exceptions import (
    DuplicateSectionIdError,
    EmptyTemplateError,
    FetchError,
    ManifestError,
    ManifestNotFoundError,
    PartFetchError,
    ReadmeNotFoundError,
    ResourceNotFoundError,
    TemplateCustomizerError,
    UnknownLabelError,
)
from template_customizer.filtering import FilterOptions, filter_content
from template_customizer.generation import GenerationOptions, build_filtered_parts, load_filtered_parts
from template_customizer.links import build_link_index
from template_customizer.matching import matches_selection
from template_customizer.parser import parse_sections
from template_customizer.schemas import FilteredPart, FilterResult, SectionWithLocation

__all__ = [
    "DuplicateSectionIdError",
    "EmptyTemplateError",
    "FetchError",
    "FilterOptions",
    "FilterResult",
    "FilteredPart",
    "GenerationOptions",
    "ManifestError",
    "ManifestNotFoundError",
    "PartFetchError",
    "ReadmeNotFoundError",
    "ResourceNotFoundError",
    "SectionWithLocation",
    "TemplateCustomizerError",
    "UnknownLabelError",
    "build_filtered_parts",
    "build_link_index",
    "filter_content",
    "load_filtered_parts",
    "matches_selection",
    "parse_sections",
]
