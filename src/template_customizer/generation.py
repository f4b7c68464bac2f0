"""Generation pipeline: base template -> filtered template and blank-template parts."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import httpx

from template_customizer.drop_rules import DropRule, to_drop_map
from template_customizer.exceptions import UnknownLabelError
from template_customizer.fetch import fetch_template_and_parts
from template_customizer.filtering import FilterOptions, filter_content
from template_customizer.labels import (
    build_available_sections,
    build_selectable_labels,
    find_unknown_labels,
)
from template_customizer.links import DEFAULT_LANGUAGE, build_link_index
from template_customizer.matching import normalize_labels
from template_customizer.schemas import FilteredPart, LoadFilteredPartsResult, TemplateWithParts

logger = logging.getLogger(__name__)


@dataclass
class GenerationOptions:
    """Options for generating a customized template.

    Attributes:
        labels: Labels to include. Empty (or every selectable label) keeps
            the full template.
        drop_rules: Sections to remove, per part file.
        include_anchors: If True, emit ``[#id]`` anchors above headings.
        concurrency: Maximum simultaneous part downloads.
    """

    labels: list[str] = field(default_factory=list)
    drop_rules: list[DropRule] = field(default_factory=list)
    include_anchors: bool = True
    concurrency: int | None = None


def build_filtered_parts(
    result: TemplateWithParts,
    labels: Iterable[str],
    drop_by_part: Mapping[str, list[str]] | None = None,
    *,
    include_anchors: bool = True,
) -> list[FilteredPart]:
    """Filter every part of a fetched template.

    Parts come back in manifest order; parts whose two outputs are both
    blank are omitted.

    Raises:
        UnknownLabelError: If a requested label is not defined anywhere,
            before any part is filtered.
    """
    labels = normalize_labels(labels)
    unknown = find_unknown_labels(labels, result)
    if unknown:
        raise UnknownLabelError(unknown)

    language = result.metadata.data.language or DEFAULT_LANGUAGE
    order = {part.file: index for index, part in enumerate(result.metadata.data.parts)}
    ordered_parts = sorted(result.parts, key=lambda part: order.get(part.file, sys.maxsize))
    link_index = build_link_index(result.parts)

    filtered_parts: list[FilteredPart] = []
    for part in ordered_parts:
        if not part.content:
            continue
        filtered = filter_content(
            part.content,
            FilterOptions(
                include_labels=labels,
                drop_titles=list((drop_by_part or {}).get(part.file, [])),
                link_index=link_index,
                current_file=part.file,
                include_anchors=include_anchors,
                language=language,
            ),
        )
        if not filtered.template_content.strip() and not filtered.blank_content.strip():
            logger.debug("Skipping part %s: nothing left after filtering", part.file)
            continue
        filtered_parts.append(
            FilteredPart(
                name=part.name,
                file=part.file,
                template_content=filtered.template_content,
                blank_content=filtered.blank_content,
            )
        )
    return filtered_parts


def effective_labels(requested: Iterable[str], selectable: list[str]) -> list[str]:
    """Collapse "every selectable label" to an empty selection (no filtering)."""
    requested = normalize_labels(requested)
    if requested and len(requested) == len(selectable) and set(selectable) <= set(requested):
        return []
    return requested


def summarize_template(
    result: TemplateWithParts,
    options: GenerationOptions | None = None,
) -> LoadFilteredPartsResult:
    """Filter an already fetched template and gather archive inputs."""
    opts = options or GenerationOptions()
    manifest = result.metadata.data
    selectable = build_selectable_labels(result)
    labels = effective_labels(opts.labels, selectable)

    filtered_parts = build_filtered_parts(
        result,
        labels,
        to_drop_map(opts.drop_rules),
        include_anchors=opts.include_anchors,
    )

    return LoadFilteredPartsResult(
        filtered_parts=filtered_parts,
        readme=result.readme,
        selectable_labels=selectable,
        available_sections_by_part=build_available_sections(result),
        part_names_by_file={part.file: part.name for part in manifest.parts},
        import_groups=[group for group in manifest.files_imports if group.src_dir and group.files],
        template_import_groups=[
            group for group in manifest.files_imports_templates if group.src_dir and group.files
        ],
    )


async def load_filtered_parts(
    base_url: str,
    options: GenerationOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> LoadFilteredPartsResult:
    """Fetch a base template and filter every part.

    Args:
        base_url: Base template location (http(s) URL, file URL or directory).
        options: Generation options. Uses defaults if None.
        client: Optional shared httpx client.

    Returns:
        Filtered parts plus the README, selectable labels and import groups.
    """
    opts = options or GenerationOptions()
    result = await fetch_template_and_parts(base_url, concurrency=opts.concurrency, client=client)
    logger.debug("Fetched %d part(s) from %s", len(result.parts), base_url)
    return summarize_template(result, opts)
