"""Cross-section links: id index, anchors and localized "See also" paragraphs."""

from __future__ import annotations

from typing import Iterable, Mapping

from template_customizer.parser import iter_sections
from template_customizer.schemas import LinkTarget, Part, Section

DEFAULT_LANGUAGE = "en"

SEE_ALSO_VERBS: Mapping[str, str] = {
    "en": "See also",
    "fr": "Voir aussi",
}


def build_link_index(parts: Iterable[Part]) -> dict[str, LinkTarget]:
    """Map every section id across all parts to its title and file.

    Ids are assumed unique; uniqueness is enforced when the parts are fetched.
    """
    index: dict[str, LinkTarget] = {}
    for part in parts:
        for section in iter_sections(part.sections):
            section_id = section.section_id
            if section_id:
                index[section_id] = LinkTarget(title=section.title, file=part.file)
    return index


def see_also_verb(language: str | None) -> str:
    """Return the "See also" wording for a language code such as ``fr`` or ``fr-CA``."""
    code = (language or DEFAULT_LANGUAGE).strip().lower().replace("_", "-").split("-", 1)[0]
    return SEE_ALSO_VERBS.get(code, SEE_ALSO_VERBS[DEFAULT_LANGUAGE])


def resolve_anchor(section: Section) -> str | None:
    section_id = section.section_id
    return f"[#{section_id}]" if section_id else None


def render_reference(target_id: str, target: LinkTarget, current_file: str | None) -> str:
    """Render a same-document ``<<id,title>>`` or an inter-document ``xref``."""
    if target.file is None or current_file is None or target.file == current_file:
        return f"<<{target_id},{target.title}>>"
    return f"xref:{target.file}#{target_id}[{target.title}]"


def resolve_see_also(
    section: Section,
    link_index: Mapping[str, LinkTarget] | None,
    *,
    current_file: str | None = None,
    language: str | None = None,
) -> str | None:
    """Build the ``TIP: See also ...`` paragraph for a section, if any link resolves."""
    if not section.metadata or not section.metadata.link_to or not link_index:
        return None

    refs: list[str] = []
    for raw_id in section.metadata.link_to:
        target_id = raw_id.strip()
        target = link_index.get(target_id)
        if target is None:
            continue
        refs.append(render_reference(target_id, target, current_file))

    if not refs:
        return None
    return f"TIP: {see_also_verb(language)} {', '.join(refs)}."
