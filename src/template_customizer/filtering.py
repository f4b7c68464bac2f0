"""Filter a part by labels and rebuild its template and blank-template text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from template_customizer.lines import ClassifiedLine, LineKind, classify_line, split_lines
from template_customizer.links import resolve_anchor, resolve_see_also
from template_customizer.matching import matches_selection, normalize_labels
from template_customizer.parser import count_sections, iter_sections, parse_sections
from template_customizer.schemas import FilterResult, LinkTarget, SectionWithLocation


@dataclass
class FilterOptions:
    """Options for filtering a single part.

    Attributes:
        include_labels: Labels to keep. Empty means no label filtering.
        drop_titles: Section titles to remove (case-insensitive). Never
            applied to level-1 headings.
        link_index: Section id -> target, built across every part.
        current_file: File of the part being filtered, used to choose
            between in-document and inter-document references.
        include_anchors: If True, emit ``[#id]`` above headings carrying an id.
        language: Manifest language code used to localize "See also".
        wildcard: If True, ``ns::*`` labels match any value of ``ns``.
    """

    include_labels: list[str] = field(default_factory=list)
    drop_titles: list[str] = field(default_factory=list)
    link_index: Mapping[str, LinkTarget] | None = None
    current_file: str | None = None
    include_anchors: bool = True
    language: str | None = None
    wildcard: bool = True


@dataclass
class SectionDecision:
    node: SectionWithLocation
    matches: bool
    keep: bool
    children: list["SectionDecision"] = field(default_factory=list)


def filter_content(text: str, options: FilterOptions | None = None) -> FilterResult:
    """Filter one part and render its template and blank outputs.

    Args:
        text: Raw part document.
        options: Filtering options. Uses defaults (keep everything) if None.

    Returns:
        FilterResult with both renderings and the number of kept sections.
    """
    opts = options or FilterOptions()
    include_labels = normalize_labels(opts.include_labels)
    drop_titles = _normalize_titles(opts.drop_titles)
    lines = split_lines(text)
    sections = parse_sections(text)

    if include_labels:
        decisions = build_section_decisions(sections, include_labels, wildcard=opts.wildcard)
        kept_sections = collect_kept_sections(decisions)
        keep_mask = create_keep_mask(len(lines), decisions)
    else:
        kept_sections = sections
        keep_mask = [True] * len(lines)

    if drop_titles:
        apply_drop_rules(keep_mask, sections, drop_titles)
        kept_sections = prune_dropped_sections(kept_sections, drop_titles)

    # The document title survives any filtering so that no part ends up empty.
    h1_index = find_first_level_one_heading(lines)
    if h1_index is not None:
        keep_mask[h1_index] = True

    markup_lines, prefilled_body = find_prefilled_blocks(lines)
    for index in markup_lines:
        keep_mask[index] = False

    template_lines, blank_entries = _reassemble(lines, keep_mask, sections, prefilled_body, opts)

    _remove_trailing_empty_lines(template_lines)
    _remove_trailing_empty_entries(blank_entries)

    had_trailing_newline = text.endswith("\n")
    return FilterResult(
        template_content=_finalize(template_lines, had_trailing_newline),
        blank_content=_finalize(insert_blank_lines(blank_entries), had_trailing_newline),
        kept_sections=count_sections(kept_sections),
    )


def build_section_decisions(
    sections: list[SectionWithLocation],
    include_labels: Iterable[str],
    *,
    wildcard: bool = True,
) -> list[SectionDecision]:
    """Decide per section whether it matches the selection and whether it is kept.

    Labeled sections are kept only when all their labels are satisfied.
    Unlabeled sections are always kept.
    """
    selection = frozenset(include_labels)

    def evaluate(section: SectionWithLocation) -> SectionDecision:
        labels = section.labels
        matches = matches_selection(labels, selection, wildcard) if labels else False
        return SectionDecision(
            node=section,
            matches=matches,
            keep=matches if labels else True,
            children=[evaluate(child) for child in section.children],
        )

    return [evaluate(section) for section in sections]


def collect_kept_sections(decisions: list[SectionDecision]) -> list[SectionWithLocation]:
    """Return copies of the kept sections with their children pruned."""
    result: list[SectionWithLocation] = []
    for decision in decisions:
        if not decision.keep:
            continue
        children = collect_kept_sections(decision.children)
        result.append(decision.node.model_copy(update={"children": children}))
    return result


def create_keep_mask(line_count: int, decisions: list[SectionDecision]) -> list[bool]:
    """Translate section decisions into a per-line inclusion mask.

    A kept section claims every line of its range that is not covered by one
    of its children; children are claimed (or not) by their own decision.
    """
    if line_count == 0:
        return []

    mask = [False] * line_count

    def clamp(value: int) -> int:
        return min(max(value, 0), line_count - 1)

    def mark(start: int, end: int) -> None:
        for index in range(start, end + 1):
            mask[index] = True

    def process(decision: SectionDecision) -> None:
        if not decision.keep:
            return
        # Unlabeled kept sections claim their own lines too, not only matching ones.
        section_start = clamp(decision.node.start_line)
        section_end = clamp(decision.node.end_line)
        if section_start > section_end:
            return

        cursor = section_start
        for child in sorted(decision.children, key=lambda item: item.node.start_line):
            child_start = clamp(child.node.start_line)
            child_end = clamp(child.node.end_line)
            if child_start > section_end:
                break
            if child_start > cursor:
                mark(cursor, min(child_start - 1, section_end))
            process(child)
            cursor = max(cursor, child_end + 1)
            if cursor > section_end:
                break

        if cursor <= section_end:
            mark(cursor, section_end)

    for decision in decisions:
        process(decision)
    return mask


def apply_drop_rules(
    mask: list[bool],
    sections: list[SectionWithLocation],
    drop_titles: set[str],
) -> None:
    """Clear the mask over every level >= 2 section whose title is in ``drop_titles``."""
    if not mask:
        return
    last = len(mask) - 1
    for section in sections:
        if section.level >= 2 and section.title.strip().lower() in drop_titles:
            for index in range(max(section.start_line, 0), min(section.end_line, last) + 1):
                mask[index] = False
            continue
        apply_drop_rules(mask, section.children, drop_titles)


def prune_dropped_sections(
    sections: list[SectionWithLocation], drop_titles: set[str]
) -> list[SectionWithLocation]:
    result: list[SectionWithLocation] = []
    for section in sections:
        if section.level >= 2 and section.title.strip().lower() in drop_titles:
            continue
        children = prune_dropped_sections(section.children, drop_titles)
        result.append(section.model_copy(update={"children": children}))
    return result


def find_first_level_one_heading(lines: list[str]) -> int | None:
    for index, line in enumerate(lines):
        classified = classify_line(line)
        if classified.kind is LineKind.HEADING and classified.level == 1 and classified.title:
            return index
    return None


def find_prefilled_blocks(lines: list[str]) -> tuple[set[int], set[int]]:
    """Locate ``[PRE-FILLED]`` blocks.

    Returns the markup lines (every marker plus the ``====`` delimiters of the
    block following it), stripped from both outputs, and the block body
    lines, which the blank output keeps.
    """
    markup: set[int] = set()
    body: set[int] = set()
    index = 0
    while index < len(lines):
        if classify_line(lines[index]).kind is not LineKind.PREFILLED:
            index += 1
            continue
        markup.add(index)
        opening = _next_non_blank(lines, index + 1)
        if opening is None or classify_line(lines[opening]).kind is not LineKind.DELIMITER:
            index += 1
            continue
        delimiter = lines[opening].strip()
        closing = next(
            (i for i in range(opening + 1, len(lines)) if lines[i].strip() == delimiter), None
        )
        if closing is None:
            index += 1
            continue
        markup.update((opening, closing))
        body.update(range(opening + 1, closing))
        index = closing + 1
    return markup, body


def insert_blank_lines(entries: list[tuple[LineKind, str]]) -> list[str]:
    """Normalize spacing of the blank output.

    Exactly one empty line separates attribute groups from other content,
    headings from what follows them (except header attributes), and
    "See also" paragraphs from what follows. Anchors stay glued to their
    heading. Runs of preserved body lines are left untouched.
    """
    result: list[str] = []
    for index, (kind, line) in enumerate(entries):
        result.append(line)
        if index == len(entries) - 1:
            break
        next_kind, next_line = entries[index + 1]
        if not line.strip() or not next_line.strip():
            continue
        if _needs_gap(kind, next_kind):
            result.append("")
    return result


def _needs_gap(kind: LineKind, next_kind: LineKind) -> bool:
    if kind is LineKind.ANCHOR:
        return False
    if kind in (LineKind.ATTRIBUTE, LineKind.HEADING):
        return next_kind is not LineKind.ATTRIBUTE
    if kind is LineKind.SEE_ALSO:
        return True
    return next_kind is not LineKind.OTHER


def _reassemble(
    lines: list[str],
    keep_mask: list[bool],
    sections: list[SectionWithLocation],
    prefilled_body: set[int],
    opts: FilterOptions,
) -> tuple[list[str], list[tuple[LineKind, str]]]:
    by_heading_line = {section.heading_line: section for section in iter_sections(sections)}
    keep_body = _keep_content_mask(len(lines), sections)

    template_lines: list[str] = []
    blank_entries: list[tuple[LineKind, str]] = []

    for index, line in enumerate(lines):
        if not keep_mask[index]:
            continue
        classified = classify_line(line)
        kind = classified.kind

        if kind is LineKind.METADATA:
            continue

        if kind is LineKind.HEADING and classified.title:
            section = by_heading_line.get(index)
            anchor = resolve_anchor(section) if section and opts.include_anchors else None
            see_also = (
                resolve_see_also(
                    section,
                    opts.link_index,
                    current_file=opts.current_file,
                    language=opts.language,
                )
                if section
                else None
            )
            if anchor:
                template_lines.append(anchor)
                blank_entries.append((LineKind.ANCHOR, anchor))
            template_lines.append(line)
            blank_entries.append((LineKind.HEADING, line))
            if see_also:
                template_lines.append(see_also)
                blank_entries.append((LineKind.SEE_ALSO, see_also))
                following = _next_kept_line(lines, keep_mask, index)
                if following is not None and following.kind is not LineKind.BLANK:
                    template_lines.append("")
            continue

        template_lines.append(line)
        if kind is LineKind.ATTRIBUTE:
            blank_entries.append((kind, line))
        elif kind is LineKind.ANCHOR and _anchors_heading(lines, keep_mask, index):
            blank_entries.append((kind, line))
        elif keep_body[index] or index in prefilled_body:
            blank_entries.append((LineKind.OTHER, line))

    return template_lines, blank_entries


def _keep_content_mask(line_count: int, sections: list[SectionWithLocation]) -> list[bool]:
    """Flag lines whose innermost enclosing section has ``keep_content`` set."""
    mask = [False] * line_count

    def visit(section: SectionWithLocation) -> None:
        flag = bool(section.metadata and section.metadata.keep_content)
        for index in range(max(section.start_line, 0), min(section.end_line, line_count - 1) + 1):
            mask[index] = flag
        for child in section.children:
            visit(child)

    for section in sections:
        visit(section)
    return mask


def _next_kept_line(
    lines: list[str], keep_mask: list[bool], index: int
) -> ClassifiedLine | None:
    for next_index in range(index + 1, len(lines)):
        if not keep_mask[next_index]:
            continue
        classified = classify_line(lines[next_index])
        if classified.kind is LineKind.METADATA:
            continue
        return classified
    return None


def _anchors_heading(lines: list[str], keep_mask: list[bool], index: int) -> bool:
    following = _next_kept_line(lines, keep_mask, index)
    return following is not None and following.kind is LineKind.HEADING and bool(following.title)


def _next_non_blank(lines: list[str], start: int) -> int | None:
    for index in range(start, len(lines)):
        if lines[index].strip():
            return index
    return None


def _normalize_titles(titles: Iterable[str] | None) -> set[str]:
    return {title.strip().lower() for title in (titles or []) if title and title.strip()}


def _remove_trailing_empty_lines(lines: list[str]) -> None:
    while lines and not lines[-1].strip():
        lines.pop()


def _remove_trailing_empty_entries(entries: list[tuple[LineKind, str]]) -> None:
    while entries and not entries[-1][1].strip():
        entries.pop()


def _finalize(lines: list[str], had_trailing_newline: bool) -> str:
    if not lines:
        return ""
    content = "\n".join(lines)
    if had_trailing_newline:
        content += "\n"
    return content
