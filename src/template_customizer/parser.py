"""Parse heading-delimited AsciiDoc/Markdown text into a section tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from template_customizer.lines import LineKind, classify_line, parse_metadata, split_lines
from template_customizer.schemas import SectionMetadata, SectionWithLocation


@dataclass
class _ParseState:
    roots: list[SectionWithLocation] = field(default_factory=list)
    stack: list[SectionWithLocation] = field(default_factory=list)
    pending_metadata: SectionMetadata | None = None
    pending_line: int | None = None

    def clear_pending(self) -> None:
        self.pending_metadata = None
        self.pending_line = None


def parse_sections(text: str) -> list[SectionWithLocation]:
    """Parse ``text`` into a forest of sections with source line ranges.

    A metadata marker applies to the next heading only if nothing but blank
    lines separates them. Malformed metadata is ignored.
    """
    lines = split_lines(text)
    state = _ParseState()
    for index, line in enumerate(lines):
        _consume_line(state, index, line)

    last_index = max(0, len(lines) - 1)
    while state.stack:
        node = state.stack.pop()
        node.end_line = max(node.start_line, node.end_line, last_index)
    return state.roots


def _consume_line(state: _ParseState, index: int, line: str) -> None:
    classified = classify_line(line)

    if classified.kind is LineKind.METADATA:
        state.pending_metadata = parse_metadata(classified.payload)
        state.pending_line = index
        return

    if classified.kind is not LineKind.HEADING:
        if classified.kind is not LineKind.BLANK:
            state.clear_pending()
        return

    if not classified.title:
        return

    start_line = state.pending_line if state.pending_line is not None else index
    node = SectionWithLocation(
        title=classified.title,
        level=classified.level,
        metadata=state.pending_metadata,
        start_line=start_line,
        heading_line=index,
        end_line=start_line,
    )
    state.clear_pending()

    while state.stack and state.stack[-1].level >= node.level:
        popped = state.stack.pop()
        popped.end_line = max(popped.start_line, node.start_line - 1)

    if state.stack:
        state.stack[-1].children.append(node)
    else:
        state.roots.append(node)
    state.stack.append(node)


def iter_sections(sections: list[SectionWithLocation]):
    """Yield every section of a forest depth-first, in document order."""
    for section in sections:
        yield section
        yield from iter_sections(section.children)


def count_sections(sections) -> int:
    """Count total sections in the tree."""
    total = 0
    for section in sections:
        total += 1
        total += count_sections(section.children)
    return total
