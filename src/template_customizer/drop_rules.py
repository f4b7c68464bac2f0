"""User-selected section removals, grouped per part file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class DropRule:
    """Remove the section titled ``section_title`` from ``part_file``."""

    part_file: str
    section_title: str


def parse_drop_rule(value: str) -> DropRule:
    """Parse ``part.adoc:Section Title`` into a DropRule.

    Raises:
        ValueError: If either side of the colon is empty.
    """
    part_file, sep, title = value.partition(":")
    if not sep or not part_file.strip() or not title.strip():
        raise ValueError(f"Invalid drop rule {value!r}: expected PART_FILE:SECTION_TITLE")
    return DropRule(part_file=part_file.strip(), section_title=title.strip())


def to_drop_map(rules: Iterable[DropRule]) -> dict[str, list[str]]:
    """Group trimmed titles by part file, ignoring blanks and duplicates."""
    drop_map: dict[str, list[str]] = {}
    for rule in rules:
        title = (rule.section_title or "").strip()
        if not rule.part_file or not title:
            continue
        titles = drop_map.setdefault(rule.part_file, [])
        if title not in titles:
            titles.append(title)
    return drop_map
