"""Label and section aggregation across a whole base template."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable

from template_customizer.matching import NAMESPACE_SEPARATOR, WILDCARD, split_label
from template_customizer.parser import iter_sections
from template_customizer.schemas import LabelDefinition, SectionTreeItem, TemplateWithParts


def build_known_label_set(result: TemplateWithParts) -> set[str]:
    """Collect every label used in section metadata, across all parts."""
    known: set[str] = set()
    for part in result.parts:
        for section in iter_sections(part.sections):
            for label in section.labels:
                trimmed = label.strip()
                if trimmed:
                    known.add(trimmed)
    return known


def defined_label_values(definitions: Iterable[LabelDefinition] | None) -> list[str]:
    """Expand manifest label definitions into ``name::value`` labels.

    Definitions without values contribute their bare name.
    """
    labels: list[str] = []
    for definition in definitions or []:
        name = definition.name.strip()
        if not name:
            continue
        values = [value.strip() for value in definition.available_values if value.strip()]
        if not values:
            labels.append(name)
            continue
        for value in values:
            label = f"{name}{NAMESPACE_SEPARATOR}{value}"
            if label not in labels:
                labels.append(label)
    return labels


def build_label_order(
    definitions: Iterable[LabelDefinition] | None,
) -> tuple[dict[str, int], set[str]]:
    """Return the manifest priority of each ``name::value`` and the multi-value names."""
    order: dict[str, int] = {}
    multi_value_names: set[str] = set()
    priority = 0
    for definition in definitions or []:
        name = definition.name.strip()
        if not name or not definition.available_values:
            continue
        multi_value_names.add(name)
        for value in definition.available_values:
            trimmed = value.strip()
            if not trimmed:
                continue
            key = f"{name}{NAMESPACE_SEPARATOR}{trimmed}"
            if key not in order:
                order[key] = priority
                priority += 1
    return order, multi_value_names


def compare_labels(a: str, b: str, order: dict[str, int]) -> int:
    """Order labels by namespace, then manifest priority, then value."""
    a_group, a_value = split_label(a)
    b_group, b_value = split_label(b)

    if a_group != b_group:
        return _cmp(a_group, b_group)

    a_priority = order.get(a) if a_value is not None else None
    b_priority = order.get(b) if b_value is not None else None
    if a_priority is not None or b_priority is not None:
        if a_priority is None:
            return 1
        if b_priority is None:
            return -1
        if a_priority != b_priority:
            return a_priority - b_priority

    if a_value is not None and b_value is not None:
        return _cmp(a_value, b_value)
    if a_value is not None:
        return 1
    if b_value is not None:
        return -1
    return _cmp(a, b)


def sort_labels(labels: Iterable[str], order: dict[str, int]) -> list[str]:
    return sorted(labels, key=cmp_to_key(lambda a, b: compare_labels(a, b, order)))


def compute_multi_value_names_from_known(known: Iterable[str]) -> set[str]:
    names: set[str] = set()
    for label in known:
        namespace, value = split_label(label)
        if value is not None and namespace:
            names.add(namespace)
    return names


def build_selectable_labels(result: TemplateWithParts, known: set[str] | None = None) -> list[str]:
    """Labels a user can pick: discovered bare labels plus manifest-defined values.

    Wildcard values (``ns::*``) are never offered.
    """
    known = known if known is not None else build_known_label_set(result)
    definitions = result.metadata.data.labels
    order, multi_value_names = build_label_order(definitions)

    discovered = {
        label
        for label in known
        if NAMESPACE_SEPARATOR not in label and label not in multi_value_names
    }
    union = discovered | set(defined_label_values(definitions))
    selectable = [
        label for label in union if not label.endswith(f"{NAMESPACE_SEPARATOR}{WILDCARD}")
    ]
    return sort_labels(selectable, order)


def find_unknown_labels(requested: Iterable[str], result: TemplateWithParts) -> list[str]:
    """Return requested labels that neither sections nor the manifest define."""
    requested = list(requested)
    if not requested:
        return []

    known = build_known_label_set(result)
    for definition in result.metadata.data.labels:
        known.add(definition.name)
        for value in definition.available_values:
            known.add(f"{definition.name}{NAMESPACE_SEPARATOR}{value}")

    return [label for label in requested if label not in known]


def build_available_sections(result: TemplateWithParts) -> dict[str, list[str]]:
    """Sorted, de-duplicated section titles per part file."""
    available: dict[str, list[str]] = {}
    for part in result.parts:
        titles = {section.title for section in iter_sections(part.sections)}
        available[part.file] = sorted(titles, key=str.casefold)
    return available


def build_available_sections_tree_list(
    result: TemplateWithParts,
) -> dict[str, list[SectionTreeItem]]:
    """Section titles and levels per part file, in document order."""
    return {
        part.file: [
            SectionTreeItem(title=section.title, level=section.level)
            for section in iter_sections(part.sections)
        ]
        for part in result.parts
    }


def _cmp(a: str, b: str) -> int:
    a_key, b_key = a.casefold(), b.casefold()
    if a_key != b_key:
        return -1 if a_key < b_key else 1
    return (a > b) - (a < b)
