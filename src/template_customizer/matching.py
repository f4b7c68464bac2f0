"""Label matching against a requested selection."""

from __future__ import annotations

from typing import AbstractSet, Iterable

WILDCARD = "*"
NAMESPACE_SEPARATOR = "::"


def normalize_labels(labels: Iterable[str] | None) -> list[str]:
    """Trim labels and drop empty entries, preserving order."""
    return [label.strip() for label in (labels or []) if label and label.strip()]


def split_label(label: str) -> tuple[str, str | None]:
    """Split ``ns::value`` into ``("ns", "value")``; bare labels give ``(label, None)``."""
    if NAMESPACE_SEPARATOR not in label:
        return label, None
    namespace, value = label.split(NAMESPACE_SEPARATOR, 1)
    return namespace, value


def label_satisfied(label: str, selection: AbstractSet[str], *, wildcard: bool = True) -> bool:
    """Check one section label against the selection.

    With ``wildcard`` enabled, ``ns::value`` is satisfied by ``ns::*`` in the
    selection, and ``ns::*`` is satisfied by any ``ns::<value>``.
    """
    label = label.strip()
    if not label:
        return False
    if label in selection:
        return True
    if not wildcard:
        return False

    namespace, value = split_label(label)
    if not namespace or not value:
        return False
    if f"{namespace}{NAMESPACE_SEPARATOR}{WILDCARD}" in selection:
        return True
    if value == WILDCARD:
        prefix = f"{namespace}{NAMESPACE_SEPARATOR}"
        return any(candidate.startswith(prefix) for candidate in selection)
    return False


def matches_selection(
    section_labels: Iterable[str] | None,
    selection: AbstractSet[str],
    wildcard: bool = True,
) -> bool:
    """Return True when every one of the section's labels is satisfied.

    An unlabeled section never matches; callers decide separately whether
    unlabeled sections are kept.
    """
    labels = list(section_labels or [])
    if not labels:
        return False
    return all(label_satisfied(label, selection, wildcard=wildcard) for label in labels)
