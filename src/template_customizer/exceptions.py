"""Custom exceptions for template_customizer."""

from __future__ import annotations

from dataclasses import dataclass


class TemplateCustomizerError(Exception):
    """Base exception for template_customizer operations."""


class FetchError(TemplateCustomizerError):
    """Error during content fetching."""


class ResourceNotFoundError(FetchError):
    """Requested resource does not exist."""


class ManifestNotFoundError(ResourceNotFoundError):
    """The base template manifest could not be found."""

    def __init__(self, attempted_url: str, status: int | None = None) -> None:
        if status:
            message = f"base-template-manifest.yaml not found at {attempted_url} (HTTP {status})."
        else:
            message = f"base-template-manifest.yaml not found at {attempted_url}."
        super().__init__(message)
        self.attempted_url = attempted_url
        self.status = status


class ReadmeNotFoundError(ResourceNotFoundError):
    """The base template has no README."""


@dataclass
class PartFetchFailure:
    """One part that could not be fetched."""

    name: str
    file: str
    url: str
    message: str
    status: int | None = None


class PartFetchError(FetchError):
    """One or more part files failed to download."""

    def __init__(self, failures: list[PartFetchFailure]) -> None:
        details = ", ".join(
            f"{f.name} ({f.file}) [{f.status or '?'}]" + (f": {f.message}" if f.message else "")
            for f in failures
        )
        super().__init__(f"Failed to fetch {len(failures)} part file(s): {details}")
        self.failures = failures


class ManifestError(TemplateCustomizerError):
    """The manifest is empty or malformed."""


class DuplicateSectionIdError(TemplateCustomizerError):
    """The same section id appears more than once in the base template."""

    def __init__(self, duplicates: dict[str, list[tuple[str, str]]]) -> None:
        details = " | ".join(
            f"id '{section_id}' used in "
            + "; ".join(f"{file} -> {title}" for file, title in locations)
            for section_id, locations in duplicates.items()
        )
        super().__init__(f"Duplicate section id(s) detected: {details}")
        self.duplicates = duplicates


class UnknownLabelError(TemplateCustomizerError):
    """A requested label is not defined anywhere in the base template."""

    def __init__(self, labels: list[str]) -> None:
        super().__init__(f"Unknown label(s): {', '.join(labels)}")
        self.labels = labels


class EmptyTemplateError(TemplateCustomizerError):
    """No part is left after applying filters."""
