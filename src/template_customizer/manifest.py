"""Parse ``base-template-manifest.yaml`` into a TemplateManifest."""

from __future__ import annotations

from typing import Any

import yaml

from template_customizer.exceptions import ManifestError
from template_customizer.schemas import ImportGroup, LabelDefinition, PartRef, TemplateManifest

_BLANK_IMPORTS_KEY = "files_imported_into_blank_templates"
_TEMPLATE_IMPORTS_KEY = "files_imported_into_templates"


def parse_manifest(raw: str, *, source: str = "base-template-manifest.yaml") -> TemplateManifest:
    """Parse and normalize manifest YAML.

    Args:
        raw: YAML text.
        source: Location used in error messages.

    Returns:
        The normalized manifest.

    Raises:
        ManifestError: If the text is empty, not valid YAML, not a mapping,
            or declares malformed import groups.
    """
    if not raw.strip():
        raise ManifestError(f"Empty base-template-manifest.yaml at {source}.")
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ManifestError(f"YAML parse error: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ManifestError(f"Invalid base-template-manifest.yaml at {source}: expected a mapping.")

    language = parsed.get("language")
    return TemplateManifest(
        author=_optional_str(parsed.get("author")),
        license=_optional_str(parsed.get("license")),
        language=language.strip() if isinstance(language, str) and language.strip() else None,
        parts=_parse_parts(parsed.get("parts")),
        labels=_parse_label_definitions(parsed.get("multi_values_labels")),
        files_imports=_parse_import_groups(parsed.get(_BLANK_IMPORTS_KEY), _BLANK_IMPORTS_KEY),
        files_imports_templates=_parse_import_groups(
            parsed.get(_TEMPLATE_IMPORTS_KEY), _TEMPLATE_IMPORTS_KEY
        ),
    )


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def _parse_parts(raw_parts: Any) -> list[PartRef]:
    if not isinstance(raw_parts, list):
        return []
    parts: list[PartRef] = []
    for index, entry in enumerate(raw_parts):
        if not isinstance(entry, dict) or not isinstance(entry.get("file"), str):
            raise ManifestError(f"Invalid part at index {index}: expected an object with name and file")
        file = entry["file"].strip()
        name = entry.get("name")
        parts.append(PartRef(name=str(name).strip() if name else file, file=file))
    return parts


def _parse_label_definitions(raw_labels: Any) -> list[LabelDefinition]:
    """Accept ``{name: level, available_values: [...]}`` and ``{level: [...]}``."""
    if not isinstance(raw_labels, list):
        return []

    definitions: list[LabelDefinition] = []
    for entry in raw_labels:
        if not isinstance(entry, dict):
            continue
        name: str | None = None
        values: Any = None
        if isinstance(entry.get("name"), str):
            name = entry["name"].strip()
            values = entry.get("available_values")
        elif len(entry) == 1:
            key, values = next(iter(entry.items()))
            if isinstance(values, list):
                name = str(key).strip()
        if not name:
            continue
        definitions.append(LabelDefinition(name=name, available_values=_string_values(values)))
    return definitions


def _parse_import_groups(raw_imports: Any, key: str) -> list[ImportGroup]:
    if raw_imports is None:
        return []
    if isinstance(raw_imports, list):
        if raw_imports and all(isinstance(value, str) for value in raw_imports):
            raise ManifestError(
                f"{key} must include src_dir; use object entries with {{ src_dir, files }}"
            )
        return [_parse_import_group(entry, key, index) for index, entry in enumerate(raw_imports)]
    if isinstance(raw_imports, dict):
        return [_parse_import_group(raw_imports, key, None)]
    raise ManifestError(f"Invalid {key}: expected object or array of objects")


def _parse_import_group(entry: Any, key: str, index: int | None) -> ImportGroup:
    where = "" if index is None else f" at index {index}"
    if not isinstance(entry, dict):
        raise ManifestError(f"Invalid {key}{where}: expected an object with src_dir and files")

    src_dir = entry.get("src_dir")
    files = entry.get("files")
    dest_dir = entry.get("dest_dir")
    if not isinstance(src_dir, str) or not src_dir.strip():
        raise ManifestError(f"{key}{where}: src_dir is mandatory and must be a non-empty string")
    if not isinstance(files, list):
        raise ManifestError(f"{key}{where}: files must be an array of strings")

    return ImportGroup(
        src_dir=src_dir.strip().strip("/"),
        dest_dir=dest_dir.strip() if isinstance(dest_dir, str) else "",
        files=_string_values(files),
    )


def _string_values(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]
