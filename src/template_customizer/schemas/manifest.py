"""Base template manifest models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PartRef(BaseModel):
    """A part declared in the manifest."""

    name: str
    file: str


class LabelDefinition(BaseModel):
    """A multi-value label such as ``level`` with ``basic``/``advanced``."""

    name: str
    available_values: list[str] = Field(default_factory=list)


class ImportGroup(BaseModel):
    """Extra files copied verbatim into the generated archive.

    Attributes:
        src_dir: Directory relative to the base template root.
        dest_dir: Destination folder inside the target tree ("" is its root).
        files: File paths relative to ``src_dir``.
    """

    src_dir: str
    dest_dir: str = ""
    files: list[str] = Field(default_factory=list)


class TemplateManifest(BaseModel):
    """Normalized ``base-template-manifest.yaml`` content."""

    author: str | None = None
    license: str | None = None
    language: str | None = None
    parts: list[PartRef] = Field(default_factory=list)
    labels: list[LabelDefinition] = Field(default_factory=list)
    files_imports: list[ImportGroup] = Field(default_factory=list)
    files_imports_templates: list[ImportGroup] = Field(default_factory=list)


class ManifestFetchResult(BaseModel):
    """Manifest location, raw YAML and parsed data."""

    url: str
    raw: str
    data: TemplateManifest
