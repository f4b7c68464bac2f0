"""Tests for manifest parsing."""

from __future__ import annotations

import pytest

from template_customizer.exceptions import ManifestError
from template_customizer.manifest import parse_manifest


class TestParseManifest:
    """Tests for parse_manifest."""

    def test_parses_full_manifest(self, manifest_yaml: str) -> None:
        manifest = parse_manifest(manifest_yaml)

        assert manifest.author == "Docs Team"
        assert manifest.language == "fr"
        assert [(part.name, part.file) for part in manifest.parts] == [
            ("Introduction", "intro.adoc"),
            ("Architecture", "architecture.adoc"),
        ]
        assert manifest.labels[0].name == "level"
        assert manifest.labels[0].available_values == ["basic", "advanced"]
        assert len(manifest.files_imports) == 1
        assert manifest.files_imports[0].src_dir == "resources"
        assert manifest.files_imports[0].dest_dir == "images"
        assert manifest.files_imports[0].files == ["logo.png"]
        assert manifest.files_imports_templates == []

    def test_single_key_label_form(self) -> None:
        manifest = parse_manifest(
            "parts: []\nmulti_values_labels:\n  - level: [' basic ', 3, '']\n  - {}\n  - plain\n"
        )

        assert [(label.name, label.available_values) for label in manifest.labels] == [
            ("level", ["basic"])
        ]

    def test_import_group_list(self) -> None:
        manifest = parse_manifest(
            "files_imported_into_templates:\n"
            "  - src_dir: /shared/\n"
            "    files: [a.txt, ' ', b.txt]\n"
            "  - src_dir: docs\n"
            "    dest_dir: ref\n"
            "    files: []\n"
        )

        groups = manifest.files_imports_templates
        assert [(g.src_dir, g.dest_dir, g.files) for g in groups] == [
            ("shared", "", ["a.txt", "b.txt"]),
            ("docs", "ref", []),
        ]

    def test_missing_language_is_none(self) -> None:
        assert parse_manifest("parts: []\nlanguage: '  '\n").language is None

    @pytest.mark.parametrize(
        ("raw", "message"),
        [
            ("", "Empty base-template-manifest.yaml"),
            ("parts: [unclosed\n", "YAML parse error"),
            ("- just\n- a list\n", "expected a mapping"),
            ("files_imported_into_blank_templates: [a.png, b.png]\n", "must include src_dir"),
            ("files_imported_into_blank_templates:\n  files: [a]\n", "src_dir is mandatory"),
            ("files_imported_into_blank_templates:\n  src_dir: x\n  files: a\n", "files must be an array"),
            ("files_imported_into_templates: 3\n", "expected object or array"),
            ("parts:\n  - just-a-string\n", "Invalid part at index 0"),
        ],
    )
    def test_rejects_malformed_manifest(self, raw: str, message: str) -> None:
        with pytest.raises(ManifestError, match=message):
            parse_manifest(raw)
