"""Tests for the command-line entry point."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from template_customizer.cli import build_parser, main, split_label_args


class TestSplitLabelArgs:
    def test_flattens_repeated_and_comma_separated_values(self) -> None:
        assert split_label_args(["a, b", "c", " ,"]) == ["a", "b", "c"]


class TestBuildParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["https://example.com/base"])

        assert args.include == []
        assert args.drop == []
        assert args.output == "custom-template.zip"
        assert args.no_anchors is False


class TestMain:
    """End-to-end runs against a template on disk."""

    @pytest.mark.integration
    def test_generates_archive(
        self, base_template_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "out.zip"

        code = main(
            [
                str(base_template_dir),
                "-i",
                "level::basic",
                "-d",
                "architecture.adoc:Glossary",
                "--no-anchors",
                "-o",
                str(output),
            ]
        )

        assert code == 0
        assert "with 2 part(s)" in capsys.readouterr().out
        with zipfile.ZipFile(output) as archive:
            architecture = archive.read("template/architecture.adoc").decode("utf-8")
        assert "== Components" in architecture
        assert "== Glossary" not in architecture
        assert "[#components]" not in architecture

    @pytest.mark.integration
    def test_unknown_label_fails(
        self, base_template_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "out.zip"

        code = main([str(base_template_dir), "-i", "nope", "-o", str(output)])

        assert code == 1
        assert "Unknown label(s): nope" in capsys.readouterr().err
        assert not output.exists()

    def test_missing_manifest_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = main([str(tmp_path), "-o", str(tmp_path / "out.zip")])

        assert code == 1
        assert "base-template-manifest.yaml" in capsys.readouterr().err

    def test_invalid_drop_rule_is_a_usage_error(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path), "-d", "no-separator"])

        assert excinfo.value.code == 2
