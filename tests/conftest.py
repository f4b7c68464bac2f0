"""Test setup for template_customizer."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (read a base template from disk)",
    )


MANIFEST_YAML = """\
author: Docs Team
license: CC-BY-4.0
language: fr
parts:
  - name: Introduction
    file: intro.adoc
  - name: Architecture
    file: architecture.adoc
multi_values_labels:
  - name: level
    available_values: [basic, advanced]
files_imported_into_blank_templates:
  src_dir: resources
  dest_dir: images
  files:
    - logo.png
"""

INTRO_ADOC = """\
= Introduction
:toc: left

//🏷{"id":"goals","labels":["context"]}
== Goals
Why we build this.

//🏷{"id":"scope","link_to":["components"]}
== Scope
What is in scope.
"""

ARCHITECTURE_ADOC = """\
= Architecture

//🏷{"id":"components","labels":["level::basic"]}
== Components
Main building blocks.

//🏷{"labels":["level::advanced"]}
== Deployment
Clusters and regions.

== Glossary
Terms.
"""


@pytest.fixture
def base_template_dir(tmp_path: Path) -> Path:
    """A complete base template laid out on disk."""
    root = tmp_path / "base"
    (root / "resources").mkdir(parents=True)
    (root / "base-template-manifest.yaml").write_text(MANIFEST_YAML, encoding="utf-8")
    (root / "README.adoc").write_text("= Base template\n", encoding="utf-8")
    (root / "intro.adoc").write_text(INTRO_ADOC, encoding="utf-8")
    (root / "architecture.adoc").write_text(ARCHITECTURE_ADOC, encoding="utf-8")
    (root / "resources" / "logo.png").write_bytes(b"\x89PNG fake")
    return root


@pytest.fixture
def manifest_yaml() -> str:
    return MANIFEST_YAML
