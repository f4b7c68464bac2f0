"""Tests for link index and "See also" resolution."""

from __future__ import annotations

import pytest

from template_customizer.links import (
    build_link_index,
    resolve_anchor,
    resolve_see_also,
    see_also_verb,
)
from template_customizer.parser import parse_sections
from template_customizer.schemas import LinkTarget, Part


def _part(file: str, content: str) -> Part:
    return Part(name=file, file=file, content=content, sections=parse_sections(content))


class TestBuildLinkIndex:
    """Tests for build_link_index."""

    def test_indexes_ids_across_parts(self) -> None:
        parts = [
            _part("p1.adoc", '# Part1\n\n//🏷{"id":"s1"}\n## A\nA body\n'),
            _part("p2.adoc", '# Part2\n\n//🏷{"id":"s2","link_to":["s1"]}\n## B\n### Deep\n'),
        ]

        index = build_link_index(parts)

        assert index == {
            "s1": LinkTarget(title="A", file="p1.adoc"),
            "s2": LinkTarget(title="B", file="p2.adoc"),
        }

    def test_ignores_sections_without_id(self) -> None:
        assert build_link_index([_part("p.adoc", "# P\n## A\n")]) == {}


class TestResolveSeeAlso:
    """Tests for resolve_see_also."""

    @pytest.fixture
    def section(self):
        text = '# R\n//🏷{"id":"me","link_to":["local"," remote ","missing"]}\n## Me\n'
        return parse_sections(text)[0].children[0]

    @pytest.fixture
    def link_index(self) -> dict[str, LinkTarget]:
        return {
            "local": LinkTarget(title="Local Title", file="here.adoc"),
            "remote": LinkTarget(title="Remote Title", file="there.adoc"),
        }

    def test_mixes_local_and_inter_document_references(self, section, link_index) -> None:
        text = resolve_see_also(section, link_index, current_file="here.adoc")

        assert text == (
            "TIP: See also <<local,Local Title>>, xref:there.adoc#remote[Remote Title]."
        )

    def test_french(self, section, link_index) -> None:
        text = resolve_see_also(section, link_index, current_file="here.adoc", language="fr")

        assert text is not None
        assert text.startswith("TIP: Voir aussi ")

    def test_no_resolvable_links(self, section) -> None:
        assert resolve_see_also(section, {}, current_file="here.adoc") is None

    def test_section_without_links(self) -> None:
        section = parse_sections("# R\n## Plain\n")[0].children[0]

        assert resolve_see_also(section, {"x": LinkTarget(title="X")}) is None

    def test_anchor(self, section) -> None:
        assert resolve_anchor(section) == "[#me]"
        assert resolve_anchor(parse_sections("# R\n")[0]) is None


class TestSeeAlsoVerb:
    """Tests for see_also_verb."""

    @pytest.mark.parametrize(
        ("language", "expected"),
        [
            (None, "See also"),
            ("en", "See also"),
            ("fr", "Voir aussi"),
            ("FR", "Voir aussi"),
            ("fr-CA", "Voir aussi"),
            ("de", "See also"),
            ("", "See also"),
        ],
    )
    def test_localization(self, language: str | None, expected: str) -> None:
        assert see_also_verb(language) == expected
