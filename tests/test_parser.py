"""Tests for the section parser."""

from __future__ import annotations

from template_customizer.parser import count_sections, iter_sections, parse_sections

SAMPLE = (
    "# Root\n"
    "\n"
    '//🏷{"labels":["a"]}\n'
    "## Child A\n"
    "A\n"
    "\n"
    '//🏷{"labels":["b"]}\n'
    "## Child B\n"
    "B"
)


class TestParseSections:
    """Tests for parse_sections."""

    def test_builds_tree_with_line_ranges(self) -> None:
        """Sections carry start, heading and end lines."""
        roots = parse_sections(SAMPLE)

        assert len(roots) == 1
        root = roots[0]
        assert (root.title, root.level) == ("Root", 1)
        assert (root.start_line, root.heading_line, root.end_line) == (0, 0, 8)

        child_a, child_b = root.children
        assert (child_a.start_line, child_a.heading_line, child_a.end_line) == (2, 3, 5)
        assert (child_b.start_line, child_b.heading_line, child_b.end_line) == (6, 7, 8)
        assert child_a.labels == ["a"]
        assert child_b.labels == ["b"]

    def test_supports_equals_style_headings(self) -> None:
        """AsciiDoc '=' headings nest like '#' headings."""
        roots = parse_sections("= Root\n\n== Sub\ntext\n\n=== Deeper\n")

        assert roots[0].title == "Root"
        assert roots[0].children[0].title == "Sub"
        assert roots[0].children[0].children[0].level == 3

    def test_crlf_line_endings(self) -> None:
        """CRLF input yields the same ranges as LF input."""
        lf = parse_sections(SAMPLE)
        crlf = parse_sections(SAMPLE.replace("\n", "\r\n"))

        assert [s.end_line for s in iter_sections(crlf)] == [s.end_line for s in iter_sections(lf)]
        assert crlf[0].children[1].title == "Child B"

    def test_sibling_pops_deeper_sections(self) -> None:
        """A new level-2 heading closes an open level-3 section."""
        text = "# R\n## A\n### A1\nx\n## B\ny\n"
        root = parse_sections(text)[0]

        section_a, section_b = root.children
        assert section_a.end_line == 3
        assert section_a.children[0].end_line == 3
        assert section_b.start_line == 4
        assert section_b.end_line == 6

    def test_multiple_roots(self) -> None:
        """Several level-1 headings give a forest."""
        roots = parse_sections("# One\ntext\n# Two\nmore")

        assert [root.title for root in roots] == ["One", "Two"]
        assert roots[0].end_line == 1
        assert roots[1].end_line == 3

    def test_metadata_must_precede_heading(self) -> None:
        """Non-blank content between marker and heading discards the metadata."""
        text = '# R\n//🏷{"id":"x"}\nprose\n## Heading\n'
        section = parse_sections(text)[0].children[0]

        assert section.metadata is None
        assert section.start_line == section.heading_line == 3

    def test_blank_lines_keep_pending_metadata(self) -> None:
        """Blank lines between marker and heading are allowed."""
        text = '# R\n//🏷{"id":"x"}\n\n## Heading\n'
        section = parse_sections(text)[0].children[0]

        assert section.section_id == "x"
        assert section.start_line == 1
        assert section.heading_line == 3

    def test_html_comment_metadata(self) -> None:
        """Markdown-style HTML comment markers are recognized."""
        text = '# R\n<!-- 🏷{"id":"md","labels":["web"]} -->\n## Page\n'
        section = parse_sections(text)[0].children[0]

        assert section.section_id == "md"
        assert section.labels == ["web"]

    def test_malformed_metadata_is_ignored(self) -> None:
        """Invalid JSON degrades to no metadata."""
        text = "# R\n//🏷{not json}\n## Heading\nbody\n"
        section = parse_sections(text)[0].children[0]

        assert section.metadata is None
        assert section.title == "Heading"

    def test_metadata_fields_are_normalized(self) -> None:
        """Known fields are typed; the raw object is preserved."""
        text = (
            '# R\n//🏷{"id":"s","labels":["a",3,"b"],"links":"t","keep_content":true,"extra":1}\n'
            "## S\n"
        )
        metadata = parse_sections(text)[0].children[0].metadata

        assert metadata is not None
        assert metadata.id == "s"
        assert metadata.labels == ["a", "b"]
        assert metadata.link_to == ["t"]
        assert metadata.keep_content is True
        assert metadata.raw["extra"] == 1

    def test_link_to_takes_precedence_over_links(self) -> None:
        text = '# R\n//🏷{"link_to":["a","b"],"links":["c"]}\n## S\n'
        metadata = parse_sections(text)[0].children[0].metadata

        assert metadata is not None
        assert metadata.link_to == ["a", "b"]

    def test_empty_heading_title_is_skipped(self) -> None:
        """A heading marker without a title is not a section."""
        roots = parse_sections("# Root\n##   \n## Real\n")

        assert [child.title for child in roots[0].children] == ["Real"]

    def test_hash_without_space_is_not_heading(self) -> None:
        roots = parse_sections("# Root\n#hashtag\n")

        assert roots[0].children == []

    def test_ancestor_ranges_contain_descendants(self) -> None:
        """Descendant ranges nest inside ancestor ranges."""
        text = "# R\nintro\n## A\n### A1\n#### A1a\ntext\n### A2\n## B\n"
        for section in iter_sections(parse_sections(text)):
            for child in section.children:
                assert section.start_line <= child.start_line
                assert child.end_line <= section.end_line

    def test_empty_text(self) -> None:
        assert parse_sections("") == []


class TestCountSections:
    """Tests for count_sections."""

    def test_counts_all_nodes(self) -> None:
        assert count_sections(parse_sections(SAMPLE)) == 3
