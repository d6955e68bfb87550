"""Tests for chapter splitting and title de-duplication."""

from __future__ import annotations

from chapterpress.sections import dedupe_title, default_chapter_title, split_by_delimiter


class TestSplitByDelimiter:
    """Tests for split_by_delimiter."""

    def test_extracts_titles_and_drops_preamble(self) -> None:
        """Text before the first delimiter is dropped; empty titles fall back."""
        text = "junk\n## A\nfoo\nbar\n## \nbaz"

        sections = split_by_delimiter(text, "## ", extract_titles=True)

        assert sections == [("A", "foo\nbar"), ("Chapter 2", "baz")]

    def test_without_extraction_titles_are_numbered(self) -> None:
        """Without extraction every section is Chapter N."""
        sections = split_by_delimiter("# one\nx\n# two\ny", "# ")

        assert sections == [("Chapter 1", "x"), ("Chapter 2", "y")]

    def test_empty_sections_dropped_only_when_extracting(self) -> None:
        """Empty sections are suppressed with extraction and kept without it."""
        text = "## A\n\n## B\ncontent"

        assert split_by_delimiter(text, "## ", extract_titles=True) == [("B", "content")]
        assert split_by_delimiter(text, "## ") == [("Chapter 1", ""), ("Chapter 2", "content")]

    def test_no_delimiter_returns_whole_text(self) -> None:
        """Text without any delimiter line becomes one Chapter 1 section."""
        text = "just prose\nmore prose"

        assert split_by_delimiter(text, "## ") == [("Chapter 1", text)]

    def test_section_content_is_trimmed(self) -> None:
        """Blank lines around section content are removed."""
        sections = split_by_delimiter("## A\n\n  body  \n\n", "## ", extract_titles=True)

        assert sections == [("A", "body")]

    def test_delimiter_must_start_the_line(self) -> None:
        """A delimiter in the middle of a line does not split."""
        sections = split_by_delimiter("## A\ntext ## not a split", "## ", extract_titles=True)

        assert sections == [("A", "text ## not a split")]

    def test_only_newlines_separate_lines(self) -> None:
        """Form feeds and Unicode line separators stay inside a line."""
        text = "## A\nx\x0cy\u2028## B\n## C\nz"

        sections = split_by_delimiter(text, "## ", extract_titles=True)

        assert sections == [("A", "x\x0cy\u2028## B"), ("C", "z")]

    def test_crlf_line_endings(self) -> None:
        """Carriage returns before newlines are not part of titles or content."""
        sections = split_by_delimiter("## A\r\nbody\r\n## B\r\nmore\r\n", "## ", extract_titles=True)

        assert sections == [("A", "body"), ("B", "more")]


class TestDedupeTitle:
    """Tests for dedupe_title."""

    def test_free_title_unchanged(self) -> None:
        """A title not in use is returned as is."""
        assert dedupe_title("Intro", set()) == "Intro"

    def test_case_insensitive_collision(self) -> None:
        """Collisions are detected regardless of case."""
        assert dedupe_title("Intro", {"intro"}) == "Intro (1)"

    def test_picks_smallest_free_suffix(self) -> None:
        """The first unused number is chosen."""
        assert dedupe_title("Intro", {"intro", "intro (1)"}) == "Intro (2)"

    def test_default_chapter_title(self) -> None:
        """Fallback titles are numbered."""
        assert default_chapter_title(7) == "Chapter 7"
