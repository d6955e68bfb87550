"""Tests for RTF rendering."""

from __future__ import annotations

import pytest

from chapterpress.rtf import (
    RTF_PREAMBLE,
    escape_rtf,
    heading_font_size,
    render_document,
    render_rtf,
    rtf_filename,
)
from chapterpress.schemas import (
    Blockquote,
    BoldMark,
    BulletList,
    Document,
    HardBreak,
    Heading,
    ItalicMark,
    ListItem,
    Paragraph,
    Text,
)
from chapterpress.schemas.document import HeadingAttrs
from conftest import paragraph


class TestEscapeRtf:
    """Tests for escape_rtf."""

    def test_control_characters_escaped(self) -> None:
        """Backslashes and braces are escaped."""
        assert escape_rtf("a\\b{c}") == "a\\\\b\\{c\\}"

    def test_non_ascii_as_unicode_escape(self) -> None:
        """Non-ASCII characters become \\uN? escapes."""
        assert escape_rtf("café") == "caf\\u233?"

    def test_astral_characters_use_surrogates(self) -> None:
        """Characters outside the BMP become two signed UTF-16 units."""
        assert escape_rtf("😀") == "\\u-10179?\\u-8704?"

    def test_newlines_become_line_breaks(self) -> None:
        """A newline inside a run is an RTF line break, not a lost separator."""
        assert escape_rtf("line one\nline two") == "line one\\line line two"

    def test_newline_in_paragraph_keeps_words_apart(self) -> None:
        """Plain-text paragraphs with hard-wrapped lines keep the wrap."""
        rtf = render_document(Document(content=(paragraph("line one\nline two"),)))

        assert "line oneline two" not in rtf
        assert "line one\\line line two" in rtf


class TestRenderDocument:
    """Tests for render_document."""

    def test_paragraph_marks_reset_after_each_run(self) -> None:
        """Bold and italic are switched on per run and always reset."""
        doc = Document(
            content=(
                Paragraph(
                    content=(
                        Text(text="bold", marks=(BoldMark(),)),
                        Text(text="both", marks=(BoldMark(), ItalicMark())),
                        Text(text="plain"),
                    )
                ),
            )
        )

        assert render_document(doc) == (
            "{\\pard \\b bold\\b0\\i0 \\b \\i both\\b0\\i0 plain\\b0\\i0 \\par}\n"
        )

    def test_hard_break_emits_line(self) -> None:
        """Hard breaks become \\line."""
        doc = Document(content=(Paragraph(content=(Text(text="a"), HardBreak(), Text(text="b"))),))

        assert "a\\b0\\i0 \\line b" in render_document(doc)

    @pytest.mark.parametrize(
        ("level", "size"),
        [(2, 32), (3, 28), (4, 24), (1, 20), (5, 20), (None, 20)],
    )
    def test_heading_font_sizes(self, level: int | None, size: int) -> None:
        """Heading sizes follow the level table with a default of 20."""
        assert heading_font_size(level) == size

    def test_heading_block(self) -> None:
        """Headings render bold plain text at the level's size."""
        doc = Document(
            content=(Heading(attrs=HeadingAttrs(level=3), content=(Text(text="Part {1}"),)),)
        )

        assert render_document(doc) == "{\\pard \\fs28 \\b Part \\{1\\}\\b0\\par}\n"

    def test_blockquote_indents_direct_paragraphs(self) -> None:
        """Blockquotes flatten their direct paragraphs into one indented paragraph."""
        doc = Document(content=(Blockquote(content=(paragraph("quoted"),)),))

        assert render_document(doc) == "{\\pard \\li720 quoted\\par}\n"

    def test_other_blocks_skipped(self) -> None:
        """Lists and other blocks are not written."""
        doc = Document(content=(BulletList(content=(ListItem(content=(paragraph("item"),)),)),))

        assert render_document(doc) == ""

    def test_absent_document_renders_empty(self) -> None:
        """A missing tree renders as an empty body."""
        assert render_document(None) == ""


class TestRenderRtf:
    """Tests for render_rtf."""

    def test_chapters_separated_by_page_breaks(self) -> None:
        """Page breaks go between chapters, never after the last."""
        doc = Document(content=(paragraph("x"),))

        output = render_rtf([(4, doc), (7, None)])

        assert output.startswith(RTF_PREAMBLE)
        assert output.endswith("}")
        assert output.count("\\page") == 1
        assert "{\\pard \\fs28 \\b Chapter 4\\b0\\par}" in output
        assert "{\\pard \\fs28 \\b Chapter 7\\b0\\par}" in output
        assert output.index("Chapter 4") < output.index("\\page") < output.index("Chapter 7")

    def test_single_chapter_has_no_page_break(self) -> None:
        """One chapter means no page break."""
        output = render_rtf([(1, None)])

        assert "\\page" not in output
        assert output.count("{\\pard \\par}") == 2


class TestRtfFilename:
    """Tests for rtf_filename."""

    def test_full_export_has_no_suffix(self) -> None:
        """Exporting every chapter gives the plain name."""
        assert rtf_filename("My Book", "2024-05-01", [1, 2, 3], [1, 2, 3]) == "My_Book_2024-05-01.rtf"

    def test_subset_lists_chapter_ids(self) -> None:
        """A proper subset appends the ids in export order."""
        assert (
            rtf_filename("My Book", "2024-05-01", [3, 1], [1, 2, 3])
            == "My_Book_2024-05-01_Chapters_3-1.rtf"
        )
