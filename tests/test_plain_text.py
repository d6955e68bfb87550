"""Tests for plain text to document tree conversion."""

from __future__ import annotations

import pytest

from chapterpress.plain_text import convert_text_to_document
from chapterpress.schemas import Paragraph


class TestConvertTextToDocument:
    """Tests for convert_text_to_document."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t\n"])
    def test_blank_input_yields_single_empty_paragraph(self, text: str) -> None:
        """Whitespace-only text gives exactly one paragraph with no content."""
        doc = convert_text_to_document(text)

        assert doc.content == (Paragraph(),)

    def test_paragraphs_split_on_blank_lines(self) -> None:
        """Blank lines separate paragraphs; single newlines do not."""
        doc = convert_text_to_document("first line\nstill first\n\nsecond")

        assert [para.content[0].text for para in doc.content] == ["first line\nstill first", "second"]

    def test_whitespace_only_separator_line(self) -> None:
        """A line holding only spaces or tabs also separates paragraphs."""
        doc = convert_text_to_document("one\n  \t\ntwo")

        assert len(doc.content) == 2

    def test_crlf_line_endings(self) -> None:
        """Windows line endings are normalized before splitting."""
        doc = convert_text_to_document("one\r\n\r\ntwo\r\n")

        assert [para.content[0].text for para in doc.content] == ["one", "two"]

    def test_paragraph_text_is_trimmed(self) -> None:
        """Leading and trailing whitespace of each paragraph is removed."""
        doc = convert_text_to_document("\n\n   padded   \n\n")

        assert doc.content[0].content[0].text == "padded"
        assert doc.content[0].content[0].marks == ()
