"""Render document trees to XHTML for EPUB chapters."""

from __future__ import annotations

from typing import Iterable, assert_never

from chapterpress.schemas.document import (
    Block,
    Blockquote,
    BoldMark,
    BulletList,
    CodeBlock,
    CodeMark,
    ColorBleed,
    Document,
    HardBreak,
    Heading,
    HorizontalRule,
    ImageBleed,
    Inline,
    ItalicMark,
    Mark,
    OrderedList,
    Paragraph,
    StrikeMark,
    TextStyleMark,
)

_SIMPLE_MARK_TAGS = {
    BoldMark: "strong",
    ItalicMark: "em",
    StrikeMark: "s",
    CodeMark: "code",
}


def escape_xml(text: str) -> str:
    """Escape ``& < > "`` for element text and attribute values."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def clamp_heading_level(level: int | None) -> int:
    return min(max(level if level is not None else 2, 2), 6)


def render_inline(items: Iterable[Inline]) -> str:
    """Render text runs and hard breaks, nesting mark tags per run."""
    out: list[str] = []
    for item in items:
        if isinstance(item, HardBreak):
            out.append("<br/>")
            continue
        for mark in item.marks:
            out.append(_open_mark(mark))
        out.append(escape_xml(item.text))
        for mark in reversed(item.marks):
            out.append(_close_mark(mark))
    return "".join(out)


def _text_style(mark: TextStyleMark) -> str:
    style = ""
    if mark.attrs.font_size is not None:
        style += f"font-size:{mark.attrs.font_size:g}pt;"
    if mark.attrs.font_family:
        style += f"font-family:{escape_xml(mark.attrs.font_family)};"
    return style


def _open_mark(mark: Mark) -> str:
    if isinstance(mark, TextStyleMark):
        style = _text_style(mark)
        return f'<span style="{style}">' if style else ""
    return f"<{_SIMPLE_MARK_TAGS[type(mark)]}>"


def _close_mark(mark: Mark) -> str:
    if isinstance(mark, TextStyleMark):
        return "</span>" if _text_style(mark) else ""
    return f"</{_SIMPLE_MARK_TAGS[type(mark)]}>"


def _align_style(text_align: str | None) -> str:
    if not text_align or text_align == "left":
        return ""
    return f' style="text-align:{escape_xml(text_align)}"'


def render_blocks(blocks: Iterable[Block]) -> str:
    """Render block nodes recursively, one element per line."""
    return "".join(_render_block(block) for block in blocks)


def _render_block(block: Block) -> str:
    if isinstance(block, Paragraph):
        style = _align_style(block.attrs.text_align)
        inner = render_inline(block.content)
        return f"<p{style}>{inner or '&#160;'}</p>\n"
    if isinstance(block, Heading):
        level = clamp_heading_level(block.level)
        style = _align_style(block.attrs.text_align)
        return f"<h{level}{style}>{render_inline(block.content)}</h{level}>\n"
    if isinstance(block, Blockquote):
        return f"<blockquote>\n{render_blocks(block.content)}</blockquote>\n"
    if isinstance(block, (BulletList, OrderedList)):
        tag = "ul" if isinstance(block, BulletList) else "ol"
        items = "".join(
            "<li>"
            + "".join(render_inline(child.content) for child in item.content if isinstance(child, Paragraph))
            + "</li>\n"
            for item in block.content
        )
        return f"<{tag}>\n{items}</{tag}>\n"
    if isinstance(block, CodeBlock):
        css_class = f' class="language-{escape_xml(block.language)}"' if block.language else ""
        return f"<pre><code{css_class}>{escape_xml(block.text)}</code></pre>\n"
    if isinstance(block, HorizontalRule):
        return "<hr/>\n"
    if isinstance(block, ColorBleed):
        background = escape_xml(block.attrs.background_color)
        color = escape_xml(block.attrs.text_color)
        return (
            f'<div style="background-color:{background};color:{color}">\n'
            f"{render_blocks(block.content)}</div>\n"
        )
    if isinstance(block, ImageBleed):
        if not block.attrs.name:
            return ""
        return (
            f'<div class="image-bleed"><img src="../images/{escape_xml(block.attrs.name)}" '
            f'alt="{escape_xml(block.attrs.alt)}"/></div>\n'
        )
    assert_never(block)


def chapter_to_xhtml(title: str, document: Document | None) -> str:
    """Wrap a chapter's rendered body in a standalone XHTML page."""
    body = render_blocks(document.content) if document is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<!DOCTYPE html>\n"
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        f"<head>\n<title>{escape_xml(title)}</title>\n"
        '<link rel="stylesheet" type="text/css" href="../style.css"/>\n'
        f"</head>\n<body>\n{body}</body>\n</html>\n"
    )
