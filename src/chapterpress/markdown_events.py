"""Flatten markdown-it tokens into a linear stream of parse events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Iterator

try:
    from markdown_it import MarkdownIt
    from markdown_it.token import Token
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "markdown-it-py is required for Markdown parsing (pip install markdown-it-py)."
    ) from exc


class EventKind(str, Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    HTML = "html"


class Tag(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    ITEM = "item"
    CODE_BLOCK = "code_block"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"


@dataclass(frozen=True)
class MarkdownEvent:
    """One event of the stream.

    ``level`` is set on heading starts, ``ordered`` on list starts and
    ``language`` on code block starts. ``text`` carries leaf content.
    """

    kind: EventKind
    tag: Tag | None = None
    text: str = ""
    level: int = 0
    ordered: bool = False
    language: str = ""


_BLOCK_TAGS = {
    "paragraph": Tag.PARAGRAPH,
    "heading": Tag.HEADING,
    "blockquote": Tag.BLOCKQUOTE,
    "bullet_list": Tag.LIST,
    "ordered_list": Tag.LIST,
    "list_item": Tag.ITEM,
}

_INLINE_TAGS = {
    "strong": Tag.STRONG,
    "em": Tag.EMPHASIS,
    "s": Tag.STRIKETHROUGH,
    "link": Tag.LINK,
}


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("strikethrough")


def iter_markdown_events(markdown: str) -> Iterator[MarkdownEvent]:
    """Parse Markdown and yield its events in document order."""
    yield from _block_events(_parser().parse(markdown))


def _block_events(tokens: Iterable[Token]) -> Iterator[MarkdownEvent]:
    for token in tokens:
        if token.type == "inline":
            yield from _inline_events(token.children or [])
        elif token.type in {"fence", "code_block"}:
            language = token.info.strip().split()[0] if token.info.strip() else ""
            yield MarkdownEvent(EventKind.START, Tag.CODE_BLOCK, language=language)
            if token.content:
                yield MarkdownEvent(EventKind.TEXT, text=token.content)
            yield MarkdownEvent(EventKind.END, Tag.CODE_BLOCK)
        elif token.type == "hr":
            yield MarkdownEvent(EventKind.RULE)
        elif token.type == "html_block":
            yield MarkdownEvent(EventKind.HTML, text=token.content)
        else:
            name, _, edge = token.type.rpartition("_")
            tag = _BLOCK_TAGS.get(name)
            if tag is None or edge not in {"open", "close"}:
                continue
            if edge == "close":
                yield MarkdownEvent(EventKind.END, tag)
            elif tag is Tag.HEADING:
                yield MarkdownEvent(EventKind.START, tag, level=int(token.tag[1:]))
            elif tag is Tag.LIST:
                yield MarkdownEvent(EventKind.START, tag, ordered=name == "ordered_list")
            else:
                yield MarkdownEvent(EventKind.START, tag)


def _inline_events(tokens: Iterable[Token]) -> Iterator[MarkdownEvent]:
    for token in tokens:
        if token.type in {"text", "text_special"}:
            if token.content:
                yield MarkdownEvent(EventKind.TEXT, text=token.content)
        elif token.type == "code_inline":
            yield MarkdownEvent(EventKind.CODE, text=token.content)
        elif token.type == "softbreak":
            yield MarkdownEvent(EventKind.SOFT_BREAK)
        elif token.type == "hardbreak":
            yield MarkdownEvent(EventKind.HARD_BREAK)
        elif token.type == "html_inline":
            yield MarkdownEvent(EventKind.HTML, text=token.content)
        elif token.type == "image":
            # Alt text arrives as children, like link text.
            yield MarkdownEvent(EventKind.START, Tag.IMAGE)
            yield from _inline_events(token.children or [])
            yield MarkdownEvent(EventKind.END, Tag.IMAGE)
        else:
            name, _, edge = token.type.rpartition("_")
            tag = _INLINE_TAGS.get(name)
            if tag is None or edge not in {"open", "close"}:
                continue
            yield MarkdownEvent(EventKind.START if edge == "open" else EventKind.END, tag)
