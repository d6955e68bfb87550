"""Convert Markdown into a document tree with a single-pass event builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from chapterpress.markdown_events import EventKind, MarkdownEvent, Tag, iter_markdown_events
from chapterpress.schemas.document import (
    Block,
    Blockquote,
    BoldMark,
    BulletList,
    CodeBlock,
    CodeBlockAttrs,
    CodeMark,
    Document,
    Heading,
    HeadingAttrs,
    HorizontalRule,
    ItalicMark,
    ListItem,
    Mark,
    OrderedList,
    Paragraph,
    StrikeMark,
    Text,
)


def convert_markdown_to_document(markdown: str) -> Document:
    """Convert Markdown text into a document tree.

    Unsupported constructs (tables, raw HTML, link targets, image sources)
    are dropped rather than reported; image alt text is kept as paragraph
    text. The result always holds at least one block.
    """
    return build_document(iter_markdown_events(markdown))


def build_document(events: Iterable[MarkdownEvent]) -> Document:
    """Build a tree from an already flattened event stream."""
    builder = _TreeBuilder()
    for event in events:
        builder.feed(event)
    return builder.finish()


class Placement(Enum):
    """Where a completed block lands, in priority order."""

    BLOCKQUOTE = "blockquote"
    LIST_ITEM = "list_item"
    DOCUMENT = "document"


@dataclass
class _ListFrame:
    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    item: list[Block] | None = None


class _TreeBuilder:
    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self.paragraph: list[Text] | None = None
        self.bold = False
        self.italic = False
        self.strike = False
        self.heading_level = 0
        self.heading: list[Text] = []
        self.lists: list[_ListFrame] = []
        self.quote: list[Block] = []
        self.quote_depth = 0
        self.code: list[str] | None = None
        self.code_language = ""

    @property
    def placement(self) -> Placement:
        if self.quote_depth:
            return Placement.BLOCKQUOTE
        if self.lists and self.lists[-1].item is not None:
            return Placement.LIST_ITEM
        return Placement.DOCUMENT

    def feed(self, event: MarkdownEvent) -> None:
        if event.kind is EventKind.START:
            self._start(event)
        elif event.kind is EventKind.END:
            self._end(event)
        elif event.kind is EventKind.TEXT:
            self._leaf(event.text, code=False)
        elif event.kind is EventKind.CODE:
            self._leaf(event.text, code=True)
        elif event.kind in {EventKind.SOFT_BREAK, EventKind.HARD_BREAK}:
            self._break()
        elif event.kind is EventKind.RULE:
            self._place(HorizontalRule())

    def finish(self) -> Document:
        if not self.blocks:
            return Document.empty()
        return Document(content=tuple(self.blocks))

    def _start(self, event: MarkdownEvent) -> None:
        tag = event.tag
        if tag is Tag.PARAGRAPH:
            if self.paragraph is None:
                self.paragraph = []
        elif tag is Tag.HEADING:
            self.heading_level = event.level
            self.heading = []
        elif tag is Tag.STRONG:
            self.bold = True
        elif tag is Tag.EMPHASIS:
            self.italic = True
        elif tag is Tag.STRIKETHROUGH:
            self.strike = True
        elif tag is Tag.CODE_BLOCK:
            self.code = []
            self.code_language = event.language
        elif tag is Tag.LIST:
            self.lists.append(_ListFrame(ordered=event.ordered))
        elif tag is Tag.ITEM:
            if self.lists:
                self.lists[-1].item = []
            # Tight list text arrives without a paragraph of its own.
            if self.paragraph is None:
                self.paragraph = []
        elif tag is Tag.BLOCKQUOTE:
            if self.quote_depth == 0:
                self.quote = []
            self.quote_depth += 1

    def _end(self, event: MarkdownEvent) -> None:
        tag = event.tag
        if tag is Tag.PARAGRAPH:
            self._close_paragraph()
        elif tag is Tag.HEADING:
            if self.heading_level > 0:
                self._place(
                    Heading(
                        attrs=HeadingAttrs(level=self.heading_level),
                        content=tuple(self.heading),
                    )
                )
            self.heading = []
            self.heading_level = 0
        elif tag is Tag.STRONG:
            self.bold = False
        elif tag is Tag.EMPHASIS:
            self.italic = False
        elif tag is Tag.STRIKETHROUGH:
            self.strike = False
        elif tag is Tag.CODE_BLOCK:
            self._close_code_block()
        elif tag is Tag.ITEM:
            self._close_item()
        elif tag is Tag.LIST:
            self._close_list()
        elif tag is Tag.BLOCKQUOTE:
            self._close_blockquote()

    def _close_paragraph(self) -> None:
        runs = self.paragraph
        self.paragraph = None
        if runs is None:
            return
        if not runs and self.placement is Placement.DOCUMENT:
            return
        self._place(Paragraph(content=tuple(runs)))

    def _close_code_block(self) -> None:
        if self.code is None:
            return
        text = "".join(self.code)
        self._place(
            CodeBlock(
                attrs=CodeBlockAttrs(language=self.code_language or None),
                content=(Text(text=text),) if text else (),
            )
        )
        self.code = None
        self.code_language = ""

    def _close_item(self) -> None:
        if not self.lists:
            self.paragraph = None
            return
        frame = self.lists[-1]
        blocks = frame.item if frame.item is not None else []
        if self.paragraph:
            blocks.append(Paragraph(content=tuple(self.paragraph)))
        self.paragraph = None
        frame.items.append(ListItem(content=tuple(blocks) or (Paragraph(),)))
        frame.item = None

    def _close_list(self) -> None:
        if not self.lists:
            return
        frame = self.lists.pop()
        if not frame.items:
            return
        node_type = OrderedList if frame.ordered else BulletList
        self._place(node_type(content=tuple(frame.items)))

    def _close_blockquote(self) -> None:
        if self.quote_depth == 0:
            return
        self.quote_depth -= 1
        if self.quote_depth:
            return
        blocks, self.quote = self.quote, []
        if blocks:
            self._place(Blockquote(content=tuple(blocks)))

    def _place(self, block: Block) -> None:
        placement = self.placement
        if placement is Placement.BLOCKQUOTE:
            self.quote.append(block)
        elif placement is Placement.LIST_ITEM:
            item = self.lists[-1].item
            assert item is not None
            item.append(block)
        else:
            self.blocks.append(block)

    def _marks(self, *, code: bool) -> tuple[Mark, ...]:
        marks: list[Mark] = []
        if self.bold:
            marks.append(BoldMark())
        if self.italic:
            marks.append(ItalicMark())
        if self.strike:
            marks.append(StrikeMark())
        if code:
            marks.append(CodeMark())
        return tuple(marks)

    def _leaf(self, text: str, *, code: bool) -> None:
        if self.code is not None:
            self.code.append(text)
            return
        if not text:
            return
        run = Text(text=text, marks=self._marks(code=code))
        if self.heading_level > 0:
            self.heading.append(run)
        elif self.paragraph is not None:
            self.paragraph.append(run)

    def _break(self) -> None:
        # Soft and hard breaks both collapse to a space on the previous run.
        if not self.paragraph:
            return
        last = self.paragraph[-1]
        self.paragraph[-1] = last.model_copy(update={"text": last.text + " "})
