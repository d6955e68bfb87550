"""Document tree models.

The JSON shape matches the editor's persisted chapter format: every node has a
``type`` discriminator, optional ``attrs`` and either ``content`` children or
(for text runs) ``text`` plus ``marks``. Models are frozen; converters build a
tree once and renderers only read it.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# Marks


class BoldMark(_Node):
    type: Literal["bold"] = "bold"


class ItalicMark(_Node):
    type: Literal["italic"] = "italic"


class StrikeMark(_Node):
    type: Literal["strike"] = "strike"


class CodeMark(_Node):
    type: Literal["code"] = "code"


class TextStyleAttrs(_Node):
    font_size: float | None = Field(default=None, alias="fontSize")
    font_family: str | None = Field(default=None, alias="fontFamily")


class TextStyleMark(_Node):
    """Inline font size (points) and/or font family."""

    type: Literal["textStyle"] = "textStyle"
    attrs: TextStyleAttrs = Field(default_factory=TextStyleAttrs)


Mark = Annotated[
    Union[BoldMark, ItalicMark, StrikeMark, CodeMark, TextStyleMark],
    Field(discriminator="type"),
]


# Inline content


class Text(_Node):
    """A run of text with zero or more marks, applied in order."""

    type: Literal["text"] = "text"
    text: str
    marks: tuple[Mark, ...] = ()

    def has_mark(self, mark_type: str) -> bool:
        return any(mark.type == mark_type for mark in self.marks)


class HardBreak(_Node):
    type: Literal["hardBreak"] = "hardBreak"


Inline = Annotated[Union[Text, HardBreak], Field(discriminator="type")]


# Blocks


class AlignAttrs(_Node):
    text_align: str | None = Field(default=None, alias="textAlign")


class HeadingAttrs(AlignAttrs):
    level: int | None = None


class Paragraph(_Node):
    type: Literal["paragraph"] = "paragraph"
    attrs: AlignAttrs = Field(default_factory=AlignAttrs)
    content: tuple[Inline, ...] = ()


class Heading(_Node):
    type: Literal["heading"] = "heading"
    attrs: HeadingAttrs = Field(default_factory=HeadingAttrs)
    content: tuple[Inline, ...] = ()

    @property
    def level(self) -> int | None:
        return self.attrs.level


class Blockquote(_Node):
    type: Literal["blockquote"] = "blockquote"
    content: tuple[Block, ...] = ()


class ListItem(_Node):
    type: Literal["listItem"] = "listItem"
    content: tuple[Block, ...] = Field(min_length=1)


class BulletList(_Node):
    type: Literal["bulletList"] = "bulletList"
    content: tuple[ListItem, ...] = ()


class OrderedList(_Node):
    type: Literal["orderedList"] = "orderedList"
    content: tuple[ListItem, ...] = ()


class CodeBlockAttrs(_Node):
    language: str | None = None


class CodeBlock(_Node):
    type: Literal["codeBlock"] = "codeBlock"
    attrs: CodeBlockAttrs = Field(default_factory=CodeBlockAttrs)
    content: tuple[Text, ...] = ()

    @property
    def language(self) -> str | None:
        return self.attrs.language

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.content)


class HorizontalRule(_Node):
    type: Literal["horizontalRule"] = "horizontalRule"


class ColorBleedAttrs(_Node):
    background_color: str = Field(default="#000000", alias="backgroundColor")
    text_color: str = Field(default="#ffffff", alias="textColor")


class ColorBleed(_Node):
    """Full-width color panel wrapping other blocks."""

    type: Literal["colorBleed"] = "colorBleed"
    attrs: ColorBleedAttrs = Field(default_factory=ColorBleedAttrs)
    content: tuple[Block, ...] = ()


class ImageBleedAttrs(_Node):
    src: str = ""
    name: str = ""
    alt: str = ""


class ImageBleed(_Node):
    """Full-bleed image referencing a file in the project's asset directory."""

    type: Literal["imageBleed"] = "imageBleed"
    attrs: ImageBleedAttrs = Field(default_factory=ImageBleedAttrs)


Block = Annotated[
    Union[
        Paragraph,
        Heading,
        Blockquote,
        BulletList,
        OrderedList,
        CodeBlock,
        HorizontalRule,
        ColorBleed,
        ImageBleed,
    ],
    Field(discriminator="type"),
]


class Document(_Node):
    """Root of a chapter's tree. Never holds an empty block sequence."""

    type: Literal["doc"] = "doc"
    content: tuple[Block, ...] = Field(min_length=1)

    @classmethod
    def empty(cls) -> Document:
        return cls(content=(Paragraph(),))


for _model in (Blockquote, ListItem, BulletList, OrderedList, ColorBleed, Document):
    _model.model_rebuild()


def dump_document(document: Document) -> dict[str, Any]:
    """Serialize a tree to the persisted JSON shape."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def load_document(data: dict[str, Any] | str | bytes) -> Document:
    """Validate persisted JSON (already decoded or raw) into a tree.

    Raises:
        pydantic.ValidationError: If the data is not a valid document.
    """
    if isinstance(data, (str, bytes)):
        return Document.model_validate_json(data)
    return Document.model_validate(data)
