"""Document tree produced by the parser and template elements consumed by the renderer"""

from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Node(BaseModel):
    """Base for every parsed node; frozen once constructed."""
    model_config = ConfigDict(frozen=True)


# --- spans ---

class Link(Node):
    kind: Literal["link"] = "link"
    text: str
    url: str


class Emphasis(Node):
    kind: Literal["emphasis"] = "emphasis"
    text: str


class Strong(Node):
    kind: Literal["strong"] = "strong"
    text: str


class Math(Node):
    kind: Literal["math"] = "math"
    math: str


class Code(Node):
    kind: Literal["code"] = "code"
    code: str


class Image(Node):
    kind: Literal["image"] = "image"
    url: str


class Text(Node):
    kind: Literal["text"] = "text"
    text: str


Span = Annotated[
    Union[Link, Emphasis, Strong, Math, Code, Image, Text],
    Field(discriminator="kind"),
]


# --- lists ---

class ListItem(Node):
    """One list entry: its own inline content plus a (possibly empty) sublist."""
    spans: list[Span] = []
    list: "ItemList"


class ItemList(Node):
    ordered: bool = False
    items: list[ListItem] = []


ListItem.model_rebuild()
ItemList.model_rebuild()


# --- blocks ---

class Header(Node):
    kind: Literal["header"] = "header"
    spans: list[Span]
    level: int = Field(..., ge=1, le=6)
    id: str


class Blockquote(Node):
    kind: Literal["blockquote"] = "blockquote"
    spans: list[Span]


class ListElement(Node):
    kind: Literal["list"] = "list"
    list: ItemList


class Table(Node):
    kind: Literal["table"] = "table"
    head: list[list[str]] = []
    body: list[list[str]] = []


class MathBlock(Node):
    kind: Literal["math_block"] = "math_block"
    math: str


class CodeBlock(Node):
    kind: Literal["code_block"] = "code_block"
    lang: str = ""
    code: str


class LinkCard(Node):
    """A block-level preview of a remote page built from its Open Graph metadata."""
    kind: Literal["link_card"] = "link_card"
    title: str = ""
    image: Optional[str] = None
    url: str
    description: Optional[str] = None
    site_name: Optional[str] = None


class Paragraph(Node):
    kind: Literal["paragraph"] = "paragraph"
    spans: list[Span]


Block = Annotated[
    Union[Header, Blockquote, ListElement, Table, MathBlock, CodeBlock, LinkCard, Paragraph],
    Field(discriminator="kind"),
]


class Document(Node):
    """Parse result: title from the level-1 header, TOC from levels 2-6, ordered content."""
    title: str = ""
    toc: ItemList = ItemList(ordered=True)
    content: list[Block] = []


class OgpData(Node):
    """Open Graph fields scraped from a remote page."""
    title: str = ""
    image: Optional[str] = None
    description: Optional[str] = None
    site_name: Optional[str] = None


# --- template elements ---

@dataclass(frozen=True)
class TitleSlot:
    indent: int


@dataclass(frozen=True)
class TocSlot:
    indent: int


@dataclass(frozen=True)
class ContentSlot:
    indent: int


@dataclass(frozen=True)
class LiteralText:
    text: str


TemplateElement = Union[TitleSlot, TocSlot, ContentSlot, LiteralText]
