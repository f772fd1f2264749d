"""
Event and tag types for mdevents.

This module defines the owned, self-contained values that make up a parse
result: byte ranges into the source, structural tags carried by ``Start``
events, and the flat event union itself.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, ClassVar, Dict, List, NamedTuple, Optional, Set, Tuple, Union


class ByteRange(NamedTuple):
    """Half-open ``[start, end)`` range of UTF-8 byte offsets into the source."""

    start: int
    end: int

    def isEmpty(self) -> bool:
        return self.start >= self.end

    def sliceOf(self, text: str) -> str:
        """Return the source text covered by this range.

        The range is only valid against the exact string it was produced from.
        """
        if text.isascii():
            return text[self.start : self.end]
        return text.encode("utf-8")[self.start : self.end].decode("utf-8")

    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"


class TagKind(Enum):
    """Discriminant of a tag, carried alone by ``End`` events."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    CODE_BLOCK = "code_block"
    HTML_BLOCK = "html_block"
    LIST = "list"
    ITEM = "item"
    FOOTNOTE_DEFINITION = "footnote_definition"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"
    METADATA_BLOCK = "metadata_block"
    DEFINITION_LIST = "definition_list"
    DEFINITION_LIST_TITLE = "definition_list_title"
    DEFINITION_LIST_DEFINITION = "definition_list_definition"


class HeadingLevel(IntEnum):
    H1 = 1
    H2 = 2
    H3 = 3
    H4 = 4
    H5 = 5
    H6 = 6


class LinkType(Enum):
    """How a link or image was written in the source."""

    INLINE = "inline"
    REFERENCE = "reference"
    COLLAPSED = "collapsed"
    SHORTCUT = "shortcut"
    AUTOLINK = "autolink"
    EMAIL = "email"


class Alignment(Enum):
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class MetadataBlockKind(Enum):
    YAML_STYLE = "yaml_style"
    PLUSES_STYLE = "pluses_style"


@dataclass(frozen=True)
class IndentedCode:
    """Code block introduced by four columns of indentation."""

    def toDict(self) -> Dict[str, Any]:
        return {"type": "indented"}


@dataclass(frozen=True)
class FencedCode:
    """Code block between fences; ``language`` is the info string and may be empty."""

    language: str

    def toDict(self) -> Dict[str, Any]:
        return {"type": "fenced", "language": self.language}


CodeBlockKind = Union[IndentedCode, FencedCode]


@dataclass(frozen=True)
class MDTag:
    """Base class for tags carried by ``Start`` events."""

    kind: ClassVar[TagKind]

    def toDict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self.kind.value}
        for name, value in self.__dict__.items():
            result[name] = _jsonValue(value)
        return result


@dataclass(frozen=True)
class MDParagraph(MDTag):
    kind = TagKind.PARAGRAPH


@dataclass(frozen=True)
class MDHeading(MDTag):
    """A heading, with optional identifier, classes and custom attributes.

    Attributes come from a trailing ``{#id .class key=value}`` block; the
    last ``#id`` wins and attributes may have no value.
    """

    kind = TagKind.HEADING
    level: HeadingLevel
    id: Optional[str] = None
    classes: Tuple[str, ...] = ()
    attrs: Tuple[Tuple[str, Optional[str]], ...] = ()


@dataclass(frozen=True)
class MDBlockQuote(MDTag):
    kind = TagKind.BLOCK_QUOTE


@dataclass(frozen=True)
class MDCodeBlock(MDTag):
    kind = TagKind.CODE_BLOCK
    codeKind: CodeBlockKind


@dataclass(frozen=True)
class MDHtmlBlock(MDTag):
    kind = TagKind.HTML_BLOCK


@dataclass(frozen=True)
class MDList(MDTag):
    """A list; ``start`` is the first number of an ordered list, None for bullets."""

    kind = TagKind.LIST
    start: Optional[int] = None


@dataclass(frozen=True)
class MDItem(MDTag):
    kind = TagKind.ITEM


@dataclass(frozen=True)
class MDFootnoteDefinition(MDTag):
    kind = TagKind.FOOTNOTE_DEFINITION
    label: str


@dataclass(frozen=True)
class MDTable(MDTag):
    """A table with one alignment per column."""

    kind = TagKind.TABLE
    alignments: Tuple[Alignment, ...] = ()


@dataclass(frozen=True)
class MDTableHead(MDTag):
    """Header cells of a table; they are not wrapped in a ``TableRow``."""

    kind = TagKind.TABLE_HEAD


@dataclass(frozen=True)
class MDTableRow(MDTag):
    kind = TagKind.TABLE_ROW


@dataclass(frozen=True)
class MDTableCell(MDTag):
    kind = TagKind.TABLE_CELL


@dataclass(frozen=True)
class MDEmphasis(MDTag):
    kind = TagKind.EMPHASIS


@dataclass(frozen=True)
class MDStrong(MDTag):
    kind = TagKind.STRONG


@dataclass(frozen=True)
class MDStrikethrough(MDTag):
    kind = TagKind.STRIKETHROUGH


@dataclass(frozen=True)
class MDLink(MDTag):
    """A link. ``id`` is the reference label, e.g. ``world`` in ``[hello][world]``."""

    kind = TagKind.LINK
    linkType: LinkType
    destUrl: str
    title: str = ""
    id: str = ""


@dataclass(frozen=True)
class MDImage(MDTag):
    kind = TagKind.IMAGE
    linkType: LinkType
    destUrl: str
    title: str = ""
    id: str = ""


@dataclass(frozen=True)
class MDMetadataBlock(MDTag):
    kind = TagKind.METADATA_BLOCK
    metadataKind: MetadataBlockKind


@dataclass(frozen=True)
class MDDefinitionList(MDTag):
    kind = TagKind.DEFINITION_LIST


@dataclass(frozen=True)
class MDDefinitionListTitle(MDTag):
    kind = TagKind.DEFINITION_LIST_TITLE


@dataclass(frozen=True)
class MDDefinitionListDefinition(MDTag):
    kind = TagKind.DEFINITION_LIST_DEFINITION


Tag = MDTag


class EventType(Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    SUBSTITUTED_TEXT = "substituted_text"
    CODE = "code"
    HTML = "html"
    INLINE_HTML = "inline_html"
    FOOTNOTE_REFERENCE = "footnote_reference"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    TASK_LIST_MARKER = "task_list_marker"


@dataclass(frozen=True)
class MarkdownEvent:
    """Base class of the normalized event union."""

    type: ClassVar[EventType]

    def toDict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type.value}
        for name, value in self.__dict__.items():
            result[name] = _jsonValue(value)
        return result


@dataclass(frozen=True)
class Start(MarkdownEvent):
    """Start of a tagged element; events up to the matching ``End`` are inside it."""

    type = EventType.START
    tag: MDTag


@dataclass(frozen=True)
class End(MarkdownEvent):
    type = EventType.END
    tagKind: TagKind


@dataclass(frozen=True)
class Text(MarkdownEvent):
    """Text taken verbatim from the associated source range."""

    type = EventType.TEXT


@dataclass(frozen=True)
class SubstitutedText(MarkdownEvent):
    """Text that differs from its source range, e.g. a decoded entity or smart quote."""

    type = EventType.SUBSTITUTED_TEXT
    text: str


@dataclass(frozen=True)
class Code(MarkdownEvent):
    type = EventType.CODE


@dataclass(frozen=True)
class Html(MarkdownEvent):
    type = EventType.HTML


@dataclass(frozen=True)
class InlineHtml(MarkdownEvent):
    type = EventType.INLINE_HTML


@dataclass(frozen=True)
class FootnoteReference(MarkdownEvent):
    type = EventType.FOOTNOTE_REFERENCE


@dataclass(frozen=True)
class SoftBreak(MarkdownEvent):
    type = EventType.SOFT_BREAK


@dataclass(frozen=True)
class HardBreak(MarkdownEvent):
    type = EventType.HARD_BREAK


@dataclass(frozen=True)
class Rule(MarkdownEvent):
    type = EventType.RULE


@dataclass(frozen=True)
class TaskListMarker(MarkdownEvent):
    type = EventType.TASK_LIST_MARKER
    checked: bool


RangedEvent = Tuple[ByteRange, MarkdownEvent]


class ParseResult(NamedTuple):
    """Events in document order plus every fenced code block language seen."""

    events: List[RangedEvent]
    languages: Set[str]


def _jsonValue(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (MDTag, IndentedCode, FencedCode)):
        return value.toDict()
    if isinstance(value, tuple):
        return [_jsonValue(item) for item in value]
    return value
