"""
Raw tokenizer events.

These are the tokenizer's own values, positioned by str index into the
source. Text payloads say explicitly whether they were borrowed from the
source or produced by a substitution.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from ..types import Alignment, LinkType, MetadataBlockKind, TagKind


class CowStr(NamedTuple):
    """A string that is either a verbatim slice of the source or an owned replacement."""

    value: str
    borrowed: bool = False

    @classmethod
    def borrow(cls, source: str, start: int, end: int) -> "CowStr":
        return cls(source[start:end], True)

    @classmethod
    def owned(cls, value: str) -> "CowStr":
        return cls(value, False)

    def __str__(self) -> str:
        return self.value


EMPTY = CowStr("", False)


class BlockQuoteKind(Enum):
    """GFM alert kinds, written as ``> [!NOTE]`` on the first line of a quote."""

    NOTE = "note"
    TIP = "tip"
    IMPORTANT = "important"
    WARNING = "warning"
    CAUTION = "caution"


class RawTag(NamedTuple):
    """Tag payload of a raw ``START`` event. Only the fields relevant to ``kind`` are set."""

    kind: TagKind
    level: int = 0
    id: Optional[CowStr] = None
    classes: Tuple[CowStr, ...] = ()
    attrs: Tuple[Tuple[CowStr, Optional[CowStr]], ...] = ()
    quoteKind: Optional[BlockQuoteKind] = None
    fenced: bool = False
    info: CowStr = EMPTY
    start: Optional[int] = None
    label: CowStr = EMPTY
    alignments: Tuple[Alignment, ...] = ()
    linkType: LinkType = LinkType.INLINE
    destUrl: CowStr = EMPTY
    title: CowStr = EMPTY
    linkId: CowStr = EMPTY
    metadataKind: MetadataBlockKind = MetadataBlockKind.PLUSES_STYLE


class RawEventType(Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    INLINE_HTML = "inline_html"
    FOOTNOTE_REFERENCE = "footnote_reference"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    TASK_LIST_MARKER = "task_list_marker"
    INLINE_MATH = "inline_math"
    DISPLAY_MATH = "display_math"


class RawEvent(NamedTuple):
    """One tokenizer event covering ``[start, end)`` of the source (str indices)."""

    type: RawEventType
    start: int
    end: int
    tag: Optional[RawTag] = None
    tagKind: Optional[TagKind] = None
    text: Optional[CowStr] = None
    checked: bool = False


def startEvent(tag: RawTag, start: int, end: int) -> RawEvent:
    return RawEvent(RawEventType.START, start, end, tag=tag)


def endEvent(tag: RawTag, start: int, end: int) -> RawEvent:
    return RawEvent(RawEventType.END, start, end, tagKind=tag.kind)


RawEventList = List[RawEvent]
