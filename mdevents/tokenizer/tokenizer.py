"""
Tokenizer for mdevents

Runs the block parser, then walks the block tree and emits the flat raw event
stream: ``START``/``END`` pairs around every block and inline container, and
leaf events (text, code, html, breaks, ...) in source order.
"""

import logging
from typing import Iterator, List, Optional, Tuple, cast

from ..options import DEFAULT_PARSE_OPTIONS, ParseOptions
from ..types import TagKind
from .block_parser import Block, BlockParser, BlockType, ListData, Segment
from .events import BlockQuoteKind, CowStr, RawEvent, RawEventList, RawEventType, RawTag, endEvent, startEvent
from .inline_parser import InlineParser
from .syntax import ALERT_RE, splitTableCells

logger = logging.getLogger(__name__)

# Open container: its END event, the children left to emit and whether it is tight
_Frame = Tuple[Optional[RawEvent], Iterator[Block], bool]


class Tokenizer:
    """
    Markdown tokenizer producing ``RawEvent`` values with str-index ranges.

    Usage:
        events = Tokenizer("# Title\\n\\nSome *text*").tokenize()
    """

    def __init__(self, text: str, options: ParseOptions = DEFAULT_PARSE_OPTIONS):
        self.text = text
        self.options = options
        self.events: RawEventList = []
        self._inlineParser = InlineParser(text, {}, options)

    def tokenize(self) -> RawEventList:
        """Tokenize the whole text and return the raw events."""
        blockParser = BlockParser(self.text, self.options)
        document = blockParser.parse()
        self._inlineParser = InlineParser(self.text, blockParser.referenceDefinitions, self.options)
        self.events = []
        stack: List[_Frame] = [(None, iter(document.children), False)]
        while stack:
            closing, children, tight = stack[-1]
            block = next(children, None)
            if block is None:
                stack.pop()
                if closing is not None:
                    self._emit(closing)
                continue
            frame = self._emitBlock(block, tight)
            if frame is not None:
                stack.append(frame)
        logger.debug(f"Tokenized {len(self.text)} characters into {len(self.events)} raw events")
        return self.events

    def _emit(self, event: RawEvent) -> None:
        self.events.append(event)

    def _borrow(self, start: int, end: int) -> CowStr:
        return CowStr.borrow(self.text, start, end)

    def _emitInlines(self, segments: List[Segment]) -> None:
        if segments:
            self.events.extend(self._inlineParser.parse(segments))

    def _openContainer(self, tag: RawTag, block: Block, tight: bool = False) -> _Frame:
        self._emit(startEvent(tag, block.start, block.end))
        return endEvent(tag, block.start, block.end), iter(list(block.children)), tight

    def _emitBlock(self, block: Block, tight: bool) -> Optional[_Frame]:
        """Emit a leaf block, or open a container and return its frame."""
        blockType = block.type
        if blockType is BlockType.PARAGRAPH:
            if tight:
                self._emitInlines(block.segments)
                return None
            tag = RawTag(TagKind.PARAGRAPH)
            self._emit(startEvent(tag, block.start, block.end))
            self._emitInlines(block.segments)
            self._emit(endEvent(tag, block.start, block.end))
        elif blockType is BlockType.HEADING:
            self._emitHeading(block)
        elif blockType is BlockType.THEMATIC_BREAK:
            self._emit(RawEvent(RawEventType.RULE, block.start, block.end))
        elif blockType in (BlockType.FENCED_CODE, BlockType.INDENTED_CODE):
            self._emitCodeBlock(block)
        elif blockType is BlockType.HTML_BLOCK:
            tag = RawTag(TagKind.HTML_BLOCK)
            self._emit(startEvent(tag, block.start, block.end))
            for segment in block.segments:
                if segment.start < segment.lineEnd:
                    self._emit(
                        RawEvent(
                            RawEventType.HTML,
                            segment.start,
                            segment.lineEnd,
                            text=self._borrow(segment.start, segment.lineEnd),
                        )
                    )
            self._emit(endEvent(tag, block.start, block.end))
        elif blockType is BlockType.BLOCK_QUOTE:
            tag = RawTag(TagKind.BLOCK_QUOTE, quoteKind=self._takeAlertKind(block))
            return self._openContainer(tag, block)
        elif blockType is BlockType.LIST:
            listData = cast(ListData, block.listData)
            tag = RawTag(TagKind.LIST, start=listData.start if listData.ordered else None)
            return self._openContainer(tag, block, tight=block.tight)
        elif blockType is BlockType.ITEM:
            tag = RawTag(TagKind.ITEM)
            self._emit(startEvent(tag, block.start, block.end))
            if block.checked is not None and block.taskSpan is not None:
                self._emit(RawEvent(RawEventType.TASK_LIST_MARKER, *block.taskSpan, checked=block.checked))
            return endEvent(tag, block.start, block.end), iter(block.children), tight
        elif blockType is BlockType.FOOTNOTE_DEFINITION:
            tag = RawTag(TagKind.FOOTNOTE_DEFINITION, label=self._borrow(*block.label))
            return self._openContainer(tag, block)
        elif blockType is BlockType.TABLE:
            self._emitTable(block)
        elif blockType is BlockType.METADATA_BLOCK:
            tag = RawTag(TagKind.METADATA_BLOCK, metadataKind=block.metadataKind)
            self._emit(startEvent(tag, block.start, block.end))
            for segment in block.segments:
                self._emit(
                    RawEvent(RawEventType.TEXT, segment.start, segment.end, text=self._borrow(segment.start, segment.end))
                )
            self._emit(endEvent(tag, block.start, block.end))
        elif blockType is BlockType.DEFINITION_LIST:
            return self._openContainer(RawTag(TagKind.DEFINITION_LIST), block)
        elif blockType is BlockType.DEFINITION_TITLE:
            tag = RawTag(TagKind.DEFINITION_LIST_TITLE)
            self._emit(startEvent(tag, block.start, block.end))
            self._emitInlines(block.segments)
            self._emit(endEvent(tag, block.start, block.end))
        elif blockType is BlockType.DEFINITION:
            tag = RawTag(TagKind.DEFINITION_LIST_DEFINITION)
            return self._openContainer(tag, block, tight=len(block.children) == 1)
        else:
            logger.warning(f"Unexpected block {block!r} in document tree, skipping it")
        return None

    def _emitHeading(self, block: Block) -> None:
        attributes = block.headingAttributes
        if attributes is not None:
            tag = RawTag(
                TagKind.HEADING,
                level=block.level,
                id=self._borrow(*attributes.id) if attributes.id is not None else None,
                classes=tuple(self._borrow(*span) for span in attributes.classes),
                attrs=tuple(
                    (self._borrow(*key), self._borrow(*value) if value is not None else None)
                    for key, value in attributes.attrs
                ),
            )
        else:
            tag = RawTag(TagKind.HEADING, level=block.level)
        self._emit(startEvent(tag, block.start, block.end))
        self._emitInlines(block.segments)
        self._emit(endEvent(tag, block.start, block.end))

    def _emitCodeBlock(self, block: Block) -> None:
        fenced = block.type is BlockType.FENCED_CODE
        tag = RawTag(TagKind.CODE_BLOCK, fenced=fenced, info=CowStr.owned(block.info) if fenced else CowStr("", False))
        self._emit(startEvent(tag, block.start, block.end))
        for segment in block.segments:
            if segment.start < segment.lineEnd:
                self._emit(
                    RawEvent(
                        RawEventType.TEXT,
                        segment.start,
                        segment.lineEnd,
                        text=self._borrow(segment.start, segment.lineEnd),
                    )
                )
        self._emit(endEvent(tag, block.start, block.end))

    def _emitTable(self, block: Block) -> None:
        columns = len(block.alignments)
        tableTag = RawTag(TagKind.TABLE, alignments=tuple(block.alignments))
        self._emit(startEvent(tableTag, block.start, block.end))

        header, rows = block.segments[0], block.segments[1:]
        headTag = RawTag(TagKind.TABLE_HEAD)
        self._emit(startEvent(headTag, header.start, header.lineEnd))
        self._emitCells(header, columns)
        self._emit(endEvent(headTag, header.start, header.lineEnd))

        rowTag = RawTag(TagKind.TABLE_ROW)
        for row in rows:
            self._emit(startEvent(rowTag, row.start, row.lineEnd))
            self._emitCells(row, columns)
            self._emit(endEvent(rowTag, row.start, row.lineEnd))
        self._emit(endEvent(tableTag, block.start, block.end))

    def _emitCells(self, row: Segment, columns: int) -> None:
        cells = splitTableCells(self.text, row.start, row.end)[:columns]
        while len(cells) < columns:
            cells.append((row.end, row.end))
        cellTag = RawTag(TagKind.TABLE_CELL)
        for start, end in cells:
            self._emit(startEvent(cellTag, start, end))
            self._emitInlines([Segment(start, end, end)] if end > start else [])
            self._emit(endEvent(cellTag, start, end))

    def _takeAlertKind(self, block: Block) -> Optional[BlockQuoteKind]:
        """Detect a GFM alert marker on the first line of a block quote and strip it."""
        if not self.options & ParseOptions.ENABLE_GFM or not block.children:
            return None
        first = block.children[0]
        if first.type is not BlockType.PARAGRAPH or not first.segments:
            return None
        segment = first.segments[0]
        match = ALERT_RE.match(self.text[segment.start : segment.end])
        if match is None:
            return None
        first.segments = first.segments[1:]
        if not first.segments:
            block.children = block.children[1:]
        else:
            first.start = first.segments[0].start
        return BlockQuoteKind[match.group(1).upper()]
