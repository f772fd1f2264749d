"""
Block Parser for mdevents

This module splits the source into lines and builds the block structure of a
document: containers (block quotes, lists, footnote definitions, definition
lists) and leaves (paragraphs, headings, code, HTML, tables). Leaves keep the
source spans of their content lines; inline parsing happens later.

The line-by-line algorithm follows the CommonMark reference parser: match the
open containers, try to start new blocks, then add the rest of the line to
the deepest open block (or lazily continue a paragraph).
"""

import logging
import re
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple, cast

from ..options import DEFAULT_PARSE_OPTIONS, ParseOptions
from ..types import Alignment, MetadataBlockKind
from .syntax import (
    ATX_CLOSING_RE,
    ATX_HEADING_RE,
    BULLET_MARKER_RE,
    CLOSING_FENCE_RE,
    CODE_FENCE_RE,
    DEFINITION_MARKER_RE,
    FOOTNOTE_DEFINITION_RE,
    HTML_BLOCK_CLOSE,
    HTML_BLOCK_OPEN,
    ORDERED_MARKER_RE,
    SETEXT_UNDERLINE_RE,
    TABLE_DELIMITER_ROW_RE,
    TASK_MARKER_RE,
    THEMATIC_BREAK_RE,
    HeadingAttributes,
    isSpaceOrTab,
    normalizeLabel,
    parseHeadingAttributes,
    parseReferenceDefinition,
    splitTableCells,
    unescapeString,
)

logger = logging.getLogger(__name__)

CODE_INDENT = 4


class BlockType(Enum):
    """Types of blocks built by the block parser."""

    DOCUMENT = "document"
    BLOCK_QUOTE = "block_quote"
    LIST = "list"
    ITEM = "item"
    FOOTNOTE_DEFINITION = "footnote_definition"
    DEFINITION_LIST = "definition_list"
    DEFINITION_TITLE = "definition_title"
    DEFINITION = "definition"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    THEMATIC_BREAK = "thematic_break"
    FENCED_CODE = "fenced_code"
    INDENTED_CODE = "indented_code"
    HTML_BLOCK = "html_block"
    TABLE = "table"
    METADATA_BLOCK = "metadata_block"


FLOW_CONTAINERS = frozenset(
    {
        BlockType.DOCUMENT,
        BlockType.BLOCK_QUOTE,
        BlockType.ITEM,
        BlockType.FOOTNOTE_DEFINITION,
        BlockType.DEFINITION,
    }
)
ACCEPTS_LINES = frozenset(
    {
        BlockType.PARAGRAPH,
        BlockType.FENCED_CODE,
        BlockType.INDENTED_CODE,
        BlockType.HTML_BLOCK,
        BlockType.TABLE,
    }
)


class Segment(NamedTuple):
    """Content of one source line: ``[start, end)`` plus the offset after its line ending."""

    start: int
    end: int
    lineEnd: int


class ListData(NamedTuple):
    ordered: bool
    marker: str  # bullet character, or the delimiter of an ordered marker
    start: Optional[int]
    markerOffset: int
    padding: int


class Block:
    """A node of the block tree with its source span."""

    def __init__(self, blockType: BlockType, start: int):
        self.type = blockType
        self.start = start
        self.end = start
        self.parent: Optional["Block"] = None
        self.children: List["Block"] = []
        self.isOpen = True
        self.lastLineBlank = False
        self.startLine = 0
        self.segments: List[Segment] = []

        self.level = 0
        self.headingAttributes: Optional[HeadingAttributes] = None
        self.fenceChar = ""
        self.fenceLength = 0
        self.fenceOffset = 0
        self.info = ""
        self.htmlType = 0
        self.listData: Optional[ListData] = None
        self.tight = True
        self.checked: Optional[bool] = None
        self.taskSpan: Optional[Tuple[int, int]] = None
        self.label: Tuple[int, int] = (start, start)
        self.metadataKind = MetadataBlockKind.PLUSES_STYLE
        self.alignments: List[Alignment] = []

    def addChild(self, child: "Block") -> None:
        child.parent = self
        self.children.append(child)

    @property
    def lastChild(self) -> Optional["Block"]:
        return self.children[-1] if self.children else None

    def __repr__(self) -> str:
        return f"Block(type={self.type.value}, span={self.start}..{self.end})"


class BlockParser:
    """
    Parser for block-level Markdown structure.

    Produces a tree of ``Block`` nodes plus the link reference definitions
    found along the way (keyed by normalized label).
    """

    def __init__(self, text: str, options: ParseOptions = DEFAULT_PARSE_OPTIONS):
        self.text = text
        self.options = options
        self.referenceDefinitions: Dict[str, Tuple[str, str]] = {}

        self.document = Block(BlockType.DOCUMENT, 0)
        self.tip: Optional[Block] = self.document
        self.oldTip: Block = self.document
        self.lastMatchedContainer: Block = self.document
        self.allClosed = True

        self.line = Segment(0, 0, 0)
        self.lineText = ""
        self.lineNumber = 0
        self.pos = 0
        self.column = 0
        self.nextNonspace = 0
        self.nextNonspaceColumn = 0
        self.indent = 0
        self.indented = False
        self.blank = False
        self.markerStart = 0

    def parse(self) -> Block:
        """Parse the whole text and return the document block."""
        lines = self._splitLines()
        firstLine = self._parseMetadataBlock(lines)
        for lineNumber in range(firstLine, len(lines)):
            self._incorporateLine(lines[lineNumber], lineNumber)
        while self.tip is not None:
            self._finalize(self.tip)
        self.document.end = len(self.text)
        return self.document

    def _splitLines(self) -> List[Segment]:
        lines: List[Segment] = []
        text = self.text
        start = 0
        while start < len(text):
            newline = text.find("\n", start)
            if newline < 0:
                lines.append(Segment(start, len(text), len(text)))
                break
            end = newline - 1 if newline > start and text[newline - 1] == "\r" else newline
            lines.append(Segment(start, end, newline + 1))
            start = newline + 1
        return lines

    def _parseMetadataBlock(self, lines: List[Segment]) -> int:
        """Recognize front matter on the first line; returns the first line left to parse."""
        if not lines:
            return 0
        first = self.text[lines[0].start : lines[0].end].rstrip(" \t")
        if first == "+++" and self.options & ParseOptions.ENABLE_PLUSES_DELIMITED_METADATA_BLOCKS:
            kind, closers = MetadataBlockKind.PLUSES_STYLE, ("+++",)
        elif first == "---" and self.options & ParseOptions.ENABLE_YAML_STYLE_METADATA_BLOCKS:
            kind, closers = MetadataBlockKind.YAML_STYLE, ("---", "...")
        else:
            return 0

        for index in range(1, len(lines)):
            if self.text[lines[index].start : lines[index].end].rstrip(" \t") in closers:
                block = Block(BlockType.METADATA_BLOCK, 0)
                block.metadataKind = kind
                block.end = lines[index].lineEnd
                block.isOpen = False
                if index > 1:
                    block.segments.append(Segment(lines[1].start, lines[index].start, lines[index].start))
                self.document.addChild(block)
                return index + 1
        return 0

    # Line state

    def _peek(self, pos: int) -> str:
        return self.text[pos] if pos < self.line.end else ""

    def _findNextNonspace(self) -> None:
        pos = self.pos
        column = self.column
        while pos < self.line.end:
            char = self.text[pos]
            if char == " ":
                column += 1
            elif char == "\t":
                column += 4 - column % 4
            else:
                break
            pos += 1
        self.nextNonspace = pos
        self.nextNonspaceColumn = column
        self.indent = column - self.column
        self.indented = self.indent >= CODE_INDENT
        self.blank = pos >= self.line.end

    def _advanceOffset(self, count: int, columns: bool = False) -> None:
        while count > 0 and self.pos < self.line.end:
            if columns and self.text[self.pos] == "\t":
                width = 4 - self.column % 4
                self.column += width
                count -= width
            else:
                self.column += 1
                count -= 1
            self.pos += 1

    def _advanceNextNonspace(self) -> None:
        self.pos = self.nextNonspace
        self.column = self.nextNonspaceColumn

    def _advanceToLineEnd(self) -> None:
        self.column += self.line.end - self.pos
        self.pos = self.line.end

    def _match(self, pattern: "re.Pattern[str]", pos: Optional[int] = None) -> Optional["re.Match[str]"]:
        """Match ``pattern`` against the current line at ``pos`` (default: next non-space)."""
        if pos is None:
            pos = self.nextNonspace
        return pattern.match(self.lineText, pos - self.line.start)

    # Tree maintenance

    def _touch(self, block: Optional[Block], end: int) -> None:
        while block is not None:
            if end > block.end:
                block.end = end
            block = block.parent

    def _canContain(self, parent: Block, childType: BlockType) -> bool:
        if parent.type in FLOW_CONTAINERS:
            return childType not in (BlockType.ITEM, BlockType.DEFINITION_TITLE, BlockType.DEFINITION)
        if parent.type is BlockType.LIST:
            return childType is BlockType.ITEM
        if parent.type is BlockType.DEFINITION_LIST:
            return childType in (BlockType.DEFINITION_TITLE, BlockType.DEFINITION)
        return False

    def _addChild(self, blockType: BlockType, start: int) -> Block:
        tip = cast(Block, self.tip)
        while not self._canContain(tip, blockType):
            self._finalize(tip)
            tip = cast(Block, self.tip)
        block = Block(blockType, start)
        block.startLine = self.lineNumber
        tip.addChild(block)
        self.tip = block
        self._touch(block, self.line.lineEnd)
        return block

    def _closeUnmatchedBlocks(self) -> None:
        if not self.allClosed:
            while self.oldTip is not self.lastMatchedContainer:
                parent = self.oldTip.parent
                self._finalize(self.oldTip)
                self.oldTip = cast(Block, parent)
            self.allClosed = True

    def _addLine(self) -> None:
        tip = cast(Block, self.tip)
        start = self.pos
        if tip.type in (BlockType.PARAGRAPH, BlockType.TABLE):
            while start < self.line.end and isSpaceOrTab(self.text[start]):
                start += 1
        tip.segments.append(Segment(start, self.line.end, self.line.lineEnd))
        if not self.blank or tip.type in (BlockType.FENCED_CODE, BlockType.HTML_BLOCK):
            self._touch(tip, self.line.lineEnd)

    def _setLastLineBlank(self, container: Block, lastLineBlank: bool) -> None:
        block: Optional[Block] = container
        while block is not None:
            block.lastLineBlank = lastLineBlank
            block = block.parent

    # Main loop

    def _incorporateLine(self, line: Segment, lineNumber: int) -> None:
        self.line = line
        self.lineText = self.text[line.start : line.end]
        self.lineNumber = lineNumber
        self.pos = line.start
        self.column = 0
        self.oldTip = self.tip if self.tip is not None else self.document

        container = self.document
        allMatched = True
        while container.lastChild is not None and container.lastChild.isOpen:
            container = container.lastChild
            self._findNextNonspace()
            result = self._continue(container)
            if result == 2:
                return
            if result == 1:
                allMatched = False
                container = cast(Block, container.parent)
                break

        self.allClosed = container is self.oldTip
        self.lastMatchedContainer = container

        matchedLeaf = container.type is not BlockType.PARAGRAPH and container.type in ACCEPTS_LINES
        lineConsumed = False
        while not matchedLeaf:
            self._findNextNonspace()
            result = self._tryBlockStarts(container)
            if result == 0:
                self._advanceNextNonspace()
                break
            container = cast(Block, self.tip)
            if result == 2:
                matchedLeaf = True
            elif result == 3:
                matchedLeaf = True
                lineConsumed = True

        if lineConsumed:
            self._setLastLineBlank(container, False)
            return

        if not self.allClosed and not self.blank and cast(Block, self.tip).type is BlockType.PARAGRAPH:
            # Lazy paragraph continuation
            self._addLine()
            return

        self._closeUnmatchedBlocks()
        lastLineBlank = self.blank and not (
            container.type is BlockType.BLOCK_QUOTE
            or container.type is BlockType.FENCED_CODE
            or (
                container.type in (BlockType.ITEM, BlockType.DEFINITION)
                and not container.children
                and container.startLine == lineNumber
            )
        )
        self._setLastLineBlank(container, lastLineBlank)

        if container.type in ACCEPTS_LINES:
            self._addLine()
            if container.type is BlockType.HTML_BLOCK and 1 <= container.htmlType <= 5:
                closer = cast("re.Pattern[str]", HTML_BLOCK_CLOSE[container.htmlType])
                if closer.search(self.lineText, self.pos - line.start):
                    self._finalize(container)
        elif not self.blank:
            self._addChild(BlockType.PARAGRAPH, self.nextNonspace)
            self._advanceNextNonspace()
            self._addLine()

    def _continue(self, container: Block) -> int:
        """Try to continue an open block on the current line.

        Returns 0 when matched, 1 when not matched and 2 when the line was
        consumed entirely (a closing code fence).
        """
        blockType = container.type
        if blockType is BlockType.BLOCK_QUOTE:
            if not self.indented and self._peek(self.nextNonspace) == ">":
                self._advanceNextNonspace()
                self._advanceOffset(1)
                if isSpaceOrTab(self._peek(self.pos)):
                    self._advanceOffset(1, True)
                self._touch(container, self.line.lineEnd)
                return 0
            return 1

        if blockType in (BlockType.ITEM, BlockType.DEFINITION):
            listData = cast(ListData, container.listData)
            if self.blank:
                if not container.children:
                    return 1
                self._advanceNextNonspace()
            elif self.indent >= listData.markerOffset + listData.padding:
                self._advanceOffset(listData.markerOffset + listData.padding, True)
            else:
                return 1
            return 0

        if blockType is BlockType.FOOTNOTE_DEFINITION:
            if self.blank:
                self._advanceNextNonspace()
            elif self.indent >= CODE_INDENT:
                self._advanceOffset(CODE_INDENT, True)
            else:
                return 1
            return 0

        if blockType is BlockType.FENCED_CODE:
            match = None
            if self.indent <= 3 and self._peek(self.nextNonspace) == container.fenceChar:
                match = self._match(CLOSING_FENCE_RE)
            if match is not None and len(match.group(0)) >= container.fenceLength:
                self._touch(container, self.line.lineEnd)
                self._finalize(container)
                return 2
            remaining = container.fenceOffset
            while remaining > 0 and isSpaceOrTab(self._peek(self.pos)):
                self._advanceOffset(1, True)
                remaining -= 1
            return 0

        if blockType is BlockType.INDENTED_CODE:
            if self.indented:
                self._advanceOffset(CODE_INDENT, True)
            elif self.blank:
                self._advanceNextNonspace()
            else:
                return 1
            return 0

        if blockType is BlockType.HTML_BLOCK:
            return 1 if self.blank and container.htmlType in (6, 7) else 0

        if blockType is BlockType.PARAGRAPH:
            return 1 if self.blank else 0

        if blockType is BlockType.TABLE:
            return 1 if self.blank or self._interruptsTable() else 0

        if blockType in (BlockType.LIST, BlockType.DEFINITION_LIST):
            return 0

        return 1

    def _interruptsTable(self) -> bool:
        if self.indented:
            return False
        if self._peek(self.nextNonspace) == ">":
            return True
        for pattern in (ATX_HEADING_RE, CODE_FENCE_RE, THEMATIC_BREAK_RE):
            if self._match(pattern):
                return True
        for htmlType in range(1, 7):
            opener = cast("re.Pattern[str]", HTML_BLOCK_OPEN[htmlType])
            if self._match(opener):
                return True
        return False

    # Block starts

    def _tryBlockStarts(self, container: Block) -> int:
        """Try every block start in precedence order.

        Returns 0 when nothing started, 1 for a new container, 2 for a new
        leaf that takes the rest of the line and 3 for a leaf that consumed
        the whole line.
        """
        starts = (
            self._startBlockQuote,
            self._startAtxHeading,
            self._startFencedCode,
            self._startHtmlBlock,
            self._startSetextHeading,
            self._startTable,
            self._startThematicBreak,
            self._startFootnoteDefinition,
            self._startDefinition,
            self._startListItem,
            self._startIndentedCode,
        )
        for start in starts:
            result = start(container)
            if result:
                return result
        return 0

    def _startBlockQuote(self, container: Block) -> int:
        if self.indented or self._peek(self.nextNonspace) != ">":
            return 0
        self._advanceNextNonspace()
        self._advanceOffset(1)
        if isSpaceOrTab(self._peek(self.pos)):
            self._advanceOffset(1, True)
        self._closeUnmatchedBlocks()
        self._addChild(BlockType.BLOCK_QUOTE, self.nextNonspace)
        return 1

    def _startAtxHeading(self, container: Block) -> int:
        if self.indented:
            return 0
        match = self._match(ATX_HEADING_RE)
        if match is None:
            return 0
        markerStart = self.nextNonspace
        level = len(match.group(0).rstrip(" \t"))
        self._advanceNextNonspace()
        self._advanceOffset(len(match.group(0)))
        self._closeUnmatchedBlocks()
        heading = self._addChild(BlockType.HEADING, markerStart)
        heading.level = level

        contentStart = self.pos
        contentEnd = self.line.end
        while contentEnd > contentStart and isSpaceOrTab(self.text[contentEnd - 1]):
            contentEnd -= 1
        closing = ATX_CLOSING_RE.search(self.text[contentStart:contentEnd])
        if closing is not None:
            contentEnd = contentStart + closing.start()
        contentStart, contentEnd = self._applyHeadingAttributes(heading, contentStart, contentEnd)
        if contentEnd > contentStart:
            heading.segments.append(Segment(contentStart, contentEnd, contentEnd))
        self._advanceToLineEnd()
        return 3

    def _applyHeadingAttributes(self, heading: Block, start: int, end: int) -> Tuple[int, int]:
        if not self.options & ParseOptions.ENABLE_HEADING_ATTRIBUTES:
            return start, end
        attributes = parseHeadingAttributes(self.text, start, end)
        if attributes is None:
            return start, end
        heading.headingAttributes = attributes
        return start, attributes.contentEnd

    def _startFencedCode(self, container: Block) -> int:
        if self.indented:
            return 0
        match = self._match(CODE_FENCE_RE)
        if match is None:
            return 0
        fence = match.group(0)
        fenceOffset = self.indent
        markerStart = self.nextNonspace
        self._closeUnmatchedBlocks()
        block = self._addChild(BlockType.FENCED_CODE, markerStart)
        block.fenceChar = fence[0]
        block.fenceLength = len(fence)
        block.fenceOffset = fenceOffset
        block.info = unescapeString(self.text[markerStart + len(fence) : self.line.end].strip(" \t"))
        self._advanceNextNonspace()
        self._advanceToLineEnd()
        return 3

    def _startHtmlBlock(self, container: Block) -> int:
        if self.indented or self._peek(self.nextNonspace) != "<":
            return 0
        for htmlType in range(1, 8):
            opener = cast("re.Pattern[str]", HTML_BLOCK_OPEN[htmlType])
            if not self._match(opener):
                continue
            if htmlType == 7 and (container.type is BlockType.PARAGRAPH or self._isLazyParagraphLine()):
                return 0
            self._closeUnmatchedBlocks()
            block = self._addChild(BlockType.HTML_BLOCK, self.pos)
            block.htmlType = htmlType
            return 2
        return 0

    def _isLazyParagraphLine(self) -> bool:
        return not self.allClosed and not self.blank and self.tip is not None and self.tip.type is BlockType.PARAGRAPH

    def _startSetextHeading(self, container: Block) -> int:
        if self.indented or container.type is not BlockType.PARAGRAPH:
            return 0
        match = self._match(SETEXT_UNDERLINE_RE)
        if match is None:
            return 0
        self._closeUnmatchedBlocks()
        self._extractReferenceDefinitions(container)
        if not container.segments:
            return 0
        container.type = BlockType.HEADING
        container.level = 1 if match.group(0)[0] == "=" else 2
        last = container.segments[-1]
        end = self._trimEnd(last.start, last.end)
        start, end = self._applyHeadingAttributes(container, last.start, end)
        container.segments[-1] = Segment(start, end, last.lineEnd)
        self._touch(container, self.line.lineEnd)
        self._advanceToLineEnd()
        return 3

    def _startTable(self, container: Block) -> int:
        if (
            not self.options & ParseOptions.ENABLE_TABLES
            or self.indented
            or container.type is not BlockType.PARAGRAPH
            or len(container.segments) != 1
        ):
            return 0
        match = self._match(TABLE_DELIMITER_ROW_RE)
        if match is None:
            return 0
        header = container.segments[0]
        delimiterCells = splitTableCells(self.text, self.nextNonspace, self.line.end)
        headerCells = splitTableCells(self.text, header.start, header.end)
        hasPipe = "|" in self.lineText or "|" in self.text[header.start : header.end]
        if not hasPipe or len(delimiterCells) != len(headerCells):
            return 0
        self._closeUnmatchedBlocks()
        container.type = BlockType.TABLE
        container.alignments = [self._cellAlignment(start, end) for start, end in delimiterCells]
        self._touch(container, self.line.lineEnd)
        self._advanceToLineEnd()
        return 3

    def _cellAlignment(self, start: int, end: int) -> Alignment:
        cell = self.text[start:end]
        if cell.startswith(":") and cell.endswith(":") and len(cell) > 1:
            return Alignment.CENTER
        if cell.startswith(":"):
            return Alignment.LEFT
        if cell.endswith(":"):
            return Alignment.RIGHT
        return Alignment.NONE

    def _startThematicBreak(self, container: Block) -> int:
        if self.indented or self._match(THEMATIC_BREAK_RE) is None:
            return 0
        self._closeUnmatchedBlocks()
        self._addChild(BlockType.THEMATIC_BREAK, self.nextNonspace)
        self._advanceToLineEnd()
        return 3

    def _startFootnoteDefinition(self, container: Block) -> int:
        if self.indented or not self.options & (ParseOptions.ENABLE_FOOTNOTES | ParseOptions.ENABLE_OLD_FOOTNOTES):
            return 0
        match = self._match(FOOTNOTE_DEFINITION_RE)
        if match is None:
            return 0
        markerStart = self.nextNonspace
        self._closeUnmatchedBlocks()
        block = self._addChild(BlockType.FOOTNOTE_DEFINITION, markerStart)
        block.label = (markerStart + 2, markerStart + 2 + len(match.group(1)))
        self._advanceNextNonspace()
        self._advanceOffset(len(match.group(0)), True)
        return 1

    def _startDefinition(self, container: Block) -> int:
        if self.indented or not self.options & ParseOptions.ENABLE_DEFINITION_LIST:
            return 0
        if self._match(DEFINITION_MARKER_RE) is None:
            return 0

        if container.type is BlockType.PARAGRAPH:
            self._closeUnmatchedBlocks()
            self._extractReferenceDefinitions(container)
            if not container.segments:
                return 0
            self._convertToDefinitionTitle(container)
        elif container.type is not BlockType.DEFINITION_LIST:
            previous = container.lastChild
            if previous is None or previous.type is not BlockType.DEFINITION_LIST:
                return 0
            self._closeUnmatchedBlocks()
            previous.isOpen = True
            self.tip = previous

        self._closeUnmatchedBlocks()
        markerStart = self.nextNonspace
        markerOffset = self.indent
        self._advanceNextNonspace()
        self._advanceOffset(1)
        spacesStartColumn = self.column
        while self.column - spacesStartColumn < 5 and isSpaceOrTab(self._peek(self.pos)):
            self._advanceOffset(1, True)
        spaces = self.column - spacesStartColumn
        if spaces >= 5:
            spaces = 1
        definition = self._addChild(BlockType.DEFINITION, markerStart)
        definition.listData = ListData(False, ":", None, markerOffset, 1 + spaces)
        return 1

    def _convertToDefinitionTitle(self, paragraph: Block) -> None:
        self._finalizeParagraph(paragraph)
        parent = cast(Block, paragraph.parent)
        parent.children.pop()
        previous = parent.lastChild
        if previous is not None and previous.type is BlockType.DEFINITION_LIST:
            definitionList = previous
            definitionList.isOpen = True
        else:
            definitionList = Block(BlockType.DEFINITION_LIST, paragraph.start)
            definitionList.startLine = paragraph.startLine
            parent.addChild(definitionList)
        paragraph.type = BlockType.DEFINITION_TITLE
        paragraph.isOpen = False
        definitionList.addChild(paragraph)
        self._touch(definitionList, paragraph.end)
        self.tip = definitionList

    def _startListItem(self, container: Block) -> int:
        if self.indented and container.type is not BlockType.LIST:
            return 0
        data = self._parseListMarker(container)
        if data is None:
            return 0
        self._closeUnmatchedBlocks()
        tip = cast(Block, self.tip)
        if tip.type is not BlockType.LIST or not self._listsMatch(tip.listData, data):
            listBlock = self._addChild(BlockType.LIST, self.markerStart)
            listBlock.listData = data
        item = self._addChild(BlockType.ITEM, self.markerStart)
        item.listData = data
        self._parseTaskMarker(item)
        return 1

    def _parseListMarker(self, container: Block) -> Optional[ListData]:
        if self.indent >= CODE_INDENT:
            return None
        match = self._match(BULLET_MARKER_RE)
        if match is not None:
            ordered, marker, start = False, match.group(0), None
        else:
            match = self._match(ORDERED_MARKER_RE)
            if match is None:
                return None
            if container.type is BlockType.PARAGRAPH and int(match.group(1)) != 1:
                return None
            ordered, marker, start = True, match.group(2), int(match.group(1))

        markerLength = len(match.group(0))
        afterMarker = self.nextNonspace + markerLength
        if not (afterMarker >= self.line.end or isSpaceOrTab(self.text[afterMarker])):
            return None
        if container.type is BlockType.PARAGRAPH and not self.text[afterMarker : self.line.end].strip(" \t"):
            return None

        markerOffset = self.indent
        self.markerStart = self.nextNonspace
        self._advanceNextNonspace()
        self._advanceOffset(markerLength, True)
        spacesStartColumn = self.column
        spacesStartPos = self.pos
        while self.column - spacesStartColumn < 5 and isSpaceOrTab(self._peek(self.pos)):
            self._advanceOffset(1, True)
        blankItem = self.pos >= self.line.end
        spacesAfterMarker = self.column - spacesStartColumn
        if spacesAfterMarker >= 5 or spacesAfterMarker < 1 or blankItem:
            padding = markerLength + 1
            self.column = spacesStartColumn
            self.pos = spacesStartPos
            if isSpaceOrTab(self._peek(self.pos)):
                self._advanceOffset(1, True)
        else:
            padding = markerLength + spacesAfterMarker
        return ListData(ordered, marker, start, markerOffset, padding)

    def _listsMatch(self, current: Optional[ListData], data: ListData) -> bool:
        return current is not None and current.ordered == data.ordered and current.marker == data.marker

    def _parseTaskMarker(self, item: Block) -> None:
        if not self.options & ParseOptions.ENABLE_TASKLISTS:
            return
        match = self._match(TASK_MARKER_RE, self.pos)
        if match is None:
            return
        item.checked = match.group(1) != " "
        item.taskSpan = (self.pos, self.pos + 3)
        self._advanceOffset(3)
        while isSpaceOrTab(self._peek(self.pos)):
            self._advanceOffset(1, True)

    def _startIndentedCode(self, container: Block) -> int:
        if not self.indented or cast(Block, self.tip).type is BlockType.PARAGRAPH or self.blank:
            return 0
        self._advanceOffset(CODE_INDENT, True)
        self._closeUnmatchedBlocks()
        self._addChild(BlockType.INDENTED_CODE, self.pos)
        return 2

    # Finalization

    def _finalize(self, block: Block) -> None:
        block.isOpen = False
        if block.type is BlockType.PARAGRAPH:
            self._finalizeParagraph(block)
        elif block.type is BlockType.INDENTED_CODE:
            while block.segments and not self.text[block.segments[-1].start : block.segments[-1].end].strip():
                block.segments.pop()
            if block.segments:
                block.end = block.segments[-1].lineEnd
        elif block.type is BlockType.LIST:
            block.tight = self._isTight(block)
        self.tip = block.parent

    def _finalizeParagraph(self, block: Block) -> None:
        self._extractReferenceDefinitions(block)
        if not block.segments:
            if block.parent is not None and block in block.parent.children:
                block.parent.children.remove(block)
            return
        last = block.segments[-1]
        block.segments[-1] = Segment(last.start, self._trimEnd(last.start, last.end), last.lineEnd)
        block.start = block.segments[0].start

    def _trimEnd(self, start: int, end: int) -> int:
        while end > start and isSpaceOrTab(self.text[end - 1]):
            end -= 1
        return end

    def _extractReferenceDefinitions(self, block: Block) -> None:
        """Consume link reference definitions at the start of a paragraph."""
        footnotes = self.options & (ParseOptions.ENABLE_FOOTNOTES | ParseOptions.ENABLE_OLD_FOOTNOTES)
        while block.segments:
            first = block.segments[0]
            if self.text[first.start : first.start + 1] != "[":
                return
            if footnotes and self.text[first.start : first.start + 2] == "[^":
                return
            joined, lineStarts = self._joinSegments(block.segments)
            definition = parseReferenceDefinition(joined, 0)
            if definition is None:
                return
            key = normalizeLabel(definition.label)
            if key not in self.referenceDefinitions:
                self.referenceDefinitions[key] = (definition.destination, definition.title)
            else:
                logger.debug(f"Ignoring duplicate link reference definition [{definition.label}]")
            consumedLines = sum(1 for lineStart in lineStarts if lineStart < definition.end)
            del block.segments[:consumedLines]

    def _joinSegments(self, segments: List[Segment]) -> Tuple[str, List[int]]:
        parts: List[str] = []
        lineStarts: List[int] = []
        length = 0
        for segment in segments:
            lineStarts.append(length)
            part = self.text[segment.start : segment.end] + "\n"
            parts.append(part)
            length += len(part)
        return "".join(parts), lineStarts

    def _isTight(self, listBlock: Block) -> bool:
        items = listBlock.children
        for itemIndex, item in enumerate(items):
            isLastItem = itemIndex == len(items) - 1
            if self._endsWithBlankLine(item) and not isLastItem:
                return False
            for childIndex, child in enumerate(item.children):
                isLastChild = childIndex == len(item.children) - 1
                if self._endsWithBlankLine(child) and not (isLastItem and isLastChild):
                    return False
        return True

    def _endsWithBlankLine(self, block: Optional[Block]) -> bool:
        while block is not None:
            if block.lastLineBlank:
                return True
            if block.type in (BlockType.LIST, BlockType.ITEM):
                block = block.lastChild
            else:
                return False
        return False
