"""
Inline Parser for mdevents

This module parses the inline content of a leaf block (emphasis, links, code
spans, entities, smart punctuation, ...) into raw events.

The content of a leaf is handed over as a list of source segments, one per
line. The parser works on the segments joined by ``\\n`` and maps every
position back to the source when it emits events, so text tokens taken
verbatim from the input are returned as borrowed slices at their exact
source range.
"""

import bisect
import logging
import re
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, cast

from ..options import DEFAULT_PARSE_OPTIONS, ParseOptions
from ..types import LinkType, TagKind
from .block_parser import Segment
from .events import CowStr, RawEvent, RawEventType, RawTag, endEvent, startEvent
from .syntax import (
    ASCII_PUNCTUATION,
    AUTOLINK_EMAIL_RE,
    AUTOLINK_URI_RE,
    ENTITY_RE,
    FOOTNOTE_REFERENCE_RE,
    HTML_TAG_RE,
    INLINE_MATH_RE,
    decodeEntity,
    isPunctuation,
    isWhitespace,
    normalizeLabel,
    parseLinkDestination,
    parseLinkLabel,
    parseLinkTitle,
    skipWhitespace,
)

logger = logging.getLogger(__name__)

BACKTICKS_RE = re.compile(r"`+")
DISPLAY_MATH_RE = re.compile(r"\$\$((?:[^$\\]|\\.|\$(?!\$))+?)\$\$", re.DOTALL)

LEFT_SINGLE_QUOTE = "‘"
RIGHT_SINGLE_QUOTE = "’"
LEFT_DOUBLE_QUOTE = "“"
RIGHT_DOUBLE_QUOTE = "”"
EN_DASH = "–"
EM_DASH = "—"
ELLIPSIS = "…"


class NodeKind(Enum):
    TEXT = "text"
    OWNED_TEXT = "owned_text"
    CODE = "code"
    INLINE_HTML = "inline_html"
    FOOTNOTE_REFERENCE = "footnote_reference"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    INLINE_MATH = "inline_math"
    DISPLAY_MATH = "display_math"
    CONTAINER = "container"


class InlineNode:
    """Node of the inline tree; positions index the joined content string."""

    def __init__(
        self,
        kind: NodeKind,
        start: int,
        end: int,
        value: Optional[CowStr] = None,
        tag: Optional[RawTag] = None,
    ):
        self.kind = kind
        self.start = start
        self.end = end
        self.value = value
        self.tag = tag
        self.parent: Optional["InlineNode"] = None
        self.firstChild: Optional["InlineNode"] = None
        self.lastChild: Optional["InlineNode"] = None
        self.prev: Optional["InlineNode"] = None
        self.next: Optional["InlineNode"] = None
        self.mergeable = True

    def appendChild(self, child: "InlineNode") -> None:
        child.unlink()
        child.parent = self
        child.prev = self.lastChild
        if self.lastChild is not None:
            self.lastChild.next = child
        else:
            self.firstChild = child
        self.lastChild = child

    def insertAfter(self, sibling: "InlineNode") -> None:
        sibling.unlink()
        sibling.parent = self.parent
        sibling.prev = self
        sibling.next = self.next
        if self.next is not None:
            self.next.prev = sibling
        elif self.parent is not None:
            self.parent.lastChild = sibling
        self.next = sibling

    def unlink(self) -> None:
        if self.prev is not None:
            self.prev.next = self.next
        elif self.parent is not None:
            self.parent.firstChild = self.next
        if self.next is not None:
            self.next.prev = self.prev
        elif self.parent is not None:
            self.parent.lastChild = self.prev
        self.parent = self.prev = self.next = None

    def children(self) -> Iterator["InlineNode"]:
        child = self.firstChild
        while child is not None:
            yield child
            child = child.next

    def __repr__(self) -> str:
        return f"InlineNode(kind={self.kind.value}, span={self.start}..{self.end})"


class Delimiter:
    """Entry of the delimiter stack: a run of ``*``, ``_``, ``~`` or a quote."""

    def __init__(self, char: str, count: int, node: InlineNode, canOpen: bool, canClose: bool):
        self.char = char
        self.count = count
        self.origCount = count
        self.node = node
        self.canOpen = canOpen
        self.canClose = canClose
        self.position = node.start
        self.previous: Optional["Delimiter"] = None
        self.next: Optional["Delimiter"] = None


class Bracket:
    def __init__(self, node: InlineNode, image: bool, previousDelimiter: Optional[Delimiter]):
        self.node = node
        self.image = image
        self.active = True
        self.previousDelimiter = previousDelimiter


class InlineParser:
    """
    Parser for inline Markdown content.

    Implements the CommonMark delimiter-run algorithm for emphasis, the link
    bracket stack and the GFM/pulldown extensions selected by ``options``.
    """

    def __init__(
        self,
        source: str,
        references: Optional[Dict[str, Tuple[str, str]]] = None,
        options: ParseOptions = DEFAULT_PARSE_OPTIONS,
    ):
        self.source = source
        self.references = references or {}
        self.options = options
        self.smart = bool(options & ParseOptions.ENABLE_SMART_PUNCTUATION)
        self.strikethrough = bool(options & ParseOptions.ENABLE_STRIKETHROUGH)
        self.footnotes = bool(options & (ParseOptions.ENABLE_FOOTNOTES | ParseOptions.ENABLE_OLD_FOOTNOTES))
        self.math = bool(options & ParseOptions.ENABLE_MATH)

        special = "\n\\`*_[]!<&"
        if self.strikethrough:
            special += "~"
        if self.smart:
            special += "'\"-."
        if self.math:
            special += "$"
        self._textRunRe = re.compile("[^" + re.escape(special) + "]+")

        self._segments: Sequence[Segment] = ()
        self._segmentStarts: List[int] = []
        self.text = ""
        self.pos = 0
        self.root = InlineNode(NodeKind.CONTAINER, 0, 0)
        self.lastDelimiter: Optional[Delimiter] = None
        self.brackets: List[Bracket] = []

    def parse(self, segments: Sequence[Segment]) -> List[RawEvent]:
        """Parse the content of ``segments`` and return raw events in source order."""
        self._segments = segments
        self._segmentStarts = []
        parts: List[str] = []
        length = 0
        for segment in segments:
            self._segmentStarts.append(length)
            parts.append(self.source[segment.start : segment.end])
            length += segment.end - segment.start + 1
        self.text = "\n".join(parts)
        self.pos = 0
        self.root = InlineNode(NodeKind.CONTAINER, 0, len(self.text))
        self.lastDelimiter = None
        self.brackets = []

        while self.pos < len(self.text):
            self._parseInline()
        self._processEmphasis(None)

        events: List[RawEvent] = []
        self._flatten(self.root, events)
        return events

    # Position mapping

    def _sourceStart(self, pos: int) -> int:
        index = bisect.bisect_right(self._segmentStarts, pos) - 1
        return self._segments[index].start + pos - self._segmentStarts[index]

    def _sourceEnd(self, pos: int) -> int:
        if pos == 0:
            return self._segments[0].start if self._segments else 0
        index = bisect.bisect_right(self._segmentStarts, pos - 1) - 1
        segment = self._segments[index]
        offset = pos - self._segmentStarts[index]
        if offset > segment.end - segment.start:
            # The last character is the line break between two segments
            return segment.lineEnd
        return segment.start + offset

    # Tree building

    def _append(self, node: InlineNode) -> InlineNode:
        self.root.appendChild(node)
        return node

    def _appendText(self, start: int, end: int) -> InlineNode:
        return self._append(InlineNode(NodeKind.TEXT, start, end))

    def _appendOwned(self, start: int, end: int, value: str) -> InlineNode:
        return self._append(InlineNode(NodeKind.OWNED_TEXT, start, end, CowStr.owned(value)))

    def _wrap(self, first: InlineNode, last: Optional[InlineNode], container: InlineNode) -> None:
        """Move the siblings after ``first`` and before ``last`` (or to the end) into ``container``."""
        node = first.next
        while node is not None and node is not last:
            following = node.next
            container.appendChild(node)
            node = following
        first.insertAfter(container)

    # Dispatch

    def _parseInline(self) -> None:
        char = self.text[self.pos]
        if char == "\n":
            self._handleNewline()
        elif char == "\\":
            self._handleBackslash()
        elif char == "`":
            self._handleBackticks()
        elif char in "*_" or char == "~":
            self._handleDelimiters(char)
        elif char in "'\"" and self.smart:
            self._handleQuote(char)
        elif char == "-" and self.smart:
            self._handleDashes()
        elif char == "." and self.smart:
            self._handleEllipsis()
        elif char == "[":
            self._handleOpenBracket()
        elif char == "!":
            self._handleBang()
        elif char == "]":
            self._handleCloseBracket()
        elif char == "<":
            self._handleAngleBracket()
        elif char == "&":
            self._handleEntity()
        elif char == "$" and self.math:
            self._handleMath()
        else:
            match = self._textRunRe.match(self.text, self.pos)
            end = match.end() if match is not None else self.pos + 1
            self._appendText(self.pos, end)
            self.pos = end

    def _handleNewline(self) -> None:
        newline = self.pos
        spacesStart = newline
        while spacesStart > 0 and self.text[spacesStart - 1] == " ":
            spacesStart -= 1

        lastNode = self.root.lastChild
        if lastNode is not None and lastNode.kind is NodeKind.TEXT and lastNode.end == newline:
            lastNode.end = max(lastNode.start, spacesStart)
            if lastNode.start == lastNode.end:
                lastNode.unlink()

        if newline - spacesStart >= 2:
            self._append(InlineNode(NodeKind.HARD_BREAK, spacesStart, newline + 1))
        else:
            self._append(InlineNode(NodeKind.SOFT_BREAK, newline, newline + 1))
        self.pos = newline + 1

    def _handleBackslash(self) -> None:
        start = self.pos
        following = self.text[start + 1 : start + 2]
        if following == "\n":
            self._append(InlineNode(NodeKind.HARD_BREAK, start, start + 2))
            self.pos = start + 2
        elif following and following in ASCII_PUNCTUATION:
            node = self._appendText(start + 1, start + 2)
            node.mergeable = False
            self.pos = start + 2
        else:
            self._appendText(start, start + 1)
            self.pos = start + 1

    def _handleBackticks(self) -> None:
        start = self.pos
        opening = BACKTICKS_RE.match(self.text, start)
        contentStart = cast("re.Match[str]", opening).end()
        tickCount = contentStart - start
        for closing in BACKTICKS_RE.finditer(self.text, contentStart):
            if closing.end() - closing.start() != tickCount:
                continue
            content = self.text[contentStart : closing.start()]
            value = content.replace("\n", " ")
            if len(value) >= 2 and value[0] == " " and value[-1] == " " and value.strip(" "):
                value = value[1:-1]
            self._append(InlineNode(NodeKind.CODE, start, closing.end(), CowStr(value, "\n" not in content)))
            self.pos = closing.end()
            return
        self._appendText(start, contentStart)
        self.pos = contentStart

    def _scanDelimiterRun(self, char: str) -> Tuple[int, bool, bool]:
        start = self.pos
        end = start
        if char in "'\"":
            end += 1
        else:
            while end < len(self.text) and self.text[end] == char:
                end += 1

        before = self.text[start - 1] if start > 0 else ""
        after = self.text[end] if end < len(self.text) else ""
        beforeWhitespace = isWhitespace(before)
        afterWhitespace = isWhitespace(after)
        beforePunctuation = isPunctuation(before)
        afterPunctuation = isPunctuation(after)
        leftFlanking = not afterWhitespace and (not afterPunctuation or beforeWhitespace or beforePunctuation)
        rightFlanking = not beforeWhitespace and (not beforePunctuation or afterWhitespace or afterPunctuation)

        if char == "_":
            canOpen = leftFlanking and (not rightFlanking or beforePunctuation)
            canClose = rightFlanking and (not leftFlanking or afterPunctuation)
        elif char in "'\"":
            canOpen = leftFlanking and not rightFlanking
            canClose = rightFlanking
        else:
            canOpen = leftFlanking
            canClose = rightFlanking
        return end, canOpen, canClose

    def _handleDelimiters(self, char: str) -> None:
        start = self.pos
        end, canOpen, canClose = self._scanDelimiterRun(char)
        node = self._appendText(start, end)
        self.pos = end
        if char == "~" and (not self.strikethrough or end - start > 2):
            return
        if canOpen or canClose:
            self._pushDelimiter(Delimiter(char, end - start, node, canOpen, canClose))

    def _handleQuote(self, char: str) -> None:
        start = self.pos
        end, canOpen, canClose = self._scanDelimiterRun(char)
        node = self._appendOwned(start, end, RIGHT_SINGLE_QUOTE if char == "'" else LEFT_DOUBLE_QUOTE)
        self.pos = end
        if canOpen or canClose:
            self._pushDelimiter(Delimiter(char, 1, node, canOpen, canClose))

    def _handleDashes(self) -> None:
        start = self.pos
        end = start
        while end < len(self.text) and self.text[end] == "-":
            end += 1
        self.pos = end
        count = end - start
        if count == 1:
            self._appendText(start, end)
            return

        if count % 3 == 0:
            emCount, enCount = count // 3, 0
        elif count % 2 == 0:
            emCount, enCount = 0, count // 2
        elif count % 3 == 2:
            emCount, enCount = (count - 2) // 3, 1
        else:
            emCount, enCount = (count - 4) // 3, 2

        pos = start
        for _ in range(emCount):
            self._appendOwned(pos, pos + 3, EM_DASH)
            pos += 3
        for _ in range(enCount):
            self._appendOwned(pos, pos + 2, EN_DASH)
            pos += 2

    def _handleEllipsis(self) -> None:
        start = self.pos
        if self.text.startswith("...", start):
            self._appendOwned(start, start + 3, ELLIPSIS)
            self.pos = start + 3
        else:
            self._appendText(start, start + 1)
            self.pos = start + 1

    def _handleEntity(self) -> None:
        start = self.pos
        match = ENTITY_RE.match(self.text, start)
        decoded = decodeEntity(match) if match is not None else None
        if match is None or decoded is None:
            self._appendText(start, start + 1)
            self.pos = start + 1
            return
        self._appendOwned(start, match.end(), decoded)
        self.pos = match.end()

    def _handleMath(self) -> None:
        start = self.pos
        match = DISPLAY_MATH_RE.match(self.text, start)
        if match is not None:
            self._append(InlineNode(NodeKind.DISPLAY_MATH, start, match.end(), CowStr(match.group(1), True)))
            self.pos = match.end()
            return
        match = INLINE_MATH_RE.match(self.text, start)
        if match is not None:
            self._append(InlineNode(NodeKind.INLINE_MATH, start, match.end(), CowStr(match.group(1), True)))
            self.pos = match.end()
            return
        self._appendText(start, start + 1)
        self.pos = start + 1

    def _handleAngleBracket(self) -> None:
        start = self.pos
        for pattern, linkType in ((AUTOLINK_URI_RE, LinkType.AUTOLINK), (AUTOLINK_EMAIL_RE, LinkType.EMAIL)):
            match = pattern.match(self.text, start)
            if match is None:
                continue
            destination = match.group(1)
            tag = RawTag(TagKind.LINK, linkType=linkType, destUrl=CowStr(destination, True))
            container = self._append(InlineNode(NodeKind.CONTAINER, start, match.end(), tag=tag))
            container.appendChild(InlineNode(NodeKind.TEXT, start + 1, match.end() - 1))
            self.pos = match.end()
            return

        match = HTML_TAG_RE.match(self.text, start)
        if match is not None:
            self._append(InlineNode(NodeKind.INLINE_HTML, start, match.end(), CowStr(match.group(0), True)))
            self.pos = match.end()
            return
        self._appendText(start, start + 1)
        self.pos = start + 1

    # Links and images

    def _handleOpenBracket(self) -> None:
        start = self.pos
        if self.footnotes and self.text.startswith("[^", start):
            match = FOOTNOTE_REFERENCE_RE.match(self.text, start)
            if match is not None:
                label = CowStr(match.group(1), True)
                self._append(InlineNode(NodeKind.FOOTNOTE_REFERENCE, start, match.end(), label))
                self.pos = match.end()
                return
        node = self._appendText(start, start + 1)
        self.brackets.append(Bracket(node, False, self.lastDelimiter))
        self.pos = start + 1

    def _handleBang(self) -> None:
        start = self.pos
        if self.text.startswith("![", start):
            node = self._appendText(start, start + 2)
            self.brackets.append(Bracket(node, True, self.lastDelimiter))
            self.pos = start + 2
        else:
            self._appendText(start, start + 1)
            self.pos = start + 1

    def _handleCloseBracket(self) -> None:
        start = self.pos
        self.pos = start + 1
        if not self.brackets:
            self._appendText(start, start + 1)
            return

        opener = self.brackets[-1]
        link = self._parseLinkTail(opener, start) if opener.active else None
        if link is None:
            self.brackets.pop()
            self._appendText(start, start + 1)
            return

        linkType, destination, title, linkId, end = link
        self.pos = end
        tag = RawTag(
            TagKind.IMAGE if opener.image else TagKind.LINK,
            linkType=linkType,
            destUrl=CowStr.owned(destination),
            title=CowStr.owned(title),
            linkId=CowStr.owned(linkId),
        )
        container = InlineNode(NodeKind.CONTAINER, opener.node.start, end, tag=tag)
        self._wrap(opener.node, None, container)
        opener.node.unlink()

        self._processEmphasis(opener.previousDelimiter)
        self.brackets.pop()
        if not opener.image:
            # Links may not contain other links
            for bracket in self.brackets:
                if not bracket.image:
                    bracket.active = False

    def _parseLinkTail(self, opener: Bracket, closeStart: int) -> Optional[Tuple[LinkType, str, str, str, int]]:
        """Parse what follows ``]``: an inline destination or a reference label."""
        text = self.text
        pos = closeStart + 1
        if pos < len(text) and text[pos] == "(":
            inline = self._parseInlineDestination(pos + 1)
            if inline is not None:
                destination, title, end = inline
                return LinkType.INLINE, destination, title, "", end

        bracketText = text[opener.node.end : closeStart]
        label = parseLinkLabel(text, pos)
        if label is not None and label[0].strip():
            linkType, labelText, end = LinkType.REFERENCE, label[0], label[1]
        elif label is not None:
            linkType, labelText, end = LinkType.COLLAPSED, bracketText, label[1]
        else:
            linkType, labelText, end = LinkType.SHORTCUT, bracketText, pos

        if len(labelText) > 999:
            return None
        reference = self.references.get(normalizeLabel(labelText))
        if reference is None:
            return None
        destination, title = reference
        return linkType, destination, title, labelText, end

    def _parseInlineDestination(self, pos: int) -> Optional[Tuple[str, str, int]]:
        text = self.text
        pos = skipWhitespace(text, pos)
        if pos < len(text) and text[pos] == ")":
            return "", "", pos + 1
        destinationResult = parseLinkDestination(text, pos)
        if destinationResult is None:
            return None
        destination, pos = destinationResult
        afterDestination = pos
        pos = skipWhitespace(text, pos)
        title = ""
        if pos != afterDestination:
            titleResult = parseLinkTitle(text, pos)
            if titleResult is not None:
                title, pos = titleResult
                pos = skipWhitespace(text, pos)
        if pos < len(text) and text[pos] == ")":
            return destination, title, pos + 1
        return None

    # Emphasis

    def _pushDelimiter(self, delimiter: Delimiter) -> None:
        delimiter.previous = self.lastDelimiter
        if self.lastDelimiter is not None:
            self.lastDelimiter.next = delimiter
        self.lastDelimiter = delimiter

    def _removeDelimiter(self, delimiter: Delimiter) -> None:
        if delimiter.previous is not None:
            delimiter.previous.next = delimiter.next
        if delimiter.next is not None:
            delimiter.next.previous = delimiter.previous
        else:
            self.lastDelimiter = delimiter.previous

    def _processEmphasis(self, stackBottom: Optional[Delimiter]) -> None:
        """Match delimiter runs above ``stackBottom`` and wrap them into containers."""
        # Lowest position an opener may have, per closer kind; openers below it never match
        openersBottom: Dict[Tuple[str, bool, int], int] = {}
        closer = self.lastDelimiter if self.lastDelimiter is not stackBottom else None
        while closer is not None and closer.previous is not stackBottom:
            closer = closer.previous

        while closer is not None:
            if not closer.canClose:
                closer = closer.next
                continue

            key = (closer.char, closer.canOpen, closer.origCount % 3)
            opener = self._findOpener(closer, stackBottom, openersBottom.get(key, -1))

            if opener is None:
                openersBottom[key] = closer.position
                if closer.char in "'\"":
                    closer.node.value = CowStr.owned(RIGHT_SINGLE_QUOTE if closer.char == "'" else RIGHT_DOUBLE_QUOTE)
                following = closer.next
                if not closer.canOpen:
                    self._removeDelimiter(closer)
                closer = following
                continue

            if closer.char in "'\"":
                if closer.char == "'":
                    opener.node.value = CowStr.owned(LEFT_SINGLE_QUOTE)
                    closer.node.value = CowStr.owned(RIGHT_SINGLE_QUOTE)
                else:
                    opener.node.value = CowStr.owned(LEFT_DOUBLE_QUOTE)
                    closer.node.value = CowStr.owned(RIGHT_DOUBLE_QUOTE)
                following = closer.next
                self._removeDelimiter(opener)
                self._removeDelimiter(closer)
                closer = following
                continue

            closer = self._matchEmphasis(opener, closer)

        while self.lastDelimiter is not None and self.lastDelimiter is not stackBottom:
            self._removeDelimiter(self.lastDelimiter)

    def _findOpener(self, closer: Delimiter, stackBottom: Optional[Delimiter], floor: int) -> Optional[Delimiter]:
        opener = closer.previous
        while opener is not None and opener is not stackBottom and opener.position >= floor:
            if opener.char == closer.char and opener.canOpen and self._delimitersMatch(opener, closer):
                return opener
            opener = opener.previous
        return None

    def _delimitersMatch(self, opener: Delimiter, closer: Delimiter) -> bool:
        if closer.char == "~":
            return opener.count == closer.count
        if closer.char in "'\"":
            return True
        oddMatch = (
            (closer.canOpen or opener.canClose)
            and closer.origCount % 3 != 0
            and (opener.origCount + closer.origCount) % 3 == 0
        )
        return not oddMatch

    def _matchEmphasis(self, opener: Delimiter, closer: Delimiter) -> Optional[Delimiter]:
        """Wrap the nodes between a matched opener and closer; returns the next closer."""
        if closer.char == "~":
            used = closer.count
            kind = TagKind.STRIKETHROUGH
        else:
            used = 2 if opener.count >= 2 and closer.count >= 2 else 1
            kind = TagKind.STRONG if used == 2 else TagKind.EMPHASIS

        opener.count -= used
        closer.count -= used
        opener.node.end -= used
        container = InlineNode(NodeKind.CONTAINER, opener.node.end, closer.node.start + used, tag=RawTag(kind))
        self._wrap(opener.node, closer.node, container)
        closer.node.start += used

        # Delimiters between the pair can no longer match
        opener.next = closer
        closer.previous = opener
        if opener.count == 0:
            opener.node.unlink()
            self._removeDelimiter(opener)
        if closer.count == 0:
            following = closer.next
            closer.node.unlink()
            self._removeDelimiter(closer)
            return following
        return closer

    # Output

    def _flatten(self, root: InlineNode, events: List[RawEvent]) -> None:
        """Emit the descendants of ``root`` in order, merging adjacent plain text nodes."""
        stack: List[Tuple[Optional[RawEvent], Iterator[InlineNode]]] = [(None, root.children())]
        pending: Optional[InlineNode] = None
        while stack:
            closing, children = stack[-1]
            node = next(children, None)
            if node is not None and node.kind is NodeKind.TEXT and node.mergeable:
                if pending is not None and pending.end == node.start:
                    pending = InlineNode(NodeKind.TEXT, pending.start, node.end)
                else:
                    if pending is not None:
                        self._emitLeaf(pending, events)
                    pending = node
                continue
            if pending is not None:
                self._emitLeaf(pending, events)
                pending = None

            if node is None:
                stack.pop()
                if closing is not None:
                    events.append(closing)
            elif node.kind is NodeKind.CONTAINER:
                tag = cast(RawTag, node.tag)
                start = self._sourceStart(node.start)
                end = self._sourceEnd(node.end)
                events.append(startEvent(tag, start, end))
                stack.append((endEvent(tag, start, end), node.children()))
            else:
                self._emitLeaf(node, events)

    def _emitLeaf(self, node: InlineNode, events: List[RawEvent]) -> None:
        start = self._sourceStart(node.start)
        end = self._sourceEnd(node.end)
        if node.kind is NodeKind.TEXT:
            if node.start < node.end:
                events.append(RawEvent(RawEventType.TEXT, start, end, text=CowStr.borrow(self.source, start, end)))
        else:
            events.append(RawEvent(self._eventType(node.kind), start, end, text=node.value))

    @staticmethod
    def _eventType(kind: NodeKind) -> RawEventType:
        return {
            NodeKind.OWNED_TEXT: RawEventType.TEXT,
            NodeKind.CODE: RawEventType.CODE,
            NodeKind.INLINE_HTML: RawEventType.INLINE_HTML,
            NodeKind.FOOTNOTE_REFERENCE: RawEventType.FOOTNOTE_REFERENCE,
            NodeKind.SOFT_BREAK: RawEventType.SOFT_BREAK,
            NodeKind.HARD_BREAK: RawEventType.HARD_BREAK,
            NodeKind.INLINE_MATH: RawEventType.INLINE_MATH,
            NodeKind.DISPLAY_MATH: RawEventType.DISPLAY_MATH,
        }[kind]
