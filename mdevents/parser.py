"""
Main Event Parser for mdevents

This module provides the MarkdownEventParser class that turns the raw
tokenizer output into the normalized event stream:

1. Tokenization: raw events with str-index ranges and borrowed/owned text
2. Normalization: tag mapping, metadata suppression, substituted text runs,
   autolinking of plain text outside of links
3. Offset conversion: every range becomes a UTF-8 byte range
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Set, cast

from .autolink import AutolinkScanner
from .offsets import ByteOffsetMap
from .options import DEFAULT_PARSE_OPTIONS, ParseOptions, optionsFromConfig
from .tag_mapper import mapTag
from .tokenizer import CowStr, RawEventType, RawTag, Tokenizer
from .types import (
    Code,
    End,
    FencedCode,
    FootnoteReference,
    HardBreak,
    Html,
    InlineHtml,
    LinkType,
    MarkdownEvent,
    MDCodeBlock,
    MDImage,
    MDLink,
    ParseResult,
    RangedEvent,
    Rule,
    SoftBreak,
    Start,
    SubstitutedText,
    TagKind,
    TaskListMarker,
    Text,
)
from .verifier import DEFAULT_SUBSTITUTION_WARN_LENGTH, OffsetVerifier

logger = logging.getLogger(__name__)

EmitFunction = Callable[[int, int, MarkdownEvent], None]

_PASS_THROUGH: Dict[RawEventType, Callable[[], MarkdownEvent]] = {
    RawEventType.HTML: Html,
    RawEventType.INLINE_HTML: InlineHtml,
    RawEventType.FOOTNOTE_REFERENCE: FootnoteReference,
    RawEventType.SOFT_BREAK: SoftBreak,
    RawEventType.HARD_BREAK: HardBreak,
    RawEventType.RULE: Rule,
}


class _SubstitutedRun:
    """Consecutive substituted text chunks, emitted as one ``SubstitutedText``."""

    def __init__(self):
        self.start = 0
        self.end = 0
        self.chunks: List[str] = []

    def add(self, start: int, end: int, chunk: str) -> None:
        if not self.chunks:
            self.start = start
        self.end = end
        self.chunks.append(chunk)

    def flush(self, emit: EmitFunction) -> None:
        if self.chunks:
            emit(self.start, self.end, SubstitutedText("".join(self.chunks)))
            self.chunks = []


def _checkText(text: Any) -> None:
    if not isinstance(text, str):
        raise TypeError(f"Markdown input must be str, got {type(text).__name__}")


class MarkdownEventParser:
    """
    Markdown parser producing a flat stream of ``(ByteRange, MarkdownEvent)`` pairs.

    Instances hold configuration only; every call keeps its state locally, so
    one parser may be shared between threads.
    """

    def __init__(
        self,
        options: ParseOptions = DEFAULT_PARSE_OPTIONS,
        substitutionWarnLength: int = DEFAULT_SUBSTITUTION_WARN_LENGTH,
    ):
        """
        Initialize the event parser.

        Args:
            options: Tokenizer extensions to enable
            substitutionWarnLength: Substituted chunks longer than this many
                UTF-8 bytes are reported in the log
        """
        self.options = options
        self.verifier = OffsetVerifier(substitutionWarnLength)
        self.autolinkScanner = AutolinkScanner()

    @classmethod
    def fromConfig(cls, parserConfig: Optional[Dict[str, Any]] = None) -> "MarkdownEventParser":
        """Create a parser from a ``[parser]`` config table.

        Raises:
            ValueError: If an option name is unknown
        """
        parserConfig = parserConfig or {}
        options = optionsFromConfig(parserConfig)
        warnLength = int(parserConfig.get("substitution-warn-length", DEFAULT_SUBSTITUTION_WARN_LENGTH))
        logger.debug(f"Creating parser with options {options!r}, substitution warn length {warnLength}")
        return cls(options, warnLength)

    def parse(self, text: str) -> ParseResult:
        """
        Parse Markdown text into normalized events.

        Args:
            text: The Markdown text to parse

        Returns:
            ParseResult with the events in document order and the set of
            fenced code block languages

        Raises:
            TypeError: If text is not a str
        """
        _checkText(text)
        offsets = ByteOffsetMap(text)
        events: List[RangedEvent] = []
        languages: Set[str] = set()

        def emit(start: int, end: int, event: MarkdownEvent) -> None:
            events.append((offsets.toByteRange(start, end), event))

        # Open Link and Image tags; their text is never autolinked
        linkDepth = 0
        withinMetadata = False
        pending = _SubstitutedRun()

        for raw in Tokenizer(text, self.options).tokenize():
            if withinMetadata:
                if raw.type is RawEventType.END and raw.tagKind is TagKind.METADATA_BLOCK:
                    withinMetadata = False
                continue

            if raw.type is RawEventType.TEXT:
                rawText = cast(CowStr, raw.text)
                if not rawText.borrowed:
                    self.verifier.verify(text, raw.start, raw.end, rawText.value)
                    pending.add(raw.start, raw.end, rawText.value)
                    continue
                pending.flush(emit)
                if linkDepth:
                    if raw.start < raw.end:
                        emit(raw.start, raw.end, Text())
                else:
                    self._emitTextWithLinks(text, raw.start, raw.end, emit)
                continue

            pending.flush(emit)
            if raw.type is RawEventType.START:
                rawTag = cast(RawTag, raw.tag)
                if rawTag.kind is TagKind.METADATA_BLOCK:
                    withinMetadata = True
                    continue
                tag = mapTag(rawTag)
                if isinstance(tag, (MDLink, MDImage)):
                    linkDepth += 1
                elif isinstance(tag, MDCodeBlock) and isinstance(tag.codeKind, FencedCode):
                    languages.add(tag.codeKind.language)
                emit(raw.start, raw.end, Start(tag))
            elif raw.type is RawEventType.END:
                tagKind = cast(TagKind, raw.tagKind)
                if tagKind in (TagKind.LINK, TagKind.IMAGE):
                    linkDepth -= 1
                emit(raw.start, raw.end, End(tagKind))
            elif raw.type is RawEventType.CODE:
                emit(raw.start + 1, raw.end - 1, Code())
            elif raw.type is RawEventType.TASK_LIST_MARKER:
                emit(raw.start, raw.end, TaskListMarker(raw.checked))
            elif raw.type in _PASS_THROUGH:
                emit(raw.start, raw.end, _PASS_THROUGH[raw.type]())
            # Inline and display math produce no events

        pending.flush(emit)
        return ParseResult(events, languages)

    def parseLinksOnly(self, text: str) -> List[RangedEvent]:
        """
        Autolink plain text without any Markdown tokenization.

        Raises:
            TypeError: If text is not a str
        """
        _checkText(text)
        offsets = ByteOffsetMap(text)
        events: List[RangedEvent] = []

        def emit(start: int, end: int, event: MarkdownEvent) -> None:
            events.append((offsets.toByteRange(start, end), event))

        self._emitTextWithLinks(text, 0, len(text), emit)
        return events

    def _emitTextWithLinks(self, text: str, start: int, end: int, emit: EmitFunction) -> None:
        """Emit ``text[start:end]`` as text events, wrapping every URL into an autolink."""
        cursor = start
        for span in self.autolinkScanner.findLinks(text[start:end], start):
            if span.start > cursor:
                emit(cursor, span.start, Text())
            emit(span.start, span.end, Start(MDLink(linkType=LinkType.AUTOLINK, destUrl=span.url)))
            emit(span.start, span.end, Text())
            emit(span.start, span.end, End(TagKind.LINK))
            cursor = span.end
        if cursor < end:
            emit(cursor, end, Text())


_defaultParser: Optional[MarkdownEventParser] = None


def getDefaultParser() -> MarkdownEventParser:
    """Shared parser with the default options."""
    global _defaultParser
    if _defaultParser is None:
        _defaultParser = MarkdownEventParser()
    return _defaultParser


# Convenience functions for quick parsing


def parse(text: str) -> ParseResult:
    """
    Parse Markdown text into normalized events.

    Args:
        text: Markdown text to parse

    Returns:
        ParseResult(events, languages)
    """
    return getDefaultParser().parse(text)


def parse_links_only(text: str) -> List[RangedEvent]:
    """
    Find bare URLs in plain text and return text and autolink events.

    Args:
        text: Plain text to scan

    Returns:
        Events in source order
    """
    return getDefaultParser().parseLinksOnly(text)
