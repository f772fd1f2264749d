"""
mdevents v1.0

Markdown to event stream normalizer.

This package provides:
- A CommonMark-style tokenizer with GFM extensions, smart punctuation,
  footnotes, heading attributes, metadata blocks and definition lists
- Normalization of the token stream into flat ``(ByteRange, event)`` pairs
- Detection of substituted text (decoded entities, smart punctuation)
- Autolinking of bare URLs in plain text

Usage:
    from mdevents import parse, parse_links_only

    events, languages = parse("See https://example.com and `code`")
    for byteRange, event in events:
        print(byteRange, event)

    linkEvents = parse_links_only("plain https://a.b text")
"""

from .autolink import AutolinkScanner, LinkSpan
from .offsets import ByteOffsetMap
from .options import ALL_OPTIONS, DEFAULT_PARSE_OPTIONS, EXCLUDED_PARSE_OPTIONS, ParseOptions
from .parser import MarkdownEventParser, parse, parse_links_only
from .tag_mapper import mapTag
from .types import *  # noqa: F401,F403
from .verifier import OffsetVerifier

__version__ = "1.0.0"
__all__ = [
    "parse",
    "parse_links_only",
    "MarkdownEventParser",
    "ParseOptions",
    "DEFAULT_PARSE_OPTIONS",
    "EXCLUDED_PARSE_OPTIONS",
    "ALL_OPTIONS",
    "AutolinkScanner",
    "LinkSpan",
    "ByteOffsetMap",
    "OffsetVerifier",
    "mapTag",
    # Types
    "ByteRange",
    "ParseResult",
    "RangedEvent",
    "TagKind",
    "HeadingLevel",
    "LinkType",
    "Alignment",
    "MetadataBlockKind",
    "IndentedCode",
    "FencedCode",
    "MDTag",
    "MDParagraph",
    "MDHeading",
    "MDBlockQuote",
    "MDCodeBlock",
    "MDHtmlBlock",
    "MDList",
    "MDItem",
    "MDFootnoteDefinition",
    "MDTable",
    "MDTableHead",
    "MDTableRow",
    "MDTableCell",
    "MDEmphasis",
    "MDStrong",
    "MDStrikethrough",
    "MDLink",
    "MDImage",
    "MDMetadataBlock",
    "MDDefinitionList",
    "MDDefinitionListTitle",
    "MDDefinitionListDefinition",
    "EventType",
    "MarkdownEvent",
    "Start",
    "End",
    "Text",
    "SubstitutedText",
    "Code",
    "Html",
    "InlineHtml",
    "FootnoteReference",
    "SoftBreak",
    "HardBreak",
    "Rule",
    "TaskListMarker",
]
