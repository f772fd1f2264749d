"""
Markdown tokenizer for mdevents.

A CommonMark-style block parser and inline parser producing raw events with
str-index ranges. Text payloads are ``CowStr`` values telling borrowed source
slices apart from substituted text.
"""

from .block_parser import Block, BlockParser, BlockType, Segment
from .events import BlockQuoteKind, CowStr, RawEvent, RawEventType, RawTag
from .inline_parser import InlineParser
from .tokenizer import Tokenizer

__all__ = [
    "Block",
    "BlockParser",
    "BlockQuoteKind",
    "BlockType",
    "CowStr",
    "InlineParser",
    "RawEvent",
    "RawEventType",
    "RawTag",
    "Segment",
    "Tokenizer",
]
