"""
Tests for MarkdownEventParser and the module level parse functions, dood!
"""

import logging

import pytest

from . import parse, parse_links_only
from .options import DEFAULT_PARSE_OPTIONS, ParseOptions
from .parser import MarkdownEventParser
from .types import (
    ByteRange,
    Code,
    End,
    FencedCode,
    FootnoteReference,
    HardBreak,
    HeadingLevel,
    Html,
    IndentedCode,
    InlineHtml,
    LinkType,
    MDCodeBlock,
    MDEmphasis,
    MDHeading,
    MDImage,
    MDItem,
    MDLink,
    MDList,
    MDParagraph,
    MDStrong,
    ParseResult,
    Rule,
    SoftBreak,
    Start,
    SubstitutedText,
    TagKind,
    TaskListMarker,
    Text,
)


def autolink(url: str) -> Start:
    return Start(MDLink(linkType=LinkType.AUTOLINK, destUrl=url, title="", id=""))


def innerEvents(result: ParseResult):
    """Events between the outer paragraph Start/End pair."""
    events = result.events
    assert events[0][1] == Start(MDParagraph())
    assert events[-1][1] == End(TagKind.PARAGRAPH)
    return events[1:-1]


class TestParseScenarios:
    """Scenarios every implementation must reproduce, dood!"""

    def test_plain_url_is_autolinked(self):
        """Bare URL in a paragraph becomes an autolink"""
        assert innerEvents(parse("plain https://a.b text")) == [
            (ByteRange(0, 6), Text()),
            (ByteRange(6, 17), autolink("https://a.b")),
            (ByteRange(6, 17), Text()),
            (ByteRange(6, 17), End(TagKind.LINK)),
            (ByteRange(17, 22), Text()),
        ]

    def test_code_span_range_excludes_backticks(self):
        assert innerEvents(parse("`code`")) == [(ByteRange(1, 5), Code())]

    def test_en_dash_is_substituted(self):
        assert innerEvents(parse("--")) == [(ByteRange(0, 2), SubstitutedText("–"))]

    def test_fenced_code_language_is_collected(self):
        result = parse("```rust\nfn main() {}\n```\n")
        assert result.languages == {"rust"}
        assert result.events[0][1] == Start(MDCodeBlock(FencedCode("rust")))
        assert result.events[-1][1] == End(TagKind.CODE_BLOCK)

    def test_empty_input(self):
        result = parse("")
        assert result.events == []
        assert result.languages == set()

    def test_plain_urls_and_escaped_text(self):
        """Entities, autolinks and escaped backticks in one paragraph"""
        result = parse("&nbsp;&nbsp; https://some.url some \\`&#9658;\\` text")
        assert result.events == [
            (ByteRange(0, 51), Start(MDParagraph())),
            (ByteRange(0, 12), SubstitutedText("\xa0\xa0")),
            (ByteRange(12, 13), Text()),
            (ByteRange(13, 29), autolink("https://some.url")),
            (ByteRange(13, 29), Text()),
            (ByteRange(13, 29), End(TagKind.LINK)),
            (ByteRange(29, 35), Text()),
            (ByteRange(36, 37), Text()),
            (ByteRange(37, 44), SubstitutedText("►")),
            (ByteRange(45, 46), Text()),
            (ByteRange(46, 51), Text()),
            (ByteRange(0, 51), End(TagKind.PARAGRAPH)),
        ]
        assert result.languages == set()

    def test_smart_punctuation(self):
        result = parse("-- --- ... \"double quoted\" 'single quoted'")
        assert result.events == [
            (ByteRange(0, 42), Start(MDParagraph())),
            (ByteRange(0, 2), SubstitutedText("–")),
            (ByteRange(2, 3), Text()),
            (ByteRange(3, 6), SubstitutedText("—")),
            (ByteRange(6, 7), Text()),
            (ByteRange(7, 10), SubstitutedText("…")),
            (ByteRange(10, 11), Text()),
            (ByteRange(11, 12), SubstitutedText("“")),
            (ByteRange(12, 25), Text()),
            (ByteRange(25, 26), SubstitutedText("”")),
            (ByteRange(26, 27), Text()),
            (ByteRange(27, 28), SubstitutedText("‘")),
            (ByteRange(28, 41), Text()),
            (ByteRange(41, 42), SubstitutedText("’")),
            (ByteRange(0, 42), End(TagKind.PARAGRAPH)),
        ]


class TestNormalization:
    """Normalization rules of the event parser, dood!"""

    def test_adjacent_substitutions_are_coalesced(self):
        """Consecutive owned chunks form one run over their combined range"""
        assert innerEvents(parse("&amp;&lt;&gt;")) == [(ByteRange(0, 13), SubstitutedText("&<>"))]

    def test_explicit_link_text_is_not_autolinked(self):
        events = innerEvents(parse("[see https://a.b](https://c.d)"))
        assert events[0] == (
            ByteRange(0, 30),
            Start(MDLink(linkType=LinkType.INLINE, destUrl="https://c.d", title="", id="")),
        )
        assert events[1] == (ByteRange(1, 16), Text())
        assert events[2] == (ByteRange(0, 30), End(TagKind.LINK))
        assert len(events) == 3

    def test_url_autolink_syntax(self):
        events = innerEvents(parse("<https://a.b>"))
        assert events == [
            (ByteRange(0, 13), Start(MDLink(linkType=LinkType.AUTOLINK, destUrl="https://a.b"))),
            (ByteRange(1, 12), Text()),
            (ByteRange(0, 13), End(TagKind.LINK)),
        ]

    def test_image_alt_text_is_not_autolinked(self):
        events = innerEvents(parse("![https://a.b](img.png)"))
        assert events == [
            (ByteRange(0, 23), Start(MDImage(linkType=LinkType.INLINE, destUrl="img.png"))),
            (ByteRange(2, 13), Text()),
            (ByteRange(0, 23), End(TagKind.IMAGE)),
        ]

    def test_image_inside_link(self):
        """Text after a nested image is still inside the link"""
        events = innerEvents(parse("[![i](a.png) https://a.b](https://c.d)"))
        assert [event for _, event in events if isinstance(event, Start)] == [
            Start(MDLink(linkType=LinkType.INLINE, destUrl="https://c.d")),
            Start(MDImage(linkType=LinkType.INLINE, destUrl="a.png")),
        ]
        assert events[-2] == (ByteRange(12, 24), Text())

    def test_reference_link(self):
        result = parse("[hello][world]\n\n[world]: https://example.com \"Title\"\n")
        events = innerEvents(result)
        assert events[0] == (
            ByteRange(0, 14),
            Start(MDLink(linkType=LinkType.REFERENCE, destUrl="https://example.com", title="Title", id="world")),
        )
        assert events[1] == (ByteRange(1, 6), Text())
        assert events[2][1] == End(TagKind.LINK)

    def test_metadata_block_is_suppressed(self):
        result = parse("+++\ntitle = \"x\"\nurl = \"https://a.b\"\n+++\n\nBody\n")
        assert result.events == [
            (ByteRange(41, 46), Start(MDParagraph())),
            (ByteRange(41, 45), Text()),
            (ByteRange(41, 46), End(TagKind.PARAGRAPH)),
        ]

    def test_yaml_metadata_needs_option(self):
        text = "---\ntitle: x\n---\n"
        assert all(event != Start(MDParagraph()) for _, event in parse(text).events)
        assert parse(text).events[0][1] == Rule()

        yamlParser = MarkdownEventParser(DEFAULT_PARSE_OPTIONS | ParseOptions.ENABLE_YAML_STYLE_METADATA_BLOCKS)
        assert yamlParser.parse(text).events == []

    def test_emphasis_and_strong(self):
        events = innerEvents(parse("*a* **b**"))
        assert events == [
            (ByteRange(0, 3), Start(MDEmphasis())),
            (ByteRange(1, 2), Text()),
            (ByteRange(0, 3), End(TagKind.EMPHASIS)),
            (ByteRange(3, 4), Text()),
            (ByteRange(4, 9), Start(MDStrong())),
            (ByteRange(6, 7), Text()),
            (ByteRange(4, 9), End(TagKind.STRONG)),
        ]

    def test_breaks(self):
        events = innerEvents(parse("a  \nb\nc"))
        assert events == [
            (ByteRange(0, 1), Text()),
            (ByteRange(1, 4), HardBreak()),
            (ByteRange(4, 5), Text()),
            (ByteRange(5, 6), SoftBreak()),
            (ByteRange(6, 7), Text()),
        ]

    def test_inline_html_and_footnote_reference(self):
        events = innerEvents(parse("a <b>x</b> [^1]"))
        kinds = [type(event) for _, event in events]
        assert kinds == [Text, InlineHtml, Text, InlineHtml, Text, FootnoteReference]
        assert events[1][0] == ByteRange(2, 5)
        assert events[-1][0] == ByteRange(11, 15)

    def test_task_list(self):
        events = parse("- [x] done\n- [ ] todo\n").events
        assert events[0][1] == Start(MDList(start=None))
        assert events[1][1] == Start(MDItem())
        assert events[2] == (ByteRange(2, 5), TaskListMarker(True))
        assert (ByteRange(13, 16), TaskListMarker(False)) in events

    def test_heading_with_attributes(self):
        events = parse("# Title {#intro .big lang=en}\n").events
        assert events[0][1] == Start(
            MDHeading(level=HeadingLevel.H1, id="intro", classes=("big",), attrs=(("lang", "en"),))
        )
        assert events[1] == (ByteRange(2, 7), Text())

    def test_html_block_and_rule(self):
        events = parse("<div>\nhi\n</div>\n\n***\n").events
        assert [type(event) for _, event in events] == [Start, Html, Html, Html, End, Rule]

    def test_indented_code_is_not_a_language(self):
        result = parse("    code\n")
        assert result.events[0][1] == Start(MDCodeBlock(IndentedCode()))
        assert result.languages == set()

    def test_empty_fence_info_is_collected(self):
        assert parse("```\nx\n```\n").languages == {""}

    def test_math_is_dropped(self):
        mathParser = MarkdownEventParser(DEFAULT_PARSE_OPTIONS | ParseOptions.ENABLE_MATH)
        events = mathParser.parse("a $x^2$ b").events
        assert [event for _, event in events[1:-1]] == [Text(), Text()]

    def test_byte_ranges_for_non_ascii(self):
        events = innerEvents(parse("héllo https://a.b"))
        assert events[0] == (ByteRange(0, 7), Text())
        assert events[1] == (ByteRange(7, 18), autolink("https://a.b"))

    def test_parse_is_idempotent(self):
        text = "# Head\n\n* one https://x.y\n* *two*\n"
        assert parse(text) == parse(text)

    def test_non_str_input_raises(self):
        with pytest.raises(TypeError):
            parse(b"bytes")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            parse_links_only(None)  # type: ignore[arg-type]

    def test_long_substitution_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="mdevents.verifier"):
            result = parse("&NotEqualTilde;")
        assert innerEvents(result) == [(ByteRange(0, 15), SubstitutedText("\u2242\u0338"))]
        assert "Source: &NotEqualTilde;" in caplog.text

    def test_warn_length_is_configurable(self, caplog):
        quietParser = MarkdownEventParser.fromConfig({"substitution-warn-length": 8})
        with caplog.at_level(logging.ERROR, logger="mdevents.verifier"):
            quietParser.parse("&NotEqualTilde;")
        assert caplog.records == []


def countStarts(result: ParseResult, kind: TagKind) -> int:
    return sum(1 for _, event in result.events if isinstance(event, Start) and event.tag.kind is kind)


class TestDeepInput:
    """Deep nesting and long delimiter runs parse without hitting the recursion limit, dood!"""

    def test_nested_block_quotes(self):
        result = parse("> " * 500 + "x")
        assert countStarts(result, TagKind.BLOCK_QUOTE) == 500
        assert [byteRange for byteRange, event in result.events if isinstance(event, Text)] == [ByteRange(1000, 1001)]
        assert result.events[-1][1] == End(TagKind.BLOCK_QUOTE)

    def test_nested_lists(self):
        result = parse("".join("  " * depth + "- x\n" for depth in range(330)))
        assert countStarts(result, TagKind.LIST) == 330
        assert countStarts(result, TagKind.ITEM) == 330

    def test_nested_strong_emphasis(self):
        result = parse("*" * 1000 + "x" + "*" * 1000)
        assert countStarts(result, TagKind.STRONG) == 500
        assert result.events[1] == (ByteRange(0, 2001), Start(MDStrong()))
        assert [byteRange for byteRange, event in result.events if isinstance(event, Text)] == [ByteRange(1000, 1001)]

    def test_long_emphasis_run(self):
        """Alternating delimiters pair up left to right"""
        result = parse("*a" * 2000)
        assert countStarts(result, TagKind.EMPHASIS) == 1000
        assert result.events[1:4] == [
            (ByteRange(0, 3), Start(MDEmphasis())),
            (ByteRange(1, 2), Text()),
            (ByteRange(0, 3), End(TagKind.EMPHASIS)),
        ]


class TestParseLinksOnly:
    """parse_links_only works on plain text, dood!"""

    def test_links_and_remainder(self):
        assert parse_links_only("see https://a.b and http://c.d!") == [
            (ByteRange(0, 4), Text()),
            (ByteRange(4, 15), autolink("https://a.b")),
            (ByteRange(4, 15), Text()),
            (ByteRange(4, 15), End(TagKind.LINK)),
            (ByteRange(15, 20), Text()),
            (ByteRange(20, 30), autolink("http://c.d")),
            (ByteRange(20, 30), Text()),
            (ByteRange(20, 30), End(TagKind.LINK)),
            (ByteRange(30, 31), Text()),
        ]

    def test_any_url_scheme(self):
        assert parse_links_only("see zed://settings now") == [
            (ByteRange(0, 4), Text()),
            (ByteRange(4, 18), autolink("zed://settings")),
            (ByteRange(4, 18), Text()),
            (ByteRange(4, 18), End(TagKind.LINK)),
            (ByteRange(18, 22), Text()),
        ]

    def test_markdown_is_not_tokenized(self):
        assert parse_links_only("*not emphasis*") == [(ByteRange(0, 14), Text())]

    def test_empty_input(self):
        assert parse_links_only("") == []


class TestFromConfig:
    def test_enable_and_disable(self):
        eventParser = MarkdownEventParser.fromConfig({"enable": ["math"], "disable": ["smart-punctuation"]})
        assert eventParser.options & ParseOptions.ENABLE_MATH
        assert not eventParser.options & ParseOptions.ENABLE_SMART_PUNCTUATION
        assert innerEvents(eventParser.parse("--")) == [(ByteRange(0, 2), Text())]

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="no-such-thing"):
            MarkdownEventParser.fromConfig({"enable": ["no-such-thing"]})

    def test_defaults(self):
        eventParser = MarkdownEventParser.fromConfig(None)
        assert eventParser.options == DEFAULT_PARSE_OPTIONS
        assert eventParser.verifier.warnLength == 4
