"""
Tests for the block parser.

The block parser only builds structure; every leaf keeps the source spans of
its content lines, so the assertions check block types and spans.
"""

import unittest

from ..options import DEFAULT_PARSE_OPTIONS, ParseOptions
from ..types import Alignment, MetadataBlockKind
from .block_parser import Block, BlockParser, BlockType, Segment


def parseBlocks(text: str, options: ParseOptions = DEFAULT_PARSE_OPTIONS) -> Block:
    return BlockParser(text, options).parse()


def segmentTexts(text: str, block: Block):
    return [text[segment.start : segment.end] for segment in block.segments]


class TestLeafBlocks(unittest.TestCase):
    """Test leaf block recognition."""

    def test_paragraph_spans(self):
        text = "first line\n  second line  \n\nnext"
        document = parseBlocks(text)
        self.assertEqual([child.type for child in document.children], [BlockType.PARAGRAPH, BlockType.PARAGRAPH])

        paragraph = document.children[0]
        self.assertEqual(paragraph.start, 0)
        self.assertEqual(paragraph.end, 27)
        self.assertEqual(segmentTexts(text, paragraph), ["first line", "second line"])
        self.assertEqual(paragraph.segments[0], Segment(0, 10, 11))

    def test_atx_heading(self):
        text = "## Heading ##\n"
        heading = parseBlocks(text).children[0]
        self.assertEqual(heading.type, BlockType.HEADING)
        self.assertEqual(heading.level, 2)
        self.assertEqual(segmentTexts(text, heading), ["Heading"])
        self.assertEqual((heading.start, heading.end), (0, 14))

    def test_empty_atx_heading(self):
        heading = parseBlocks("#\n").children[0]
        self.assertEqual(heading.type, BlockType.HEADING)
        self.assertEqual(heading.segments, [])

    def test_setext_heading(self):
        text = "Title\n=====\n"
        heading = parseBlocks(text).children[0]
        self.assertEqual(heading.type, BlockType.HEADING)
        self.assertEqual(heading.level, 1)
        self.assertEqual(segmentTexts(text, heading), ["Title"])
        self.assertEqual(heading.end, len(text))

    def test_heading_attributes(self):
        text = "# Title {#id .cls}\n"
        heading = parseBlocks(text).children[0]
        self.assertEqual(segmentTexts(text, heading), ["Title"])
        attributes = heading.headingAttributes
        self.assertIsNotNone(attributes)
        self.assertEqual(text[attributes.id[0] : attributes.id[1]], "id")
        self.assertEqual([text[s:e] for s, e in attributes.classes], ["cls"])

        plain = parseBlocks(text, DEFAULT_PARSE_OPTIONS & ~ParseOptions.ENABLE_HEADING_ATTRIBUTES).children[0]
        self.assertIsNone(plain.headingAttributes)
        self.assertEqual(segmentTexts(text, plain), ["Title {#id .cls}"])

    def test_fenced_code(self):
        text = "~~~ python extra\ncode\n  more\n~~~\nafter"
        document = parseBlocks(text)
        code = document.children[0]
        self.assertEqual(code.type, BlockType.FENCED_CODE)
        self.assertEqual(code.info, "python extra")
        self.assertEqual(segmentTexts(text, code), ["code", "  more"])
        self.assertEqual((code.start, code.end), (0, 33))
        self.assertEqual(document.children[1].type, BlockType.PARAGRAPH)

    def test_unclosed_fence_runs_to_end(self):
        text = "```\ncode\n"
        code = parseBlocks(text).children[0]
        self.assertEqual(code.type, BlockType.FENCED_CODE)
        self.assertEqual(code.end, len(text))

    def test_indented_code(self):
        text = "    one\n\n    two\n\n"
        code = parseBlocks(text).children[0]
        self.assertEqual(code.type, BlockType.INDENTED_CODE)
        self.assertEqual(segmentTexts(text, code), ["one", "", "two"])

    def test_thematic_break(self):
        document = parseBlocks("* * *\n")
        self.assertEqual(document.children[0].type, BlockType.THEMATIC_BREAK)

    def test_html_block(self):
        text = "<!-- note -->\ntext\n"
        document = parseBlocks(text)
        self.assertEqual(document.children[0].type, BlockType.HTML_BLOCK)
        self.assertEqual(document.children[0].htmlType, 2)
        self.assertEqual(document.children[1].type, BlockType.PARAGRAPH)

    def test_table(self):
        text = "| a | b |\n|:--|--:|\n| 1 | 2 |\n\npara"
        document = parseBlocks(text)
        table = document.children[0]
        self.assertEqual(table.type, BlockType.TABLE)
        self.assertEqual(table.alignments, [Alignment.LEFT, Alignment.RIGHT])
        self.assertEqual(len(table.segments), 2)
        self.assertEqual(document.children[1].type, BlockType.PARAGRAPH)

    def test_table_requires_option(self):
        text = "| a |\n|---|\n"
        document = parseBlocks(text, DEFAULT_PARSE_OPTIONS & ~ParseOptions.ENABLE_TABLES)
        self.assertNotEqual(document.children[0].type, BlockType.TABLE)


class TestContainerBlocks(unittest.TestCase):
    """Test container blocks and their nesting."""

    def test_block_quote(self):
        text = "> quoted\nlazy\n"
        quote = parseBlocks(text).children[0]
        self.assertEqual(quote.type, BlockType.BLOCK_QUOTE)
        paragraph = quote.children[0]
        self.assertEqual(segmentTexts(text, paragraph), ["quoted", "lazy"])

    def test_tight_and_loose_lists(self):
        tight = parseBlocks("- a\n- b\n").children[0]
        self.assertEqual(tight.type, BlockType.LIST)
        self.assertTrue(tight.tight)
        self.assertEqual(len(tight.children), 2)

        loose = parseBlocks("- a\n\n- b\n").children[0]
        self.assertFalse(loose.tight)

    def test_ordered_list_start(self):
        listBlock = parseBlocks("3. three\n4. four\n").children[0]
        self.assertTrue(listBlock.listData.ordered)
        self.assertEqual(listBlock.listData.start, 3)

    def test_changing_bullet_starts_new_list(self):
        document = parseBlocks("- a\n+ b\n")
        self.assertEqual([child.type for child in document.children], [BlockType.LIST, BlockType.LIST])

    def test_nested_list(self):
        text = "- outer\n  - inner\n"
        outer = parseBlocks(text).children[0]
        item = outer.children[0]
        self.assertEqual([child.type for child in item.children], [BlockType.PARAGRAPH, BlockType.LIST])

    def test_task_marker(self):
        text = "- [X] done\n"
        item = parseBlocks(text).children[0].children[0]
        self.assertTrue(item.checked)
        self.assertEqual(item.taskSpan, (2, 5))
        self.assertEqual(segmentTexts(text, item.children[0]), ["done"])

    def test_footnote_definition(self):
        text = "[^note]: Footnote text\n"
        footnote = parseBlocks(text).children[0]
        self.assertEqual(footnote.type, BlockType.FOOTNOTE_DEFINITION)
        self.assertEqual(text[footnote.label[0] : footnote.label[1]], "note")
        self.assertEqual(segmentTexts(text, footnote.children[0]), ["Footnote text"])

    def test_definition_list(self):
        text = "Term\n: Definition\n"
        options = DEFAULT_PARSE_OPTIONS | ParseOptions.ENABLE_DEFINITION_LIST
        definitionList = parseBlocks(text, options).children[0]
        self.assertEqual(definitionList.type, BlockType.DEFINITION_LIST)
        self.assertEqual(
            [child.type for child in definitionList.children],
            [BlockType.DEFINITION_TITLE, BlockType.DEFINITION],
        )
        self.assertEqual(segmentTexts(text, definitionList.children[0]), ["Term"])

    def test_definition_list_requires_option(self):
        document = parseBlocks("Term\n: Definition\n")
        self.assertEqual([child.type for child in document.children], [BlockType.PARAGRAPH])


class TestDocumentLevel(unittest.TestCase):
    """Test metadata blocks and reference definitions."""

    def test_pluses_metadata_block(self):
        text = "+++\nkey = 1\n+++\nbody"
        document = parseBlocks(text)
        metadata = document.children[0]
        self.assertEqual(metadata.type, BlockType.METADATA_BLOCK)
        self.assertEqual(metadata.metadataKind, MetadataBlockKind.PLUSES_STYLE)
        self.assertEqual(segmentTexts(text, metadata), ["key = 1\n"])
        self.assertEqual((metadata.start, metadata.end), (0, 16))
        self.assertEqual(document.children[1].type, BlockType.PARAGRAPH)

    def test_yaml_metadata_block(self):
        text = "---\nkey: 1\n...\n"
        options = DEFAULT_PARSE_OPTIONS | ParseOptions.ENABLE_YAML_STYLE_METADATA_BLOCKS
        metadata = parseBlocks(text, options).children[0]
        self.assertEqual(metadata.metadataKind, MetadataBlockKind.YAML_STYLE)

    def test_metadata_only_on_first_line(self):
        document = parseBlocks("text\n\n+++\nkey = 1\n+++\n")
        self.assertNotIn(BlockType.METADATA_BLOCK, [child.type for child in document.children])

    def test_unclosed_metadata_is_not_metadata(self):
        document = parseBlocks("+++\nkey = 1\n")
        self.assertEqual(document.children[0].type, BlockType.PARAGRAPH)

    def test_reference_definitions(self):
        text = '[Foo Bar]: /url "title"\n[foo bar]: /other\n\ntext'
        parser = BlockParser(text)
        document = parser.parse()
        self.assertEqual(parser.referenceDefinitions, {"foo bar": ("/url", "title")})
        self.assertEqual([child.type for child in document.children], [BlockType.PARAGRAPH])

    def test_empty_document(self):
        document = parseBlocks("")
        self.assertEqual(document.children, [])
        self.assertEqual(document.end, 0)
