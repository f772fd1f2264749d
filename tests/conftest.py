"""
Pytest configuration and common fixtures for mdevents tests.

This module provides the shared Markdown corpus and parser fixtures used by
the property tests. All fixtures follow camelCase naming convention.
"""

from typing import Dict

import pytest

from mdevents import MarkdownEventParser
from mdevents.options import ALL_OPTIONS, DEFAULT_PARSE_OPTIONS

# ============================================================================
# Markdown Corpus
# ============================================================================

MARKDOWN_SAMPLES: Dict[str, str] = {
    "empty": "",
    "plain": "Just some text",
    "unicode": "Привет, мир! 😀 https://пример.рф/путь ok",
    "entities": "&nbsp;&nbsp; https://some.url some \\`&#9658;\\` text &amp;&lt;&gt; &NotEqualTilde;",
    "smartPunctuation": "-- --- ... \"double quoted\" 'single quoted' don't",
    "headings": "# One {#one .cls}\n\nTwo\n===\n\n### Three ###\n",
    "lists": "- a https://a.b\n- [x] done\n  - nested *em*\n\n1. one\n\n2. two\n",
    "quotes": "> [!WARNING]\n> careful https://x.y\n>\n> > nested\nlazy line\n",
    "code": "```rust\nfn main() {} // https://rust-lang.org\n```\n\n    indented\n\n`inline` code\n",
    "links": (
        "[inline](https://a.b \"t\") [ref][r] [r] <https://c.d> <me@x.org>\n"
        "![img https://e.f](/i.png) [nested https://g.h](/x)\n\n[r]: https://ref.example\n"
    ),
    "tables": "| a | b |\n|:--|--:|\n| 1 https://t.able | *2* |\n| 3 |\n",
    "html": "<div>\nblock\n</div>\n\ninline <b>bold</b> html\n",
    "footnotes": "Text[^1] more.\n\n[^1]: The *note* https://fn.example\n",
    "metadata": "+++\ntitle = \"x\"\nlink = \"https://meta.example\"\n+++\n\nBody https://body.example\n",
    "breaks": "hard  \nbreak\\\nand soft\nbreak\r\nwindows\r\n",
    "math": "inline $x^2$ and display $$\\int_0^1$$ math\n",
    "mixed": "***strong em*** ~~strike~~ _under_ **bold *nested* text**\n\n---\n\n* * *\n",
    "schemes": "zed://settings ssh://git@host/repo file:///etc/hosts `x`",
    "deepQuotes": "> " * 500 + "x",
    "deepLists": "".join("  " * depth + "- x\n" for depth in range(330)),
    "deepEmphasis": "*" * 1000 + "x" + "*" * 1000,
}


def pytest_generate_tests(metafunc):
    """Parametrize ``markdownSample`` over the whole corpus."""
    if "markdownSample" in metafunc.fixturenames:
        metafunc.parametrize("markdownSample", list(MARKDOWN_SAMPLES.values()), ids=list(MARKDOWN_SAMPLES.keys()))


# ============================================================================
# Parser Fixtures
# ============================================================================


@pytest.fixture
def defaultParser() -> MarkdownEventParser:
    """
    Create a parser with the default options.

    Returns:
        MarkdownEventParser: Parser with DEFAULT_PARSE_OPTIONS
    """
    return MarkdownEventParser(DEFAULT_PARSE_OPTIONS)


@pytest.fixture
def fullParser() -> MarkdownEventParser:
    """
    Create a parser with every option enabled, including math, YAML
    metadata and definition lists.

    Returns:
        MarkdownEventParser: Parser with ALL_OPTIONS
    """
    return MarkdownEventParser(ALL_OPTIONS)


@pytest.fixture(params=["default", "full"])
def anyParser(request, defaultParser, fullParser) -> MarkdownEventParser:
    """
    Run a test once with each parser configuration.

    Returns:
        MarkdownEventParser: defaultParser or fullParser
    """
    return defaultParser if request.param == "default" else fullParser
