"""
Shared syntax helpers for the block and inline parsers.

Regular expressions follow the CommonMark reference grammar; the link
helpers operate on a string and a start position and return the parsed value
together with the position just past it, or None when nothing matches.
"""

import html.entities
import re
import unicodedata
from typing import List, NamedTuple, Optional, Tuple, cast

ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

TAG_NAME = r"[A-Za-z][A-Za-z0-9-]*"
ATTRIBUTE_NAME = r"[a-zA-Z_:][a-zA-Z0-9:._-]*"
ATTRIBUTE_VALUE = r"(?:[^\"'=<>`\x00-\x20]+|'[^']*'|\"[^\"]*\")"
ATTRIBUTE = r"(?:\s+" + ATTRIBUTE_NAME + r"(?:\s*=\s*" + ATTRIBUTE_VALUE + r")?)"
OPEN_TAG = r"<" + TAG_NAME + ATTRIBUTE + r"*\s*/?>"
CLOSE_TAG = r"</" + TAG_NAME + r"\s*>"
HTML_COMMENT = r"<!-->|<!--->|<!--[\s\S]*?-->"
PROCESSING_INSTRUCTION = r"<\?[\s\S]*?\?>"
DECLARATION = r"<![A-Za-z]+[^>]*>"
CDATA = r"<!\[CDATA\[[\s\S]*?\]\]>"

HTML_TAG_RE = re.compile(
    "(?:" + "|".join((OPEN_TAG, CLOSE_TAG, HTML_COMMENT, PROCESSING_INSTRUCTION, DECLARATION, CDATA)) + ")"
)

BLOCK_TAG_NAMES = (
    "address|article|aside|base|basefont|blockquote|body|caption|center|col|colgroup|dd|details|dialog|dir|div|"
    "dl|dt|fieldset|figcaption|figure|footer|form|frame|frameset|h[1-6]|head|header|hr|html|iframe|legend|li|link|"
    "main|menu|menuitem|nav|noframes|ol|optgroup|option|p|param|search|section|summary|table|tbody|td|tfoot|th|"
    "thead|title|tr|track|ul"
)

# Index is the CommonMark HTML block kind; kind 7 may not interrupt a paragraph.
HTML_BLOCK_OPEN = (
    None,
    re.compile(r"<(?:script|pre|textarea|style)(?:\s|>|$)", re.IGNORECASE),
    re.compile(r"<!--"),
    re.compile(r"<\?"),
    re.compile(r"<![A-Za-z]"),
    re.compile(r"<!\[CDATA\["),
    re.compile(r"</?(?:" + BLOCK_TAG_NAMES + r")(?:\s|/?>|$)", re.IGNORECASE),
    re.compile(r"(?:" + OPEN_TAG + "|" + CLOSE_TAG + r")\s*$", re.IGNORECASE),
)
HTML_BLOCK_CLOSE = (
    None,
    re.compile(r"</(?:script|pre|textarea|style)>", re.IGNORECASE),
    re.compile(r"-->"),
    re.compile(r"\?>"),
    re.compile(r">"),
    re.compile(r"\]\]>"),
)

ATX_HEADING_RE = re.compile(r"#{1,6}(?:[ \t]+|$)")
ATX_CLOSING_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
CODE_FENCE_RE = re.compile(r"`{3,}(?!.*`)|~{3,}")
CLOSING_FENCE_RE = re.compile(r"(?:`{3,}|~{3,})(?=[ \t]*$)")
THEMATIC_BREAK_RE = re.compile(r"(?:(?:\*[ \t]*){3,}|(?:_[ \t]*){3,}|(?:-[ \t]*){3,})$")
SETEXT_UNDERLINE_RE = re.compile(r"(?:=+|-+)[ \t]*$")
BULLET_MARKER_RE = re.compile(r"[*+-]")
ORDERED_MARKER_RE = re.compile(r"(\d{1,9})([.)])")
TASK_MARKER_RE = re.compile(r"\[([ xX])\](?=[ \t]|$)")
FOOTNOTE_DEFINITION_RE = re.compile(r"\[\^([^\]\s]+)\]:[ \t]*")
FOOTNOTE_REFERENCE_RE = re.compile(r"\[\^([^\]\s]+)\]")
DEFINITION_MARKER_RE = re.compile(r":(?=[ \t])")
TABLE_DELIMITER_ROW_RE = re.compile(r"\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$")
ALERT_RE = re.compile(r"\[!(NOTE|TIP|IMPORTANT|WARNING|CAUTION)\][ \t]*$", re.IGNORECASE)

ENTITY_RE = re.compile(r"&(?:#[xX]([0-9a-fA-F]{1,6})|#([0-9]{1,7})|([A-Za-z][A-Za-z0-9]{1,31}));")
ESCAPE_OR_ENTITY_RE = re.compile(r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])|" + ENTITY_RE.pattern)
AUTOLINK_URI_RE = re.compile(r"<([A-Za-z][A-Za-z0-9.+-]{1,31}:[^<>\x00-\x20]*)>")
AUTOLINK_EMAIL_RE = re.compile(
    r"<([a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*)>"
)
LINK_LABEL_RE = re.compile(r"\[((?:[^\\\[\]]|\\.){0,999})\]", re.DOTALL)
LINK_TITLE_RE = re.compile(r"\"((?:[^\"\\]|\\.)*)\"|'((?:[^'\\]|\\.)*)'|\(((?:[^()\\]|\\.)*)\)", re.DOTALL)
INLINE_MATH_RE = re.compile(r"\$(?![\s$])((?:[^$\\]|\\.)*?)(?<!\s)\$")


def isPunctuation(char: str) -> bool:
    if not char:
        return False
    return char in ASCII_PUNCTUATION or unicodedata.category(char)[0] in "PS"


def isWhitespace(char: str) -> bool:
    """Unicode whitespace; the empty string stands for a line boundary."""
    return not char or char.isspace()


def isSpaceOrTab(char: str) -> bool:
    return char == " " or char == "\t"


def decodeEntity(match: "re.Match[str]") -> Optional[str]:
    """Decode a match of ``ENTITY_RE``; unknown named entities yield None."""
    hexDigits, decimalDigits, name = match.group(1), match.group(2), match.group(3)
    if name is not None:
        return html.entities.html5.get(name + ";")
    codePoint = int(hexDigits, 16) if hexDigits is not None else int(decimalDigits)
    if codePoint == 0 or codePoint > 0x10FFFF or 0xD800 <= codePoint <= 0xDFFF:
        return "\ufffd"
    return chr(codePoint)


def unescapeString(value: str) -> str:
    """Resolve backslash escapes and entities, as done for link destinations and titles."""
    if "\\" not in value and "&" not in value:
        return value

    def replace(match: "re.Match[str]") -> str:
        if match.group(1) is not None:
            return match.group(1)
        decoded = decodeEntity(_entityView(match))
        return decoded if decoded is not None else match.group(0)

    return ESCAPE_OR_ENTITY_RE.sub(replace, value)


def _entityView(match: "re.Match[str]") -> "re.Match[str]":
    return cast("re.Match[str]", ENTITY_RE.match(match.group(0)))


def normalizeLabel(label: str) -> str:
    """Reference labels match case-insensitively with internal whitespace collapsed."""
    return " ".join(label.split()).casefold()


def skipSpaces(text: str, pos: int) -> int:
    while pos < len(text) and isSpaceOrTab(text[pos]):
        pos += 1
    return pos


def skipWhitespace(text: str, pos: int, allowNewline: bool = True) -> int:
    """Skip spaces and tabs plus at most one line ending."""
    pos = skipSpaces(text, pos)
    if allowNewline and pos < len(text) and text[pos] == "\n":
        pos = skipSpaces(text, pos + 1)
    return pos


def parseLinkLabel(text: str, pos: int) -> Optional[Tuple[str, int]]:
    match = LINK_LABEL_RE.match(text, pos)
    if match is None:
        return None
    return match.group(1), match.end()


def parseLinkDestination(text: str, pos: int) -> Optional[Tuple[str, int]]:
    """Parse ``<dest>`` or a raw destination with balanced parentheses."""
    if pos < len(text) and text[pos] == "<":
        end = pos + 1
        while end < len(text):
            char = text[end]
            if char == "\\" and end + 1 < len(text):
                end += 2
                continue
            if char == ">":
                return unescapeString(text[pos + 1 : end]), end + 1
            if char in "<\n":
                return None
            end += 1
        return None

    end = pos
    depth = 0
    while end < len(text):
        char = text[end]
        if char == "\\" and end + 1 < len(text) and text[end + 1] in ASCII_PUNCTUATION:
            end += 2
            continue
        if char == "(":
            depth += 1
            if depth > 32:
                return None
        elif char == ")":
            if depth == 0:
                break
            depth -= 1
        elif char.isspace() or ord(char) < 0x20:
            break
        end += 1
    if end == pos or depth != 0:
        return None
    return unescapeString(text[pos:end]), end


def parseLinkTitle(text: str, pos: int) -> Optional[Tuple[str, int]]:
    match = LINK_TITLE_RE.match(text, pos)
    if match is None:
        return None
    raw = next(group for group in match.groups() if group is not None)
    return unescapeString(raw), match.end()


class ReferenceDefinition(NamedTuple):
    label: str
    destination: str
    title: str
    end: int


def parseReferenceDefinition(text: str, pos: int) -> Optional[ReferenceDefinition]:
    """Parse ``[label]: destination "title"`` starting at ``pos``.

    The definition must end at a line ending (or the end of ``text``);
    ``end`` is the position just past that line ending.
    """
    labelResult = parseLinkLabel(text, pos)
    if labelResult is None:
        return None
    label, pos = labelResult
    if not label.strip() or pos >= len(text) or text[pos] != ":":
        return None
    pos = skipWhitespace(text, pos + 1)
    destinationResult = parseLinkDestination(text, pos)
    if destinationResult is None:
        return None
    destination, pos = destinationResult

    beforeTitle = pos
    titlePos = skipWhitespace(text, pos)
    if titlePos != beforeTitle:
        titleResult = parseLinkTitle(text, titlePos)
        if titleResult is not None:
            title, afterTitle = titleResult
            lineEnd = _lineEndAfterBlank(text, afterTitle)
            if lineEnd is not None:
                return ReferenceDefinition(label, destination, title, lineEnd)

    lineEnd = _lineEndAfterBlank(text, beforeTitle)
    if lineEnd is None:
        return None
    return ReferenceDefinition(label, destination, "", lineEnd)


def _lineEndAfterBlank(text: str, pos: int) -> Optional[int]:
    pos = skipSpaces(text, pos)
    if pos == len(text):
        return pos
    if text[pos] == "\n":
        return pos + 1
    return None


def splitTableCells(text: str, start: int, end: int) -> List[Tuple[int, int]]:
    """Split a table row into trimmed cell spans, honoring ``\\|`` escapes."""
    while start < end and isSpaceOrTab(text[start]):
        start += 1
    while end > start and isSpaceOrTab(text[end - 1]):
        end -= 1
    if start < end and text[start] == "|":
        start += 1
    trailingPipe = end > start and text[end - 1] == "|" and (end - 2 < start or text[end - 2] != "\\")

    cells: List[Tuple[int, int]] = []
    cellStart = start
    pos = start
    limit = end - 1 if trailingPipe else end
    while pos < limit:
        char = text[pos]
        if char == "\\" and pos + 1 < limit:
            pos += 2
            continue
        if char == "|":
            cells.append(_trimSpan(text, cellStart, pos))
            cellStart = pos + 1
        pos += 1
    cells.append(_trimSpan(text, cellStart, limit))
    return cells


def _trimSpan(text: str, start: int, end: int) -> Tuple[int, int]:
    while start < end and isSpaceOrTab(text[start]):
        start += 1
    while end > start and isSpaceOrTab(text[end - 1]):
        end -= 1
    return start, end


class HeadingAttributes(NamedTuple):
    id: Optional[Tuple[int, int]]
    classes: List[Tuple[int, int]]
    attrs: List[Tuple[Tuple[int, int], Optional[Tuple[int, int]]]]
    contentEnd: int


def parseHeadingAttributes(text: str, start: int, end: int) -> Optional[HeadingAttributes]:
    """Parse a trailing ``{#id .class key=value}`` block of a heading line.

    Returns source spans of every piece and the new end of the heading text,
    or None when the heading does not end with an attribute block.
    """
    if end <= start or text[end - 1] != "}":
        return None
    openBrace = text.rfind("{", start, end - 1)
    if openBrace < 0 or "}" in text[openBrace + 1 : end - 1]:
        return None

    headingId: Optional[Tuple[int, int]] = None
    classes: List[Tuple[int, int]] = []
    attrs: List[Tuple[Tuple[int, int], Optional[Tuple[int, int]]]] = []
    for match in re.finditer(r"[^ \t]+", text[openBrace + 1 : end - 1]):
        pieceStart = openBrace + 1 + match.start()
        pieceEnd = openBrace + 1 + match.end()
        piece = match.group(0)
        if piece.startswith("#"):
            if len(piece) > 1:
                headingId = (pieceStart + 1, pieceEnd)
        elif piece.startswith("."):
            if len(piece) > 1:
                classes.append((pieceStart + 1, pieceEnd))
        elif "=" in piece:
            equals = pieceStart + piece.index("=")
            attrs.append(((pieceStart, equals), (equals + 1, pieceEnd)))
        else:
            attrs.append(((pieceStart, pieceEnd), None))

    contentEnd = openBrace
    while contentEnd > start and isSpaceOrTab(text[contentEnd - 1]):
        contentEnd -= 1
    return HeadingAttributes(headingId, classes, attrs, contentEnd)
