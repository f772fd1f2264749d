"""
Tag mapping from tokenizer tags to owned semantic tags.
"""

from typing import Callable, Dict, Optional

from .tokenizer.events import CowStr, RawTag
from .types import (
    FencedCode,
    HeadingLevel,
    IndentedCode,
    MDBlockQuote,
    MDCodeBlock,
    MDDefinitionList,
    MDDefinitionListDefinition,
    MDDefinitionListTitle,
    MDEmphasis,
    MDFootnoteDefinition,
    MDHeading,
    MDHtmlBlock,
    MDImage,
    MDItem,
    MDLink,
    MDList,
    MDMetadataBlock,
    MDParagraph,
    MDStrikethrough,
    MDStrong,
    MDTable,
    MDTableCell,
    MDTableHead,
    MDTableRow,
    MDTag,
    TagKind,
)


def _ownedOrNone(value: Optional[CowStr]) -> Optional[str]:
    return str(value) if value is not None else None


def _heading(tag: RawTag) -> MDHeading:
    return MDHeading(
        level=HeadingLevel(tag.level),
        id=_ownedOrNone(tag.id),
        classes=tuple(str(cls) for cls in tag.classes),
        attrs=tuple((str(key), _ownedOrNone(value)) for key, value in tag.attrs),
    )


def _codeBlock(tag: RawTag) -> MDCodeBlock:
    if tag.fenced:
        return MDCodeBlock(FencedCode(str(tag.info)))
    return MDCodeBlock(IndentedCode())


def _link(tag: RawTag) -> MDLink:
    return MDLink(linkType=tag.linkType, destUrl=str(tag.destUrl), title=str(tag.title), id=str(tag.linkId))


def _image(tag: RawTag) -> MDImage:
    return MDImage(linkType=tag.linkType, destUrl=str(tag.destUrl), title=str(tag.title), id=str(tag.linkId))


_MAPPERS: Dict[TagKind, Callable[[RawTag], MDTag]] = {
    TagKind.PARAGRAPH: lambda tag: MDParagraph(),
    TagKind.HEADING: _heading,
    # GFM alert kinds have no counterpart in MDBlockQuote
    TagKind.BLOCK_QUOTE: lambda tag: MDBlockQuote(),
    TagKind.CODE_BLOCK: _codeBlock,
    TagKind.HTML_BLOCK: lambda tag: MDHtmlBlock(),
    TagKind.LIST: lambda tag: MDList(start=tag.start),
    TagKind.ITEM: lambda tag: MDItem(),
    TagKind.FOOTNOTE_DEFINITION: lambda tag: MDFootnoteDefinition(label=str(tag.label)),
    TagKind.TABLE: lambda tag: MDTable(alignments=tuple(tag.alignments)),
    TagKind.TABLE_HEAD: lambda tag: MDTableHead(),
    TagKind.TABLE_ROW: lambda tag: MDTableRow(),
    TagKind.TABLE_CELL: lambda tag: MDTableCell(),
    TagKind.EMPHASIS: lambda tag: MDEmphasis(),
    TagKind.STRONG: lambda tag: MDStrong(),
    TagKind.STRIKETHROUGH: lambda tag: MDStrikethrough(),
    TagKind.LINK: _link,
    TagKind.IMAGE: _image,
    TagKind.METADATA_BLOCK: lambda tag: MDMetadataBlock(metadataKind=tag.metadataKind),
    TagKind.DEFINITION_LIST: lambda tag: MDDefinitionList(),
    TagKind.DEFINITION_LIST_TITLE: lambda tag: MDDefinitionListTitle(),
    TagKind.DEFINITION_LIST_DEFINITION: lambda tag: MDDefinitionListDefinition(),
}


def mapTag(tag: RawTag) -> MDTag:
    """Convert a tokenizer tag into the owned tag of the event stream.

    Every string-bearing field is copied into a plain ``str``; the result does
    not reference the source text.
    """
    return _MAPPERS[tag.kind](tag)
