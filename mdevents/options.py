"""
Parse options for the markdown tokenizer.
"""

import functools
import operator
from enum import Flag, auto
from typing import Any, Dict, Iterable, cast


class ParseOptions(Flag):
    """Extensions the tokenizer recognizes on top of CommonMark."""

    ENABLE_TABLES = auto()
    ENABLE_FOOTNOTES = auto()
    ENABLE_STRIKETHROUGH = auto()
    ENABLE_TASKLISTS = auto()
    ENABLE_SMART_PUNCTUATION = auto()
    ENABLE_HEADING_ATTRIBUTES = auto()
    ENABLE_YAML_STYLE_METADATA_BLOCKS = auto()
    ENABLE_PLUSES_DELIMITED_METADATA_BLOCKS = auto()
    ENABLE_OLD_FOOTNOTES = auto()
    ENABLE_MATH = auto()
    ENABLE_GFM = auto()
    ENABLE_DEFINITION_LIST = auto()


NO_OPTIONS = ParseOptions(0)
ALL_OPTIONS = functools.reduce(operator.or_, ParseOptions, NO_OPTIONS)

DEFAULT_PARSE_OPTIONS = (
    ParseOptions.ENABLE_TABLES
    | ParseOptions.ENABLE_FOOTNOTES
    | ParseOptions.ENABLE_STRIKETHROUGH
    | ParseOptions.ENABLE_TASKLISTS
    | ParseOptions.ENABLE_SMART_PUNCTUATION
    | ParseOptions.ENABLE_HEADING_ATTRIBUTES
    | ParseOptions.ENABLE_PLUSES_DELIMITED_METADATA_BLOCKS
    | ParseOptions.ENABLE_OLD_FOOTNOTES
    | ParseOptions.ENABLE_GFM
)

# Supported, but only when enabled explicitly.
EXCLUDED_PARSE_OPTIONS = (
    ParseOptions.ENABLE_YAML_STYLE_METADATA_BLOCKS
    | ParseOptions.ENABLE_MATH
    | ParseOptions.ENABLE_DEFINITION_LIST
)


def optionName(option: ParseOptions) -> str:
    """Config name of a single option, e.g. ``smart-punctuation``."""
    return cast(str, option.name).removeprefix("ENABLE_").lower().replace("_", "-")


_OPTIONS_BY_NAME: Dict[str, ParseOptions] = {optionName(option): option for option in ParseOptions}


def parseOptionNames(names: Iterable[str]) -> ParseOptions:
    """Combine kebab-case option names into a flag set.

    Raises:
        ValueError: If a name does not correspond to any option
    """
    result = NO_OPTIONS
    for name in names:
        key = name.strip().lower().replace("_", "-").removeprefix("enable-")
        if key not in _OPTIONS_BY_NAME:
            raise ValueError(f"Unknown parse option '{name}', expected one of: {', '.join(sorted(_OPTIONS_BY_NAME))}")
        result |= _OPTIONS_BY_NAME[key]
    return result


def optionsFromConfig(parserConfig: Dict[str, Any], base: ParseOptions = DEFAULT_PARSE_OPTIONS) -> ParseOptions:
    """Apply the ``enable``/``disable`` lists of a ``[parser]`` config table to ``base``."""
    options = base
    options |= parseOptionNames(parserConfig.get("enable", []))
    options &= ~parseOptionNames(parserConfig.get("disable", []))
    return options
