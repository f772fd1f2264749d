"""
mdevents command line: print the normalized event stream of Markdown files.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO, Tuple

from .config import DEFAULT_CONFIG_PATH, ConfigManager
from .logging_utils import initLogging
from .parser import MarkdownEventParser
from .types import RangedEvent, SubstitutedText, Text
from .utils import eventsToDicts, jsonDumps

logger = logging.getLogger(__name__)


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mdevents",
        description="Convert Markdown into a flat stream of range-annotated events",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--links-only",
        action="store_true",
        help="Only detect bare URLs, without Markdown tokenization",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Markdown files to parse (default: stdin)")
    return parser.parse_args(argv)


def prettyPrintConfig(configManager: ConfigManager, out: TextIO) -> None:
    """Pretty-print the loaded configuration."""
    print("=== mdevents Configuration ===", file=out)
    print(jsonDumps(configManager.config, indent=2), file=out)


def formatEvent(text: str, rangedEvent: RangedEvent) -> str:
    """One line of the text output: range, event and the source text where useful."""
    byteRange, event = rangedEvent
    line = f"{byteRange!r}\t{event!r}"
    if isinstance(event, (Text, SubstitutedText)):
        line += f"\t{byteRange.sliceOf(text)!r}"
    return line


def _readInputs(paths: List[str]) -> List[Tuple[str, Optional[str]]]:
    inputs: List[Tuple[str, Optional[str]]] = []
    for path in paths:
        try:
            with open(path, "rt", encoding="utf-8") as f:
                inputs.append((path, f.read()))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            inputs.append((path, None))
    return inputs


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """Main entry point; returns the process exit code."""
    out = out or sys.stdout
    args = parseArguments(argv)
    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)

    try:
        configManager = ConfigManager(args.config, args.config_dir)
        if args.print_config:
            prettyPrintConfig(configManager, out)
            return 0

        initLogging(configManager.getLoggingConfig())
        eventParser = MarkdownEventParser.fromConfig(configManager.getParserConfig())
    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        return 1

    inputs = _readInputs(args.files) if args.files else [("<stdin>", sys.stdin.read())]
    exitCode = 0
    for name, text in inputs:
        if text is None:
            exitCode = 1
            continue

        if args.links_only:
            events = eventParser.parseLinksOnly(text)
            languages = None
        else:
            events, languages = eventParser.parse(text)

        if args.format == "json":
            document = {"file": name, "events": eventsToDicts(events)}
            if languages is not None:
                document["languages"] = sorted(languages)
            print(jsonDumps(document), file=out)
        else:
            if len(inputs) > 1:
                print(f"=== {name} ===", file=out)
            for rangedEvent in events:
                print(formatEvent(text, rangedEvent), file=out)
            if languages:
                print(f"languages: {', '.join(sorted(languages))}", file=out)

    return exitCode
