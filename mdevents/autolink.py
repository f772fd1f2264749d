"""
Bare URL detection in plain text, backed by linkify-it-py.
"""

import logging
import re
import threading
from typing import List, NamedTuple, Set

from linkify_it import LinkifyIt

logger = logging.getLogger(__name__)

# A scheme followed by an authority, e.g. ``zed://`` or ``file://``
SCHEME_RE = re.compile(r"(?<![A-Za-z0-9+.\-])([A-Za-z][A-Za-z0-9+.\-]*):(?=//)")

# Validated by linkify-it-py itself
BUILTIN_SCHEMES = frozenset({"http", "https", "ftp", "mailto"})


class LinkSpan(NamedTuple):
    """A URL found in text: absolute ``[start, end)`` plus the matched text."""

    start: int
    end: int
    url: str


class AutolinkScanner:
    """
    Finds scheme-qualified URLs (``https://...``, ``mailto:...``, ``zed://...``)
    in plain text.

    linkify-it-py knows ``http:``, ``https:``, ``ftp:`` and ``mailto:``. Any
    other ``scheme://`` seen in the text is registered on first use with a
    validator built from linkify's own authority and path patterns, so
    ``ssh://git@host/repo`` and ``file:///etc/hosts`` are found as well.

    Fuzzy matching of bare domains, emails and IPs is disabled, as are
    protocol-relative ``//host`` links. A matcher is kept per thread since
    LinkifyIt caches state between ``test`` and ``match`` and grows as
    schemes get registered.
    """

    def __init__(self):
        self._local = threading.local()

    def _linkify(self) -> LinkifyIt:
        linkify = getattr(self._local, "linkify", None)
        if linkify is None:
            linkify = LinkifyIt(options={"fuzzy_link": False, "fuzzy_email": False, "fuzzy_ip": False})
            linkify.add("//", None)
            self._local.linkify = linkify
            self._local.schemes = set(BUILTIN_SCHEMES)
            self._local.schemeUrlRe = re.compile(
                "//(?:" + linkify.re["src_auth"] + linkify.re["src_host_port_strict"] + "|(?=/))" + linkify.re["src_path"],
                flags=re.IGNORECASE,
            )
        return linkify

    def _registerSchemes(self, linkify: LinkifyIt, text: str) -> None:
        known: Set[str] = self._local.schemes
        for match in SCHEME_RE.finditer(text):
            scheme = match.group(1).lower()
            if scheme in known:
                continue
            known.add(scheme)
            linkify.add(f"{scheme}:", {"validate": self._validateSchemeUrl})
            logger.debug(f"Registered URL scheme {scheme!r}")

    def _validateSchemeUrl(self, text: str, pos: int) -> int:
        """Length of the ``//authority/path`` tail at ``pos``, or 0 when there is none."""
        match = self._local.schemeUrlRe.match(text, pos)
        if match is None or match.end() - pos <= 2:
            return 0
        return match.end() - pos

    def findLinks(self, text: str, offset: int = 0) -> List[LinkSpan]:
        """Return link spans of ``text`` shifted by ``offset``, in increasing order."""
        if not text:
            return []
        linkify = self._linkify()
        if "://" in text:
            self._registerSchemes(linkify, text)
        matches = linkify.match(text) or []
        spans: List[LinkSpan] = []
        cursor = 0
        for match in matches:
            if match.index < cursor or match.last_index <= match.index:
                logger.debug(f"Skipping overlapping link match {match.raw!r} at {match.index}")
                continue
            spans.append(LinkSpan(offset + match.index, offset + match.last_index, text[match.index : match.last_index]))
            cursor = match.last_index
        return spans
