"""
Diagnostics for substituted text.

The tokenizer only substitutes short sequences (decoded entities, smart
quotes, dashes, ellipses). A longer substitution means the tokenizer produced
text this package does not expect, so it is reported in the log. Output is
never changed.
"""

import logging

logger = logging.getLogger(__name__)

DEFAULT_SUBSTITUTION_WARN_LENGTH = 4


class OffsetVerifier:
    """Logs substitution chunks longer than ``warnLength`` UTF-8 bytes."""

    def __init__(self, warnLength: int = DEFAULT_SUBSTITUTION_WARN_LENGTH):
        if warnLength < 0:
            raise ValueError(f"Substitution warn length must not be negative, got {warnLength}")
        self.warnLength = warnLength

    def verify(self, source: str, start: int, end: int, substitution: str) -> bool:
        """Check one substituted chunk of ``source[start:end]``; returns False when it was reported."""
        if len(substitution.encode("utf-8")) <= self.warnLength:
            return True
        logger.error(
            f"Unexpected substitution in tokenizer output, longer than {self.warnLength} bytes "
            f"at {start}..{end}.\nSource: {source[start:end]}\nParsed: {substitution}"
        )
        return False
