"""Prefix matching of patterns against messages."""

from typing import Any, Optional, Sequence

# Returned by match() when the pattern does not apply to the message.
NO_MATCH = None


def match(pattern: Sequence[Any], message: Sequence[Any]) -> Optional[int]:
    """Match a pattern against the leading elements of a message.

    Args:
        pattern: Prefix values the message has to start with
        message: Emitted message

    Returns:
        Number of matched elements (the pattern length) or NO_MATCH.
        An empty pattern matches everything and returns 0.
    """
    if len(message) < len(pattern):
        return NO_MATCH
    for expected, actual in zip(pattern, message):
        if expected is not actual and expected != actual:
            return NO_MATCH
    return len(pattern)
