"""Capture extraction: one regex match to a ``{group: text}`` mapping.

The pattern runs once with ``Pattern.search``, so the caller's anchors
decide whether the whole input has to match. Only named groups are
collected. A named group that did not take part in the match (an
alternation branch not taken, an optional group skipped) is left out of
the mapping; a group that matched the empty string maps to ``""``.
"""

import logging
import re

from deregex.errors import NoMatchError

logger = logging.getLogger("deregex")


def extract(pattern: re.Pattern[str], text: str) -> dict[str, str]:
    """Match *pattern* against *text* and return the named captures.

    Keys are in group declaration order.

    Raises ``NoMatchError`` if the pattern does not match.
    """
    match = pattern.search(text)
    if match is None:
        logger.debug("no match: %r against %r", text, pattern.pattern)
        raise NoMatchError()

    return {name: value for name, value in match.groupdict().items() if value is not None}
