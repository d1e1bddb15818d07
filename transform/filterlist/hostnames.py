from __future__ import annotations

import string
from typing import Optional

from filterlist.parser import NetworkFilter, is_whitespace


_LETTERS = frozenset(string.ascii_letters)
_ALNUM = frozenset(string.ascii_letters + string.digits)

# Characters that only show up in paths, queries, fragments or wildcards.
# Interior whitespace is rejected as well.
_NON_HOST_CHARS = frozenset("|#/?&*")


def is_regex_pattern(pattern: str) -> bool:
    return len(pattern) > 0 and pattern[0] == "/" and pattern[-1] == "/"


def to_hostname(details: NetworkFilter) -> Optional[str]:
    """Reduce a network filter to the bare hostname it blocks, if it is one.

    `||ads.example.com^` and `ads.example.com` qualify; regexps, address
    anchored patterns, paths, wildcards and dotless tokens do not.
    """
    pattern = details.pattern
    if (
        is_regex_pattern(pattern)
        or details.match_end_of_address
        or details.match_beginning_of_address
        # generic or private
        or len(pattern) < 3
    ):
        return None
    if pattern[0] not in _ALNUM:
        return None

    end = len(pattern)
    if pattern[-1] == "^":
        end -= 1
    if pattern[end - 1] not in _LETTERS:
        return None

    has_dot = False
    for i in range(1, end - 1):
        ch = pattern[i]
        if ch in _NON_HOST_CHARS or is_whitespace(ch):
            return None
        if ch == ".":
            if pattern[i + 1] == ".":
                return None
            has_dot = True
    # Hostnames without a TLD.
    if not has_dot:
        return None
    return pattern[:end]
