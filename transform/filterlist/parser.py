from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from filterlist.errors import FilterSyntaxError


# ABP / uBlock line syntax notes:
# - Comments start with '!', section headers look like [Adblock Plus 2.0]
# - Cosmetic rules: <hostnames>##<selector>, exceptions use #@#
# - Exception network rules start with '@@'
# - '||' anchors a hostname, a single '|' anchors the start or end of the address
# - Options are appended after '$' and separated by ','

Span = Tuple[int, int]


@dataclass(frozen=True)
class NetworkMarkers:
    # Half-open code point offsets into the original line. JSON output
    # re-expresses them in UTF-16 code units.
    pattern: Span
    modifiers: Tuple[Tuple[Span, Optional[Span]], ...] = ()


@dataclass(frozen=True)
class OtherRecord:
    line: str


@dataclass(frozen=True)
class NetworkFilter:
    line: str
    pattern: str
    is_exception: bool = False
    match_subdomains: bool = False
    match_beginning_of_address: bool = False
    match_end_of_address: bool = False
    modifiers: Tuple[Tuple[str, Optional[str]], ...] = ()
    markers: NetworkMarkers = NetworkMarkers(pattern=(0, 0))

    def modifier_names(self) -> List[str]:
        return [name for name, _ in self.modifiers]


@dataclass(frozen=True)
class CosmeticFilter:
    line: str
    hostname: str
    selector: str
    is_exception: bool = False


FilterRecord = Union[OtherRecord, NetworkFilter, CosmeticFilter]


_NETWORK_CHARS = frozenset("/:^@|")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split a list buffer on any line ending, keeping a trailing blank line."""
    return _LINE_BREAK_RE.split(text)


def is_whitespace(ch: str) -> bool:
    # Control characters, space and DEL.
    c = ord(ch)
    return c <= 32 or c == 127


def parse_filter(line: str) -> FilterRecord:
    """Classify one line and decompose it.

    Only a malformed cosmetic marker raises FilterSyntaxError; network filters
    always produce a record, however unusual.
    """
    if not line:
        return OtherRecord(line=line)
    for i, ch in enumerate(line):
        if ch == "[" or ch == "!":
            return OtherRecord(line=line)
        # Whatever comes first decides the filter type.
        if ch in _NETWORK_CHARS:
            break
        # '#' is outside of the URL charset (it must be encoded).
        if ch == "#":
            return _parse_cosmetic(line, i)
    return _parse_network(line)


def _parse_cosmetic(line: str, i: int) -> CosmeticFilter:
    hostname = line[:i]
    is_exception = False
    i += 1
    while i < len(line):
        ch = line[i]
        if ch == "@":
            is_exception = True
        elif ch == "#":
            i += 1
            break
        else:
            raise FilterSyntaxError(
                f'Expected "#" or "@" for cosmetic filter marker but saw "{ch}" at position "{i}"!',
                pos=i,
            )
        i += 1
    return CosmeticFilter(line=line, hostname=hostname, selector=line[i:], is_exception=is_exception)


def _find_modifier_start(line: str, i: int) -> int:
    # '$' may appear inside a pattern; a '=' can only show up in the modifier
    # section, so look ahead from each candidate until '=' or the next '$'.
    n = len(line)
    while i < n:
        if line[i] == "$":
            k = i + 1
            while k < n and line[k] != "=" and line[k] != "$":
                k += 1
            if k < n and line[k] == "$":
                i = k
                continue
            return i
        i += 1
    return -1


def _scan_until(line: str, i: int, stops: str) -> int:
    # Backslash escapes the next character, including delimiters.
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in stops:
            return i
        i += 1
    return n


def _parse_modifiers(line: str, k: int):
    modifiers: List[Tuple[str, Optional[str]]] = []
    markers: List[Tuple[Span, Optional[Span]]] = []
    n = len(line)
    while k < n:
        i = _scan_until(line, k, "=,")
        if i < n and line[i] == "=":
            v = i + 1
            e = _scan_until(line, v, ",")
            modifiers.append((line[k:i], line[v:e]))
            markers.append(((k, i), (v, e)))
            k = e + 1
            continue
        if i == n and i == k:
            break
        modifiers.append((line[k:i], None))
        markers.append(((k, i), None))
        k = i + 1
    return tuple(modifiers), tuple(markers)


def _parse_network(line: str) -> NetworkFilter:
    n = len(line)
    i = 0
    while i < n and is_whitespace(line[i]):
        i += 1

    is_exception = False
    if line.startswith("@@", i):
        is_exception = True
        i += 2

    match_subdomains = False
    match_beginning_of_address = False
    if line.startswith("||", i):
        match_subdomains = True
        i += 2
    elif line.startswith("|", i):
        match_beginning_of_address = True
        i += 1
    start = i

    modifier_start = _find_modifier_start(line, i)
    end = n if modifier_start == -1 else modifier_start

    match_end_of_address = end > start and line[end - 1] == "|"
    pattern_end = end - 1 if match_end_of_address else end

    modifiers: Tuple[Tuple[str, Optional[str]], ...] = ()
    modifier_markers: Tuple[Tuple[Span, Optional[Span]], ...] = ()
    if modifier_start != -1:
        modifiers, modifier_markers = _parse_modifiers(line, modifier_start + 1)

    return NetworkFilter(
        line=line,
        pattern=line[start:pattern_end],
        is_exception=is_exception,
        match_subdomains=match_subdomains,
        match_beginning_of_address=match_beginning_of_address,
        match_end_of_address=match_end_of_address,
        modifiers=modifiers,
        markers=NetworkMarkers(pattern=(start, pattern_end), modifiers=modifier_markers),
    )
