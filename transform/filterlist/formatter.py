from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from filterlist.errors import FilterSyntaxError
from filterlist.logutil import log_line_error
from filterlist.parser import (
    CosmeticFilter,
    FilterRecord,
    NetworkFilter,
    OtherRecord,
    Span,
    is_whitespace,
    parse_filter,
)


logger = logging.getLogger(__name__)


RULE_NO_WHITESPACES = "no-whitespaces"
RULE_NO_MODIFIER_WHITESPACES = "no-modifier-whitespaces"
RULE_NO_MODIFIER_VALUE_WHITESPACES = "no-modifier-value-whitespaces"
RULE_FULL_MODIFIER_NAME = "full-modifier-name"

MODIFIER_ALIASES = {
    "1p": "first-party",
    "3p": "third-party",
    "xhr": "xmlhttprequest",
}

# len('Format error: line="')
_MESSAGE_PREFIX = 20


@dataclass(frozen=True)
class Delete:
    rule: str
    offset: int
    length: int


@dataclass(frozen=True)
class Insert:
    rule: str
    offset: int
    text: str


Edit = Union[Delete, Insert]


def _leading_whitespace(s: str) -> int:
    i = 0
    while i < len(s) and is_whitespace(s[i]):
        i += 1
    return i


def _trailing_whitespace(s: str) -> int:
    i = len(s)
    while i > 0 and is_whitespace(s[i - 1]):
        i -= 1
    return len(s) - i


def _strip(s: str) -> str:
    head = _leading_whitespace(s)
    if head == len(s):
        return ""
    return s[head:len(s) - _trailing_whitespace(s)]


def _span_whitespace(rule: str, text: str, span: Span) -> List[Edit]:
    edits: List[Edit] = []
    head = _leading_whitespace(text)
    if head:
        edits.append(Delete(rule, span[0], head))
    tail = _trailing_whitespace(text)
    if tail:
        edits.append(Delete(rule, span[1] - tail, tail))
    return edits


def diagnose(details: FilterRecord) -> List[Edit]:
    """Compute the edits that bring a line to the canonical layout.

    Offsets refer to the original line. The order is the scan order and must
    be kept when applying: line whitespace first, then every modifier from
    left to right.
    """
    if not isinstance(details, (OtherRecord, NetworkFilter, CosmeticFilter)):
        raise TypeError(f"not a filter record: {type(details).__name__}")

    line = details.line
    edits: List[Edit] = []
    head = _leading_whitespace(line)
    if head:
        edits.append(Delete(RULE_NO_WHITESPACES, 0, head))
    tail = _trailing_whitespace(line)
    if tail:
        edits.append(Delete(RULE_NO_WHITESPACES, len(line) - tail, tail))

    if isinstance(details, NetworkFilter):
        for (name, value), (name_span, value_span) in zip(details.modifiers, details.markers.modifiers):
            edits.extend(_span_whitespace(RULE_NO_MODIFIER_WHITESPACES, name, name_span))
            full_name = MODIFIER_ALIASES.get(_strip(name))
            if full_name is not None:
                edits.append(Delete(RULE_FULL_MODIFIER_NAME, name_span[0], name_span[1] - name_span[0]))
                edits.append(Insert(RULE_FULL_MODIFIER_NAME, name_span[0], full_name))
            if value is None or value_span is None:
                continue
            edits.extend(_span_whitespace(RULE_NO_MODIFIER_VALUE_WHITESPACES, value, value_span))
    return edits


def apply_edits(line: str, edits: List[Edit]) -> str:
    """Apply `edits` in order to `line`.

    Every edit is expressed against the original line, so after each splice
    the remaining edits are re-based onto the current text. Overlapping
    deletes never remove the same character twice.
    """
    # [offset, length] per edit; inserts keep length 0
    pending: List[List[int]] = []
    for edit in edits:
        if isinstance(edit, Delete):
            pending.append([edit.offset, edit.length])
        elif isinstance(edit, Insert):
            pending.append([edit.offset, 0])
        else:
            raise TypeError(f"not an edit: {type(edit).__name__}")

    for i, edit in enumerate(edits):
        offset, length = pending[i]
        if isinstance(edit, Delete):
            if length <= 0:
                continue
            end = offset + length
            line = line[:offset] + line[end:]
            for k in range(i + 1, len(edits)):
                rest = pending[k]
                if isinstance(edits[k], Delete):
                    overlap = min(end, rest[0] + rest[1]) - max(offset, rest[0])
                    if overlap > 0:
                        rest[1] -= overlap
                if rest[0] >= end:
                    rest[0] -= length
                elif rest[0] > offset:
                    rest[0] = offset
        else:
            size = len(edit.text)
            line = line[:offset] + edit.text + line[offset:]
            for k in range(i + 1, len(edits)):
                rest = pending[k]
                if rest[0] >= offset:
                    rest[0] += size
                elif isinstance(edits[k], Delete) and rest[0] + rest[1] > offset:
                    rest[1] += size
    return line


def render_diagnostic(line: str, edit: Edit) -> str:
    message = f'Format error: line="{line}" rule="{edit.rule}"\n'
    if isinstance(edit, Delete):
        return message + " " * (_MESSAGE_PREFIX + edit.offset) + "^" * edit.length
    return (
        message
        + " " * (_MESSAGE_PREFIX + edit.offset)
        + "^"
        + " " * (len(line) - edit.offset + 1)
        + f'use="{edit.text}"'
    )


def fix_line(line: str) -> str:
    return apply_edits(line, diagnose(parse_filter(line)))


@dataclass
class CheckResult:
    text: str
    diagnostics: List[Tuple[int, Edit]] = field(default_factory=list)
    errors: int = 0


def check_list(text: str, *, fail_fast: bool = False) -> CheckResult:
    """Diagnose every line, report each finding and return the fixed text.

    Unparsable lines are reported and kept as they are. With `fail_fast` the
    first one raises FilterSyntaxError instead.

    Lines are split on "\\n" only, so a "\\r" left by CRLF endings is trailing
    whitespace and gets reported and removed; the output uses "\\n".
    """
    lines = text.split("\n")
    result = CheckResult(text=text)
    for i, line in enumerate(lines):
        try:
            details = parse_filter(line)
        except FilterSyntaxError as exc:
            if fail_fast:
                raise
            result.errors += 1
            log_line_error(logger, line, exc)
            continue
        edits = diagnose(details)
        for edit in edits:
            result.diagnostics.append((i, edit))
            logger.warning("%s", render_diagnostic(line, edit))
        if edits:
            lines[i] = apply_edits(line, edits)
    result.text = "\n".join(lines)
    return result
