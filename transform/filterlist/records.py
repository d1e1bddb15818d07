from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from filterlist.logutil import log_line_error
from filterlist.parser import (
    CosmeticFilter,
    FilterRecord,
    NetworkFilter,
    OtherRecord,
    Span,
    parse_filter,
    split_lines,
)


logger = logging.getLogger(__name__)


FILTER_TYPE_OTHERS = 0
FILTER_TYPE_NETWORK = 1
FILTER_TYPE_COSMETIC = 2


def utf16_span(line: str, span: Span) -> List[int]:
    """Convert a code point span into UTF-16 code units, as JSON consumers index strings."""
    start, end = span
    offset = len(line[:start].encode("utf-16-le")) // 2
    return [offset, offset + len(line[start:end].encode("utf-16-le")) // 2]


def record_to_dict(details: FilterRecord) -> Dict[str, Any]:
    if isinstance(details, OtherRecord):
        return {"type": FILTER_TYPE_OTHERS, "line": details.line}
    if isinstance(details, CosmeticFilter):
        return {
            "type": FILTER_TYPE_COSMETIC,
            "line": details.line,
            "hostname": details.hostname,
            "selector": details.selector,
            "isException": details.is_exception,
        }
    if isinstance(details, NetworkFilter):
        return {
            "type": FILTER_TYPE_NETWORK,
            "line": details.line,
            "pattern": details.pattern,
            "modifiers": [[name, value] for name, value in details.modifiers],
            "isException": details.is_exception,
            "matchSubdomains": details.match_subdomains,
            "matchBeginningOfAddress": details.match_beginning_of_address,
            "matchEndOfAddress": details.match_end_of_address,
            "markers": {
                "pattern": utf16_span(details.line, details.markers.pattern),
                "modifiers": [
                    [
                        utf16_span(details.line, name_span),
                        None if value_span is None else utf16_span(details.line, value_span),
                    ]
                    for name_span, value_span in details.markers.modifiers
                ],
            },
        }
    raise TypeError(f"not a filter record: {type(details).__name__}")


def compile_json(text: str) -> str:
    filters: List[Dict[str, Any]] = []
    for line in split_lines(text):
        try:
            filters.append(record_to_dict(parse_filter(line)))
        except Exception as exc:
            log_line_error(logger, line, exc)
    return json.dumps(filters, ensure_ascii=False)
