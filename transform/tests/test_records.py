from __future__ import annotations

import json

import pytest

from filterlist.parser import parse_filter
from filterlist.records import compile_json, record_to_dict, utf16_span


def test_network_record_shape():
    assert record_to_dict(parse_filter("@@||a.example^$domain=b.com,3p")) == {
        "type": 1,
        "line": "@@||a.example^$domain=b.com,3p",
        "pattern": "a.example^",
        "modifiers": [["domain", "b.com"], ["3p", None]],
        "isException": True,
        "matchSubdomains": True,
        "matchBeginningOfAddress": False,
        "matchEndOfAddress": False,
        "markers": {
            "pattern": [4, 14],
            "modifiers": [[[15, 21], [22, 27]], [[28, 30], None]],
        },
    }


def test_cosmetic_and_other_record_shapes():
    assert record_to_dict(parse_filter("example.com#@#.ad")) == {
        "type": 2,
        "line": "example.com#@#.ad",
        "hostname": "example.com",
        "selector": ".ad",
        "isException": True,
    }
    assert record_to_dict(parse_filter("! comment")) == {"type": 0, "line": "! comment"}


def test_record_to_dict_rejects_other_objects():
    with pytest.raises(TypeError):
        record_to_dict("||a.example^")  # type: ignore[arg-type]


def test_compile_json_keeps_order_and_skips_invalid_lines(caplog):
    with caplog.at_level("WARNING", logger="filterlist.records"):
        out = compile_json("! title\n||a.example^\nexample.com#x\nexample.com##.ad")
    records = json.loads(out)
    assert [r["type"] for r in records] == [0, 1, 2]
    assert records[1]["pattern"] == "a.example^"
    assert any("Invalid filter" in r.getMessage() for r in caplog.records)


def test_markers_are_utf16_code_units():
    line = "||\U0001F600.example^$script"
    record = record_to_dict(parse_filter(line))
    assert record["pattern"] == "\U0001F600.example^"
    assert record["markers"] == {"pattern": [2, 13], "modifiers": [[[14, 20], None]]}

    units = line.encode("utf-16-le")
    start, end = record["markers"]["modifiers"][0][0]
    assert units[start * 2:end * 2].decode("utf-16-le") == "script"


def test_utf16_span_is_identity_inside_the_bmp():
    assert utf16_span("||a.example^$3p", (13, 15)) == [13, 15]
    assert utf16_span("||é.example^", (2, 12)) == [2, 12]


def test_compile_json_accepts_crlf():
    records = json.loads(compile_json("! title\r\n||a.example^\r\n"))
    assert [r["line"] for r in records] == ["! title", "||a.example^", ""]
