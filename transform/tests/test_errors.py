import logging

from filterlist.errors import FilterSyntaxError, clean_text, describe_error
from filterlist.logutil import log_line_error


def test_clean_text_strips_newlines_and_bounds_length():
    s = "hello\nworld\r\n\t\x00!"
    out = clean_text(s, max_len=20)
    assert "\n" not in out
    assert "\r" not in out
    assert len(out) <= 20


def test_describe_error_includes_type_and_message():
    e = FilterSyntaxError('saw "?" at position "12"', pos=12)
    assert describe_error(e) == 'FilterSyntaxError: saw "?" at position "12"'
    assert e.pos == 12
    assert isinstance(e, ValueError)
    assert describe_error(RuntimeError()) == "RuntimeError"


def test_log_line_error_levels(caplog):
    logger = logging.getLogger("filterlist.test")
    with caplog.at_level(logging.WARNING, logger="filterlist.test"):
        log_line_error(logger, "a#b", FilterSyntaxError("bad marker", pos=2))
        try:
            raise KeyError("boom")
        except KeyError as e:
            log_line_error(logger, "||x^", e)

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.ERROR]
    assert caplog.records[0].getMessage() == 'Invalid filter: line="a#b" e="FilterSyntaxError: bad marker"'
    assert caplog.records[1].getMessage().startswith('Unknown error: line="||x^"')
    assert caplog.records[1].exc_info is not None
