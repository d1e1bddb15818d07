from __future__ import annotations

import logging

from filterlist.errors import FilterSyntaxError, describe_error


def log_line_error(logger: logging.Logger, line: str, exc: BaseException) -> None:
    """Report a line that was skipped by a resilient pass.

    Syntax errors are expected in community lists and only warn; anything else
    is logged with its traceback so it can be reported upstream.
    """
    if isinstance(exc, FilterSyntaxError):
        logger.warning('Invalid filter: line="%s" e="%s"', line, describe_error(exc))
    else:
        logger.exception('Unknown error: line="%s" e="%s"', line, describe_error(exc))
