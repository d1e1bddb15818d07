from __future__ import annotations

import re


class FilterSyntaxError(ValueError):
    """A filter line that cannot be decomposed.

    `pos` is the offset into the original line where parsing stopped.
    """

    def __init__(self, message: str, pos: int = -1):
        super().__init__(message)
        self.pos = pos


def clean_text(text: str, *, max_len: int = 200) -> str:
    s = (text or "").replace("\r", " ").replace("\n", " ").strip()
    # Remove other control chars.
    s = "".join(ch if (ch >= " " and ch != "\x7f") else " " for ch in s)
    s = re.sub(r"\s+", " ", s).strip()
    if max_len and len(s) > max_len:
        s = s[: max_len - 1].rstrip() + "…"
    return s


def describe_error(e: BaseException, *, max_len: int = 200) -> str:
    """Return `"<Type>: <message>"` for log lines, bounded to `max_len`."""
    detail = clean_text(str(e), max_len=max_len)
    if not detail:
        return type(e).__name__
    return f"{type(e).__name__}: {detail}"
