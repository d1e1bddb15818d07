from __future__ import annotations

import os
from dataclasses import dataclass


FORMAT_LIST = "list"
FORMAT_HOSTS = "hosts"
FORMAT_JSON = "json"

OUTPUT_FORMATS = (FORMAT_LIST, FORMAT_HOSTS, FORMAT_JSON)


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip().lower() in (
        "1",
        "true",
        "yes",
        "on",
    )


@dataclass(frozen=True)
class TransformOptions:
    output_format: str = FORMAT_LIST
    strict: bool = False
    debug: bool = False
    check: bool = False
    fix: bool = False
    fail_fast: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            kinds = ", ".join(f'"{k}"' for k in OUTPUT_FORMATS)
            raise ValueError(f'"{self.output_format}" is not a valid output format! Possible values are {kinds}')

    @classmethod
    def from_env(cls) -> "TransformOptions":
        return cls(
            output_format=(os.environ.get("FILTERLIST_FORMAT") or FORMAT_LIST).strip().lower(),
            strict=_env_flag("FILTERLIST_STRICT"),
            debug=_env_flag("FILTERLIST_DEBUG"),
            check=_env_flag("FILTERLIST_CHECK"),
            fix=_env_flag("FILTERLIST_FIX"),
            fail_fast=_env_flag("FILTERLIST_FAIL_FAST"),
        )
