#!/usr/bin/env python3
from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Optional


# Filter list transformer.
#
#   transform_list.py list.txt -f hosts > list.hosts 2> list.hosts.err
#   transform_list.py list.txt -f list -c > list.formatted.txt 2> list.formatted.err
#
# Hosts compilation registers extra exceptions by default: `@@||host/a.js`
# excepts the whole host and `||host^$3p` is not blocked at all, to avoid
# breaking top-level loads. Use -s to block those hostnames anyway.
#
# -c prints one report per formatting issue to stderr:
#   Format error: line="   ||domain.tld^" rule="no-whitespaces"
#                       ^^^
# and emits the corrected list; add -a so hosts/json use the corrected list.


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Check, fix and compile ad-filtering lists")
    ap.add_argument("input", nargs="?", default="", help="Path to the filter list")
    ap.add_argument("-i", "--input", dest="input_opt", default="", help="Path to the filter list")
    ap.add_argument("-f", "--format", dest="output_format", default=None, help="Output format: list, hosts or json")
    ap.add_argument("-s", "--strict", action="store_true", default=None, help="Disable hosts exception heuristics")
    ap.add_argument("-d", "--debug", action="store_true", default=None, help="Print debug messages to stderr")
    ap.add_argument("-c", "--check", action="store_true", default=None, help="Report formatting issues")
    ap.add_argument("-a", "--fix", action="store_true", default=None, help="Feed the fixed list to later stages")
    ap.add_argument("--fail-fast", action="store_true", default=None, help="Abort the check on the first invalid line")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)

    # This script lives in transform/tools; add transform/ to sys.path.
    here = os.path.abspath(os.path.dirname(__file__))
    app_root = os.path.abspath(os.path.join(here, ".."))
    if app_root not in sys.path:
        sys.path.insert(0, app_root)

    from filterlist.errors import FilterSyntaxError, describe_error
    from filterlist.formatter import check_list
    from filterlist.hosts_compiler import compile_hosts
    from filterlist.records import compile_json
    from filterlist.settings import FORMAT_HOSTS, FORMAT_JSON, TransformOptions

    try:
        opts = TransformOptions.from_env()
        overrides = {
            k: v
            for k, v in (
                ("output_format", ns.output_format),
                ("strict", ns.strict),
                ("debug", ns.debug),
                ("check", ns.check),
                ("fix", ns.fix),
                ("fail_fast", ns.fail_fast),
            )
            if v is not None
        }
        opts = dataclasses.replace(opts, **overrides)
    except ValueError as e:
        print(f"[transform_list] {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if opts.debug else logging.INFO,
        format="%(message)s",
    )

    path = ns.input_opt or ns.input
    if not path:
        print("[transform_list] an input file is required", file=sys.stderr)
        return 2
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        print(f"[transform_list] failed reading {path}: {describe_error(e)}", file=sys.stderr)
        return 2

    out = text
    if opts.check:
        try:
            out = check_list(text, fail_fast=opts.fail_fast).text
        except FilterSyntaxError as e:
            print(f"[transform_list] check aborted: {describe_error(e)}", file=sys.stderr)
            return 1
        if opts.fix:
            text = out

    if opts.output_format == FORMAT_HOSTS:
        out = compile_hosts(text, strict=opts.strict)
    elif opts.output_format == FORMAT_JSON:
        out = compile_json(text)

    sys.stdout.write(out)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
