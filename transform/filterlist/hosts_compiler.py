from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List, Optional

from filterlist.hostnames import to_hostname
from filterlist.logutil import log_line_error
from filterlist.parser import NetworkFilter, parse_filter, split_lines


logger = logging.getLogger(__name__)


HOSTS_ADDRESS = "127.0.0.1"

_THIRD_PARTY_NAMES = ("3p", "third-party")


def is_third_party_constraint(name: str) -> bool:
    return name in _THIRD_PARTY_NAMES


class HostsCompiler:
    """Fold network filters into blocked/excepted hostname sets.

    Ordering matters: an exception only removes hostnames blocked so far, a
    later blocking line adds the hostname back.

    Unless `strict` is set, two heuristics register extra exceptions so that
    hostname-level blocking does not break top-level loads:
    `@@||host/path` excepts the whole host, and `||host^$3p` is treated as an
    exception because a hosts file cannot honor a third-party restriction.
    """

    def __init__(self, *, strict: bool = False):
        self.strict = strict
        # dicts keep insertion order; values are unused
        self.blocked: Dict[str, None] = {}
        self.excepted: Dict[str, None] = {}
        self.lines = 0
        self.errors = 0

    def _except(self, hostname: str) -> None:
        self.excepted[hostname] = None
        self.blocked.pop(hostname, None)

    def _block(self, hostname: str) -> None:
        self.blocked[hostname] = None

    def _path_level_hostname(self, details: NetworkFilter) -> Optional[str]:
        cut = details.pattern.find("/")
        if cut == -1:
            return None
        # The original pattern is lost but hosts compilation only needs the host.
        return to_hostname(dataclasses.replace(details, pattern=details.pattern[:cut]))

    def feed(self, line: str) -> None:
        self.lines += 1
        try:
            details = parse_filter(line)
            if not isinstance(details, NetworkFilter):
                return
            hostname = to_hostname(details)
            if details.is_exception:
                if hostname is None and not self.strict:
                    hostname = self._path_level_hostname(details)
                    if hostname is not None:
                        logger.debug('Path-level exception set: hostname="%s" line="%s"', hostname, line)
                if hostname is None:
                    return
                self._except(hostname)
            elif hostname is not None:
                if not self.strict and any(is_third_party_constraint(name) for name in details.modifier_names()):
                    logger.debug('Third-party exception set: hostname="%s" line="%s"', hostname, line)
                    self._except(hostname)
                    return
                self._block(hostname)
        except Exception as exc:
            self.errors += 1
            log_line_error(logger, line, exc)

    def feed_all(self, lines: Iterable[str]) -> "HostsCompiler":
        for line in lines:
            self.feed(line)
        return self

    def hostnames(self) -> List[str]:
        # An exception removes what was blocked before it; a later block of
        # the same hostname is kept.
        return list(self.blocked)

    def render(self) -> str:
        return "\n".join(f"{HOSTS_ADDRESS} {h}" for h in self.hostnames())


def compile_hosts(text: str, *, strict: bool = False) -> str:
    compiler = HostsCompiler(strict=strict).feed_all(split_lines(text))
    logger.debug(
        "hosts compiled: lines=%d blocked=%d excepted=%d errors=%d",
        compiler.lines,
        len(compiler.blocked),
        len(compiler.excepted),
        compiler.errors,
    )
    return compiler.render()
