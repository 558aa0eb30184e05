"""Hostname extraction and allowlist matching for URL-bearing lines.

Shared by the outbound-network rule (``bash/CAT-H1``) and the registry rule
(``pkg/F3-registry``) so both families resolve hosts identically.

The host of ``http(s)://[userinfo@]host[:port][/path][?q][#frag]`` is the text
after an optional ``userinfo@`` up to the first ``/ ? # :`` or whitespace.
Stopping at ``#`` and ``:`` keeps ``evil.com#.github.com`` and
``github.com:443`` from being read as anything but ``evil.com`` and
``github.com``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

_URL_HOST = re.compile(r"https?://(?:[^@/?#\s]+@)?([^/?#:\s]+)", re.IGNORECASE)


def extract_hosts(line: str) -> Iterator[str]:
    """Yield the lowercased host of every http(s) URL on ``line``."""
    for match in _URL_HOST.finditer(line):
        host = match.group(1)
        if host:
            yield host.lower()


def host_is_allowed(host: str, allowed: Iterable[str]) -> bool:
    """Exact match, or ``host`` is a proper subdomain of an allowlist entry.

    ``allowed`` must already be lowercase.  Empty entries never match, so a
    blank allowlist line cannot act as a wildcard suffix.
    """
    for entry in allowed:
        if not entry:
            continue
        if host == entry:
            return True
        if host.endswith(entry) and host[: -len(entry)].endswith("."):
            return True
    return False


def has_host(line: str) -> bool:
    return next(extract_hosts(line), None) is not None


def all_hosts_allowed(line: str, allowed: Iterable[str]) -> bool:
    """True only if the line has at least one URL and every host is allowed.

    A line without any extractable host returns False: there is no target
    that could have been allowlisted.
    """
    entries = tuple(allowed)
    found_any = False
    for host in extract_hosts(line):
        found_any = True
        if not host_is_allowed(host, entries):
            return False
    return found_any
