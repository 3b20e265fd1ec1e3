"""Installed children from ``swanctl --list-sas`` output, plus a match tracer."""

from __future__ import annotations

import typing as t

from .list_conns import normalize_names
from .patterns import ACTIVE_RULES, all_matches, matches_any

NO_MATCH_MESSAGE = "No lines matched active-child patterns."


def parse_active(text: str) -> t.List[str]:
    """Return the sorted set of currently installed child names.

    Each line is tested against every active-detection rule; every rule that
    matches contributes its capture. Formats covered::

        net-net{1}:  INSTALLED, TUNNEL, reqid 1
        CHILD_SA net-net{1} established
        child 'net-net'
        net-net: INSTALLED, TUNNEL
        ... installed CHILD_SA 'net-net' ...
        net-net: #3, reqid 1, INSTALLED, TUNNEL, ESP:AES_CBC-128
        net-net: TUNNEL | ESP | ROUTED | ESTABLISHED
    """
    names: t.List[str] = []
    for line in (text or "").splitlines():
        for m in all_matches(ACTIVE_RULES, line):
            names.extend(m.rule.names(line))
    return normalize_names(names)


def trace_active_lines(text: str) -> t.List[str]:
    """Original lines, in order, that matched at least one active-detection rule."""
    return [line for line in (text or "").splitlines() if matches_any(ACTIVE_RULES, line)]


def render_trace(text: str) -> str:
    """Plain-text trace for operators.

    Falls back to the full raw output when nothing matched so that unfamiliar
    formats can still be inspected.
    """
    matched = trace_active_lines(text)
    if not matched:
        return f"{NO_MATCH_MESSAGE}\n\nFull output:\n{text or ''}"
    return "\n".join(matched)
