"""Configured child names from ``swanctl --list-conns`` output."""

from __future__ import annotations

import typing as t

from .patterns import CONNS_RULES, FALLBACK_RULES, LineRule


def normalize_names(names: t.Iterable[str]) -> t.List[str]:
    """Trim, drop empties, deduplicate and sort."""
    return sorted({n.strip() for n in names if n and n.strip()})


def _collect(rules: t.Sequence[LineRule], text: str) -> t.List[str]:
    # Every rule is applied to every line; configuration styles can coexist.
    names: t.List[str] = []
    for line in (text or "").splitlines():
        for rule in rules:
            names.extend(rule.names(line))
    return names


def parse(text: str) -> t.List[str]:
    """Parse --list-conns text.

    Recognized forms (all tried, results unioned):
    - indented ``<name>: TUNNEL, ...`` child lines
    - a ``children: a, b, c`` list
    - ``child <name>`` lines
    """
    return normalize_names(_collect(CONNS_RULES, text))


def parse_fallback(text: str) -> t.List[str]:
    """Discover child names from --list-sas text using the child header shapes."""
    return normalize_names(_collect(FALLBACK_RULES, text))


def parse_children(conns_text: str, sas_text: str = "") -> t.List[str]:
    """Configured children, falling back to --list-sas when --list-conns yields nothing."""
    names = parse(conns_text)
    if names:
        return names
    return parse_fallback(sas_text)
