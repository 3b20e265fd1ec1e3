"""Line rules for swanctl output.

Each extraction task gets its own ordered tuple of rules. The tuples are
compiled once at import time and never mutated; callers pick either
first-match-wins (``first_match``) or every-match (``all_matches``)
semantics depending on the task.

Rule order inside a set matters only for first-match-wins callers: newer and
more specific output formats are listed before the legacy fallbacks.
"""

from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass

NAME = r"[A-Za-z0-9._:-]+"
COUNT = r"[0-9,]+"

IN = "in"
OUT = "out"


@dataclass(frozen=True)
class LineRule:
    """A compiled matcher plus how to pull identifiers out of it."""

    name: str
    pattern: t.Pattern[str]
    direction: t.Optional[str] = None
    split: t.Optional[t.Pattern[str]] = None

    def captures(self, line: str) -> t.Optional[t.Tuple[str, ...]]:
        m = self.pattern.search(line)
        if m is None:
            return None
        return tuple((g or "").strip() for g in m.groups())

    def names(self, line: str) -> t.List[str]:
        """Return the connection names this rule captures on ``line``."""
        groups = self.captures(line)
        if not groups:
            return []
        if self.split is not None:
            return [tok.strip() for tok in self.split.split(groups[0]) if tok.strip()]
        return [groups[0]] if groups[0] else []


class RuleMatch(t.NamedTuple):
    rule: LineRule
    groups: t.Tuple[str, ...]


def _rule(name: str, regex: str, **kwargs: t.Any) -> LineRule:
    return LineRule(name=name, pattern=re.compile(regex), **kwargs)


# ============================================================================
# --list-conns: configured children
# ============================================================================

# "  net-net: TUNNEL, rekeying every 3600s"
CONNS_TUNNEL = _rule("tunnel_child", rf"^\s+({NAME}):\s+TUNNEL\b")
# "children: a, b c"
CONNS_CHILDREN = _rule("children_list", r"(?i)\bchildren:\s*(.+)$", split=re.compile(r"[,\s]+"))
# "  child net-net"
CONNS_CHILD = _rule("child_line", rf"(?i)^\s*child\s+({NAME})\b")

CONNS_RULES: t.Tuple[LineRule, ...] = (CONNS_TUNNEL, CONNS_CHILDREN, CONNS_CHILD)


# ============================================================================
# --list-sas: installed children
# ============================================================================

# "  net-net: #3, reqid 1, INSTALLED, TUNNEL, ESP:AES_CBC-128/HMAC_SHA2_256_128"
HASH_ESP = _rule("hash_esp", rf"(?i)^\s*({NAME}):\s*#\d+,\s.*\bESP:")
# "  net-net{1}:  INSTALLED, TUNNEL, reqid 1" (ipsec statusall style)
BRACE = _rule("brace", rf"(?i)^\s*(?:child\s+)?({NAME})\{{\d+\}}:?")
# "CHILD_SA net-net{1} established"
CHILD_SA = _rule("child_sa", rf"(?i)^\s*CHILD_SA\s+({NAME})\{{\d+\}}")
# "child 'net-net'"
QUOTED = _rule("quoted", r"(?i)^\s*child\s+'([^']+)'")
# "  net-net: INSTALLED, TUNNEL"
INSTALLED = _rule("installed", rf"(?i)^\s*(?:child\s+)?({NAME}):\s+INSTALLED\b")
# "... installed CHILD_SA 'net-net' ..." (charon log lines)
INSTALLED_LOG = _rule("installed_log", r"(?i)\binstalled\s+CHILD_SA\s+'([^']+)'")
# "  net-net: TUNNEL, ..." / ESP / ROUTED / ESTABLISHED
TOLERANT = _rule("tolerant", rf"(?i)^\s*(?:child\s+)?({NAME}):\s*(?:TUNNEL|ESP|ROUTED|ESTABLISHED)\b")

ACTIVE_RULES: t.Tuple[LineRule, ...] = (
    BRACE,
    CHILD_SA,
    QUOTED,
    INSTALLED,
    INSTALLED_LOG,
    HASH_ESP,
    TOLERANT,
)

# Only these lines move the status pass to a new current child, in this
# precedence. hash_esp must stay ahead of brace.
HEADER_RULES: t.Tuple[LineRule, ...] = (
    HASH_ESP,
    BRACE,
    CHILD_SA,
    QUOTED,
)

# Configured-child discovery from --list-sas when --list-conns has nothing.
# State and log lines (INSTALLED, "installed CHILD_SA") are not configuration.
FALLBACK_RULES: t.Tuple[LineRule, ...] = HEADER_RULES


# ============================================================================
# --list-sas: traffic counters
# ============================================================================

_IN_SPI = rf"^\s*in\s+[0-9A-Fa-fx]+,\s*({COUNT})\s*bytes,\s*({COUNT})\s*packets"
_IN_PRIMARY = rf"^\s*in:\s*({COUNT})\s*bytes,\s*({COUNT})\s*packets"
_IN_ALT = rf"^\s*in:.*?\bbytes\s+({COUNT}).*?\bpackets\s+({COUNT})"
_IN_LOOSE = rf"^\s*in\b.*?\bbytes\s+({COUNT}).*?\bpackets\s+({COUNT})"


def _counter_pair(kind: str, regex: str) -> t.Tuple[LineRule, LineRule]:
    out_regex = regex.replace(r"^\s*in", r"^\s*out", 1)
    return (
        _rule(f"{IN}_{kind}", regex, direction=IN),
        _rule(f"{OUT}_{kind}", out_regex, direction=OUT),
    )


COUNTER_RULES: t.Tuple[LineRule, ...] = (
    *_counter_pair("spi", _IN_SPI),
    *_counter_pair("primary", _IN_PRIMARY),
    *_counter_pair("alt", _IN_ALT),
    *_counter_pair("loose", _IN_LOOSE),
)


# ============================================================================
# Classification
# ============================================================================

def first_match(rules: t.Iterable[LineRule], line: str) -> t.Optional[RuleMatch]:
    """Return the first rule in ``rules`` matching ``line``; later rules are not tried."""
    for rule in rules:
        groups = rule.captures(line)
        if groups is not None:
            return RuleMatch(rule, groups)
    return None


def all_matches(rules: t.Iterable[LineRule], line: str) -> t.List[RuleMatch]:
    """Return every rule in ``rules`` matching ``line``, in set order."""
    found = []
    for rule in rules:
        groups = rule.captures(line)
        if groups is not None:
            found.append(RuleMatch(rule, groups))
    return found


def matches_any(rules: t.Iterable[LineRule], line: str) -> bool:
    return any(rule.pattern.search(line) for rule in rules)


def classify(rules: t.Iterable[LineRule], line: str) -> t.Optional[str]:
    """Line Classifier: captured name of the first matching rule, or None."""
    m = first_match(rules, line)
    if m is None or not m.groups:
        return None
    return m.groups[0] or None
