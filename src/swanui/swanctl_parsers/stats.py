"""Per-child traffic counters from ``swanctl --list-sas`` output.

The pass walks the text once, remembering which child the most recent header
line introduced. Counter lines are attributed to that child; counter lines
seen before any header have nowhere to go and are dropped.

Header detection and counter detection are both first-match-wins over their
rule sets (see ``patterns.HEADER_RULES`` and ``patterns.COUNTER_RULES``).
Other active shapes (``name: INSTALLED``, charon log lines, ...) get a record
so the keys agree with ``list_sas.parse_active``, but they never change the
current child.
"""

from __future__ import annotations

import typing as t
from dataclasses import asdict, dataclass

from .numbers import parse_count
from .patterns import ACTIVE_RULES, COUNTER_RULES, HEADER_RULES, IN, all_matches, first_match


@dataclass
class ConnectionStatus:
    active: bool = False
    in_bytes: int = 0
    out_bytes: int = 0
    in_pkts: int = 0
    out_pkts: int = 0

    def to_dict(self) -> t.Dict[str, t.Any]:
        return asdict(self)


@dataclass
class ParseContext:
    current: t.Optional[str] = None


def _ensure(stats: t.Dict[str, ConnectionStatus], name: str) -> ConnectionStatus:
    st = stats.get(name)
    if st is None:
        st = stats[name] = ConnectionStatus()
    st.active = True
    return st


def parse_status(text: str) -> t.Dict[str, ConnectionStatus]:
    """Aggregate inbound/outbound byte and packet counters per child."""
    stats: t.Dict[str, ConnectionStatus] = {}
    ctx = ParseContext()

    for line in (text or "").splitlines():
        header = first_match(HEADER_RULES, line)
        if header is not None and header.groups and header.groups[0]:
            ctx.current = header.groups[0]

        active = all_matches(ACTIVE_RULES, line)
        for m in active:
            for name in m.rule.names(line):
                _ensure(stats, name)
        if header is not None or active:
            continue

        if ctx.current is None:
            continue

        counter = first_match(COUNTER_RULES, line)
        if counter is None:
            continue
        st = stats[ctx.current]
        nbytes, npkts = (parse_count(g) for g in counter.groups[:2])
        if counter.rule.direction == IN:
            st.in_bytes, st.in_pkts = nbytes, npkts
        else:
            st.out_bytes, st.out_pkts = nbytes, npkts

    return stats


def status_to_dict(stats: t.Mapping[str, ConnectionStatus]) -> t.Dict[str, t.Dict[str, t.Any]]:
    return {name: st.to_dict() for name, st in stats.items()}
