"""Status checks for the strongSwan daemon.

Each function fetches the swanctl text it needs and hands it to the
matching parser. Listing-style checks tolerate swanctl failures (empty
result); the others let ``ExternalProcessFailure`` propagate so callers can
report it instead of showing stale or partial data.
"""

from __future__ import annotations

import logging
import typing as t

from ..errors import ExternalProcessFailure
from ..swanctl_parsers import list_conns, list_sas, stats
from .swanctl import SwanctlRunner

logger = logging.getLogger(__name__)


def collect_children(runner: SwanctlRunner) -> t.List[str]:
    """Configured child names; --list-sas is only read when --list-conns has none."""
    names = list_conns.parse(runner.list_conns(strict=False))
    if names:
        return names
    logger.debug("No children in --list-conns output; falling back to --list-sas")
    return list_conns.parse_fallback(runner.list_sas(strict=False))


def collect_active(runner: SwanctlRunner) -> t.List[str]:
    return list_sas.parse_active(runner.list_sas())


def collect_status(runner: SwanctlRunner) -> t.Dict[str, stats.ConnectionStatus]:
    return stats.parse_status(runner.list_sas())


def collect_debug_trace(runner: SwanctlRunner) -> str:
    """Trace of --list-sas lines that matched active-detection rules.

    A failed swanctl still gets traced using whatever it printed, so the
    operator sees the raw error text under the no-match message.
    """
    try:
        text = runner.list_sas()
    except ExternalProcessFailure as e:
        logger.warning("Tracing output of failed swanctl call: %s", e)
        text = e.output
    return list_sas.render_trace(text)


def collect_summary(runner: SwanctlRunner) -> t.Dict[str, t.Any]:
    """Get a combined snapshot of configured, active and per-child counters.

    Returns:
        Dictionary with:
        - children: sorted configured names
        - active: sorted active names
        - status: {name: {active, in_bytes, out_bytes, in_pkts, out_pkts}}
        - down: configured names that are not active
        - overall_status: "healthy" | "degraded" | "idle"
    """
    sas_text = runner.list_sas()
    status = stats.parse_status(sas_text)
    active = list_sas.parse_active(sas_text)

    children = list_conns.parse(runner.list_conns(strict=False))
    if not children:
        children = list_conns.parse_fallback(sas_text)

    down = [name for name in children if name not in status]

    if not children and not active:
        overall = "idle"
    elif down:
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "children": children,
        "active": active,
        "status": stats.status_to_dict(status),
        "down": down,
        "overall_status": overall,
    }
