"""Built-in probes for system monitoring."""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..context import RunContext
from ..records import MetricRecord
from .disks import collect_disks
from .heartbeat import collect_load, collect_swap, collect_uptime, collect_users
from .network import collect_network_interfaces
from .ntp import collect_ntp_skew
from .packages import collect_installed_packages, collect_pending_updates
from .processes import collect_fork_count, collect_process_count

logger = logging.getLogger(__name__)

Probe = Callable[[RunContext], List[MetricRecord]]

# Run order
PROBES: Dict[str, Probe] = {
    "forks": collect_fork_count,
    "processes": collect_process_count,
    "disks": collect_disks,
    "swap": collect_swap,
    "uptime": collect_uptime,
    "load": collect_load,
    "users": collect_users,
    "network": collect_network_interfaces,
    "ntp": collect_ntp_skew,
    "packages": collect_installed_packages,
    "updates": collect_pending_updates,
}


def collect_builtin(ctx: RunContext, names: Optional[Iterable[str]] = None) -> List[MetricRecord]:
    """
    Run the built-in probes one after another.

    Args:
        ctx: Run context shared by every probe
        names: Restrict to these probe names (default: all, in run order)

    Returns:
        Records from every probe that produced any
    """
    selected = set(names) if names is not None else None
    records: List[MetricRecord] = []

    for name, probe in PROBES.items():
        if selected is not None and name not in selected:
            continue

        try:
            found = probe(ctx)
        except Exception as e:
            logger.warning(f"Probe {name} failed: {e}")
            continue

        logger.debug(f"Probe {name}: {len(found)} record(s)")
        records.extend(found)

    return records


__all__ = [
    "PROBES",
    "collect_builtin",
    "collect_disks",
    "collect_fork_count",
    "collect_installed_packages",
    "collect_load",
    "collect_network_interfaces",
    "collect_ntp_skew",
    "collect_pending_updates",
    "collect_process_count",
    "collect_swap",
    "collect_uptime",
    "collect_users",
]
