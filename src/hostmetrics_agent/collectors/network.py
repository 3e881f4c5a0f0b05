"""Network interface collector."""

import logging
import re
from typing import List, Optional

import psutil

from ..context import RunContext
from ..records import MetricRecord
from .base import have_utility, run_command

logger = logging.getLogger(__name__)

# Matches both net-tools formats:
#   "RX packets 1234  bytes 567890 (567.8 KB)"
#   "RX bytes:567890 (567.8 KB)  TX bytes:1234 (1.2 KB)"
RX_BYTES = re.compile(r"\bRX\b.*?\bbytes[:\s]+(\d+)")
TX_BYTES = re.compile(r"\bTX\b.*?\bbytes[:\s]+(\d+)")


def list_interfaces() -> List[str]:
    """Names of the network interfaces on this host, loopback excluded."""
    try:
        names = psutil.net_if_addrs().keys()
    except (OSError, psutil.Error) as e:
        logger.debug(f"Cannot list network interfaces: {e}")
        return []

    return sorted(name for name in names if name != "lo")


def parse_byte_counter(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def collect_network_interfaces(ctx: RunContext) -> List[MetricRecord]:
    """
    Collect received and transmitted byte counters per interface.

    A counter is only reported when ifconfig printed it. Interfaces with
    no byte fields at all are skipped.
    """
    if not have_utility("ifconfig"):
        return []

    records = []

    for iface in list_interfaces():
        output = run_command(["ifconfig", iface], timeout=ctx.command_timeout)
        if not output:
            continue

        rx_bytes = parse_byte_counter(RX_BYTES, output)
        tx_bytes = parse_byte_counter(TX_BYTES, output)

        if rx_bytes:
            records.append(ctx.record(f"net.{iface}.rx", rx_bytes))
        if tx_bytes:
            records.append(ctx.record(f"net.{iface}.tx", tx_bytes))

    return records
