"""Heartbeat metrics collectors: uptime, load, swap activity and logged-in users."""

from typing import List

from ..context import RunContext
from ..records import MetricRecord
from .base import first_field, read_proc_file, run_command

PROC_UPTIME = "/proc/uptime"
PROC_LOADAVG = "/proc/loadavg"


def collect_uptime(ctx: RunContext, path: str = PROC_UPTIME) -> List[MetricRecord]:
    """Collect seconds since boot, fractional part truncated."""
    value = first_field(read_proc_file(path))
    if value is None:
        return []

    try:
        uptime_seconds = int(float(value))
    except ValueError:
        return []

    return [ctx.record("uptime", uptime_seconds)]


def collect_load(ctx: RunContext, path: str = PROC_LOADAVG) -> List[MetricRecord]:
    """Collect the 1-minute load average."""
    value = first_field(read_proc_file(path))
    if value is None:
        return []

    return [ctx.record("load", value)]


def collect_swap(ctx: RunContext) -> List[MetricRecord]:
    """
    Collect swap-in and swap-out rates from vmstat.

    The `si` and `so` columns are located by name in the header row, the
    values are read from the row that follows it.
    """
    output = run_command(["vmstat"], timeout=ctx.command_timeout)
    if output is None:
        return []

    lines = output.splitlines()
    for i, line in enumerate(lines[:-1]):
        header = line.split()
        if "si" not in header or "so" not in header:
            continue

        values = lines[i + 1].split()
        try:
            swap_in = values[header.index("si")]
            swap_out = values[header.index("so")]
        except IndexError:
            return []

        return [
            ctx.record("swap.in", swap_in),
            ctx.record("swap.out", swap_out),
        ]

    return []


def collect_users(ctx: RunContext) -> List[MetricRecord]:
    """Collect the number of logged-in user sessions."""
    output = run_command(["w", "-h"], timeout=ctx.command_timeout)
    if output is None:
        return []

    count = sum(1 for line in output.splitlines() if line.strip())

    return [ctx.record("users", count)]
