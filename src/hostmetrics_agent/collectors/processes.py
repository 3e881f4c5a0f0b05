"""Process collectors."""

from typing import List

from ..context import RunContext
from ..records import MetricRecord
from .base import read_proc_file, run_command

PROC_STAT = "/proc/stat"


def collect_fork_count(ctx: RunContext, path: str = PROC_STAT) -> List[MetricRecord]:
    """
    Collect the number of forks since boot.

    Reads the `processes` line of /proc/stat.
    """
    text = read_proc_file(path)
    if text is None:
        return []

    for line in text.splitlines():
        fields = line.split()
        if len(fields) >= 2 and fields[0] == "processes":
            return [ctx.record("process.forked", fields[1])]

    return []


def collect_process_count(ctx: RunContext) -> List[MetricRecord]:
    """Collect the number of running processes as listed by ps."""
    output = run_command(["ps", "-e", "-o", "pid="], timeout=ctx.command_timeout)
    if output is None:
        return []

    count = sum(1 for line in output.splitlines() if line.strip())

    return [ctx.record("process.count", count)]
