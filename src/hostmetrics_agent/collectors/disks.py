"""Disk usage collector."""

import posixpath
from typing import List

from ..context import RunContext
from ..records import MetricRecord
from .base import run_command

ROOT_LABEL = "root"


def mount_label(mountpoint: str) -> str:
    """Metric label for a mount point: its basename, or `root` for /."""
    return posixpath.basename(mountpoint.rstrip("/")) or ROOT_LABEL


def collect_disks(ctx: RunContext) -> List[MetricRecord]:
    """
    Collect disk usage percentage for every mounted block filesystem.

    Parses POSIX `df -P` output. Only rows whose filesystem starts with `/`
    are reported, which skips tmpfs, devtmpfs, overlay and friends.
    """
    output = run_command(["df", "-P"], timeout=ctx.command_timeout)
    if output is None:
        return []

    records = []

    # Skip header line
    for line in output.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 6 or not fields[0].startswith("/"):
            continue

        used_pct = fields[4].rstrip("%")
        if not used_pct.isdigit():
            continue

        # Mount points may contain spaces
        mountpoint = " ".join(fields[5:])

        records.append(ctx.record(f"mount.{mount_label(mountpoint)}", used_pct))

    return records
