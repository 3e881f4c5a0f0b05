"""Package and updates collectors."""

import os
from typing import List

from ..context import RunContext
from ..records import MetricRecord
from .base import run_command


def collect_installed_packages(ctx: RunContext) -> List[MetricRecord]:
    """
    Collect the number of installed packages using dpkg.

    Counts rows of `dpkg -l` whose desired/status flags are `ii`.
    """
    output = run_command(["dpkg", "-l"], timeout=ctx.command_timeout)
    if output is None:
        return []

    count = sum(1 for line in output.splitlines() if line.startswith("ii "))

    return [ctx.record("packages.installed", count)]


def collect_pending_updates(ctx: RunContext) -> List[MetricRecord]:
    """
    Collect the number of upgradable packages.

    Simulates `apt-get upgrade` and counts the `Inst` lines. Root only.
    """
    if not ctx.privileged:
        return []

    env = dict(os.environ, DEBIAN_FRONTEND="noninteractive")
    output = run_command(["apt-get", "-s", "upgrade"], timeout=ctx.command_timeout, env=env)
    if output is None:
        return []

    count = sum(1 for line in output.splitlines() if line.startswith("Inst "))

    return [ctx.record("packages.pending-updates", count)]
