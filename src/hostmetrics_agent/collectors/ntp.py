"""NTP clock skew collector."""

import re
from typing import List

from ..context import RunContext
from ..records import MetricRecord
from .base import run_command

NTP_POOL = "pool.ntp.org"

OFFSET = re.compile(r"\boffset\s+(-?\d+(?:\.\d+)?)")


def collect_ntp_skew(ctx: RunContext, server: str = NTP_POOL) -> List[MetricRecord]:
    """
    Collect local clock offset against the NTP pool.

    Requires root and only queries when the rate-limit policy allows it
    (every other minute).
    """
    if not ctx.privileged or not ctx.ntp_policy.allows(ctx.timestamp):
        return []

    output = run_command(["ntpdate", "-q", server], timeout=ctx.command_timeout)
    if not output:
        return []

    # The summary line comes last
    offsets = OFFSET.findall(output)
    if not offsets:
        return []

    return [ctx.record("ntp-skew", offsets[-1])]
