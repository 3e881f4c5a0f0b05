"""Per-run context: hostname, timestamp and privilege shared by every probe."""

import os
import socket
import time
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .records import MetricRecord

HOSTNAME_ENV = "HOSTMETRICS_HOSTNAME"


def resolve_hostname(override: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Determine the unqualified hostname used to prefix metric names.

    Args:
        override: Hostname from the config file, if any
        environ: Environment mapping (default: os.environ)

    Returns:
        First label of the hostname (may be empty)
    """
    environ = os.environ if environ is None else environ

    hostname = environ.get(HOSTNAME_ENV) or override or socket.gethostname()

    return hostname.split(".")[0]


def is_privileged() -> bool:
    """Check for root (effective uid 0)."""
    return os.geteuid() == 0


class EvenMinutePolicy:
    """Allow NTP pool queries only on even minutes, to avoid upstream throttling."""

    def allows(self, timestamp: int) -> bool:
        return time.localtime(timestamp).tm_min % 2 == 0


@dataclass(frozen=True)
class RunContext:
    """Immutable values captured once at the start of a run."""

    hostname: str
    timestamp: int
    privileged: bool
    command_timeout: int = 30
    ntp_policy: EvenMinutePolicy = field(default_factory=EvenMinutePolicy)

    @classmethod
    def capture(cls, hostname_override: Optional[str] = None, command_timeout: int = 30) -> "RunContext":
        return cls(
            hostname=resolve_hostname(hostname_override),
            timestamp=int(time.time()),
            privileged=is_privileged(),
            command_timeout=command_timeout,
        )

    def record(self, path: str, value) -> MetricRecord:
        """Build a record named `<host>.<path>` stamped with the run timestamp."""
        return MetricRecord(name=f"{self.hostname}.{path}", value=str(value), timestamp=self.timestamp)
