"""Metric record and its plaintext wire format."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MetricRecord:
    """One telemetry data point."""

    name: str
    value: str
    timestamp: int

    def line(self) -> str:
        """Render as `<name> <value> <timestamp>` with a trailing newline."""
        return f"{self.name} {self.value} {self.timestamp}\n"
