"""Plaintext TCP transport: one connection per metric line."""

import logging
import socket
import sys
from typing import Optional, TextIO

from .records import MetricRecord

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Base exception for transport errors."""
    pass


class TransportUnavailable(TransportError):
    """The collector endpoint cannot be used at all this run."""
    pass


class PlaintextSender:
    """
    Sends metric records to the collector.

    Verbose mode echoes every line to stdout; dry-run mode never opens a
    connection. The two are independent. Send failures are logged and the
    record is dropped.
    """

    def __init__(
        self,
        remote_host: str,
        remote_port: int,
        timeout: int = 5,
        verbose: bool = False,
        dry_run: bool = False,
        out: Optional[TextIO] = None,
    ):
        self.remote_host = remote_host
        self.remote_port = remote_port
        self.timeout = timeout
        self.verbose = verbose
        self.dry_run = dry_run
        self.out = out or sys.stdout

        self.sent = 0
        self.dropped = 0
        self.skipped = 0

        self._available: Optional[bool] = None

    def _check_endpoint(self) -> None:
        """
        Resolve the collector address.

        Raises:
            TransportUnavailable: Address cannot be resolved
        """
        try:
            socket.getaddrinfo(self.remote_host, self.remote_port, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as e:
            raise TransportUnavailable(f"Cannot resolve {self.remote_host}:{self.remote_port}: {e}")

    def available(self) -> bool:
        """Whether sends can be attempted; checked once per sender."""
        if self._available is None:
            try:
                self._check_endpoint()
                self._available = True
            except TransportUnavailable as e:
                logger.error(f"{e}; not sending any metrics this run")
                self._available = False

        return self._available

    def transmit(self, line: str) -> None:
        """
        Open a connection, write one line, close.

        Raises:
            OSError: Connection refused, reset or timed out
        """
        with socket.create_connection((self.remote_host, self.remote_port), timeout=self.timeout) as sock:
            sock.sendall(line.encode("utf-8"))

    def send(self, record: MetricRecord) -> None:
        """Echo and/or transmit one record."""
        line = record.line()

        if self.verbose:
            self.out.write(line)

        if self.dry_run or not self.available():
            self.skipped += 1
            return

        try:
            self.transmit(line)
            self.sent += 1
        except OSError as e:
            logger.debug(f"Dropped {record.name}: {e}")
            self.dropped += 1
