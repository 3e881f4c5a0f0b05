"""Shared pytest configuration and fixtures."""

import subprocess

import pytest

from hostmetrics_agent.context import RunContext

TIMESTAMP = 1700000000


class AllowPolicy:
    def allows(self, timestamp):
        return True


class DenyPolicy:
    def allows(self, timestamp):
        return False


class FakeCommands:
    """Stand-in for subprocess.run keyed on the command name.

    Commands missing from `outputs` behave as if the utility is not installed.
    A value may be a string (stdout, exit 0) or a CompletedProcess.
    """

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(list(args))

        if args[0] not in self.outputs:
            raise FileNotFoundError(2, "No such file or directory", args[0])

        output = self.outputs[args[0]]
        if callable(output):
            output = output(args)
        if isinstance(output, subprocess.CompletedProcess):
            return output

        return subprocess.CompletedProcess(args, 0, stdout=output, stderr="")

    def ran(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def ctx():
    """Privileged run context with NTP queries allowed."""
    return RunContext(hostname="web1", timestamp=TIMESTAMP, privileged=True, ntp_policy=AllowPolicy())


@pytest.fixture
def unprivileged_ctx():
    return RunContext(hostname="web1", timestamp=TIMESTAMP, privileged=False, ntp_policy=AllowPolicy())


@pytest.fixture
def fake_commands(monkeypatch):
    """Install a FakeCommands for subprocess.run; call with the outputs mapping."""

    def install(outputs):
        fake = FakeCommands(outputs)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return install
