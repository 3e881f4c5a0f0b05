"""Tests for extension discovery and execution."""

import os

import pytest

from hostmetrics_agent.extensions import (
    collect_extensions,
    discover_extensions,
    parse_extension_output,
    run_extension,
)

from conftest import TIMESTAMP


def write_script(directory, name, body, executable=True):
    path = directory / name
    path.write_text("#!/bin/sh\n" + body)
    os.chmod(path, 0o755 if executable else 0o644)
    return path


@pytest.fixture
def extensions_dir(tmp_path):
    directory = tmp_path / "extensions.d"
    directory.mkdir()
    return directory


def test_collect_extensions(ctx, extensions_dir):
    write_script(extensions_dir, "custom", 'echo "metric.name1 33"\necho "metric.name2 77"\n')

    records = collect_extensions(ctx, str(extensions_dir))

    assert [record.line() for record in records] == [
        f"web1.metric.name1 33 {TIMESTAMP}\n",
        f"web1.metric.name2 77 {TIMESTAMP}\n",
    ]


def test_extensions_run_in_name_order(ctx, extensions_dir):
    write_script(extensions_dir, "20-second", 'echo "b 2"\n')
    write_script(extensions_dir, "10-first", 'echo "a 1"\n')

    records = collect_extensions(ctx, str(extensions_dir))

    assert [r.name for r in records] == ["web1.a", "web1.b"]


def test_non_executable_entries_skipped(ctx, extensions_dir):
    write_script(extensions_dir, "disabled", 'echo "nope 1"\n', executable=False)
    (extensions_dir / "subdir").mkdir()
    write_script(extensions_dir, "enabled", 'echo "yes 1"\n')

    assert discover_extensions(str(extensions_dir)) == [extensions_dir / "enabled"]
    assert [r.name for r in collect_extensions(ctx, str(extensions_dir))] == ["web1.yes"]


def test_missing_directory(ctx, tmp_path):
    assert discover_extensions(str(tmp_path / "missing")) == []
    assert collect_extensions(ctx, str(tmp_path / "missing")) == []


def test_failing_extension_contributes_nothing(ctx, extensions_dir):
    write_script(extensions_dir, "broken", 'echo "half.done 1"\nexit 3\n')
    write_script(extensions_dir, "fine", 'echo "ok 1"\n')

    records = collect_extensions(ctx, str(extensions_dir))

    assert [r.name for r in records] == ["web1.ok"]


def test_empty_output(extensions_dir):
    path = write_script(extensions_dir, "quiet", "true\n")

    assert run_extension(path) == ""


def test_timeout(extensions_dir):
    path = write_script(extensions_dir, "slow", "sleep 5\n")

    assert run_extension(path, timeout=1) is None


def test_parse_extension_output_is_permissive():
    text = "queue.depth 12 extra tokens here\n\n  lonely\n\tcache.hits\t904\n"

    assert parse_extension_output(text) == [("queue.depth", "12"), ("cache.hits", "904")]


def test_undecodable_output_is_not_fatal(ctx, extensions_dir):
    write_script(extensions_dir, "binary", "printf 'x.y 1\\n\\377\\376 2\\n'\n")
    write_script(extensions_dir, "plain", 'echo "after 1"\n')

    records = collect_extensions(ctx, str(extensions_dir))
    names = [r.name for r in records]

    assert "web1.x.y" in names
    assert names[-1] == "web1.after"
    assert len(records) == 3
