"""Extension scripts: executables that contribute their own metrics.

Every executable file in the extensions directory is run with no arguments.
Each line it prints to stdout is `<metric-suffix> <value>`; further tokens on
the line are ignored. The metric is sent as `<host>.<metric-suffix>`.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .context import RunContext
from .records import MetricRecord

logger = logging.getLogger(__name__)


def discover_extensions(directory: str) -> List[Path]:
    """Executable regular files in directory, sorted by name."""
    path = Path(directory)
    if not path.is_dir():
        logger.debug(f"Extensions directory not found: {directory}")
        return []

    return sorted(
        entry for entry in path.iterdir()
        if entry.is_file() and os.access(entry, os.X_OK)
    )


def run_extension(path: Path, timeout: int = 30) -> Optional[str]:
    """
    Run one extension and capture its output.

    Returns:
        stdout, or None if the extension failed, timed out or could not be started
    """
    try:
        result = subprocess.run(
            [str(path)],
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Extension {path.name} timed out after {timeout}s")
        return None
    except (subprocess.SubprocessError, OSError) as e:
        logger.warning(f"Extension {path.name} could not be run: {e}")
        return None

    if result.returncode != 0:
        logger.warning(f"Extension {path.name} exited with {result.returncode}")
        return None

    return result.stdout


def parse_extension_output(text: str) -> List[Tuple[str, str]]:
    """Parse `<suffix> <value>` lines; lines with fewer than two tokens are skipped."""
    pairs = []

    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        pairs.append((fields[0], fields[1]))

    return pairs


def collect_extensions(ctx: RunContext, directory: str, timeout: int = 30) -> List[MetricRecord]:
    """Run every extension in directory in turn and collect their records."""
    records = []

    for path in discover_extensions(directory):
        output = run_extension(path, timeout)
        if not output:
            continue

        found = [ctx.record(suffix, value) for suffix, value in parse_extension_output(output)]
        logger.debug(f"Extension {path.name}: {len(found)} record(s)")
        records.extend(found)

    return records
