"""Helpers shared by the built-in probes."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def have_utility(name: str) -> bool:
    """Check whether a utility is on PATH."""
    return shutil.which(name) is not None


def run_command(args: List[str], timeout: int = 30, env: Optional[dict] = None) -> Optional[str]:
    """
    Run a utility and return its stdout.

    Args:
        args: Command and arguments
        timeout: Seconds before the call is abandoned
        env: Full environment for the child, if it must differ from ours

    Returns:
        Captured stdout, or None if the utility is missing, times out or exits nonzero
    """
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            env=env,
        )
    except (subprocess.SubprocessError, OSError) as e:
        logger.debug(f"{args[0]} failed: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"{args[0]} exited with {result.returncode}")
        return None

    return result.stdout


def read_proc_file(path: str) -> Optional[str]:
    """Read a /proc style file, or None if it is absent or unreadable."""
    try:
        return Path(path).read_text()
    except OSError:
        return None


def first_field(text: Optional[str]) -> Optional[str]:
    """First whitespace-separated token of text, if there is one."""
    if not text:
        return None
    fields = text.split()
    return fields[0] if fields else None
