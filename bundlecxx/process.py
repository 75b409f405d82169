"""Helpers for locating and running external tools."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def find_tool(name_or_path: str) -> Optional[str]:
    """Resolve a tool given as a path or as a command name on PATH."""
    if not name_or_path:
        return None
    candidate = Path(name_or_path).expanduser()
    if candidate.is_file() and os.access(candidate, os.X_OK):
        return str(candidate)
    return shutil.which(name_or_path)


def run_tool(
    argv: Sequence[str], timeout: Optional[float] = None, cwd: Optional[Path] = None
) -> subprocess.CompletedProcess:
    """Run an external tool, capturing its output as text.

    Raises subprocess.TimeoutExpired or OSError; a non-zero exit status is left
    for the caller to interpret.
    """
    argv = [str(a) for a in argv]
    logger.debug("Running: %s", " ".join(argv))
    return subprocess.run(
        argv,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )
