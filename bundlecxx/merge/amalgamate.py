"""
File merger backed by the external ``amalgamate`` tool.

The tool is invoked as ``amalgamate [args...] <source> <output>``; extra
arguments from the command line are placed before the file paths.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from ..exceptions import MergeError, ToolNotFoundError
from ..process import find_tool, run_tool

logger = logging.getLogger(__name__)


class AmalgamateMerger:
    """Runs the amalgamate executable to produce a single-file bundle."""

    def __init__(self, command: str = "amalgamate", timeout: Optional[float] = None):
        self.command = command
        self.timeout = timeout

    def is_available(self) -> bool:
        return find_tool(self.command) is not None

    def merge(
        self,
        source_path: Union[str, Path],
        output_path: Union[str, Path],
        args: Sequence[str] = (),
    ) -> None:
        exe = find_tool(self.command)
        if exe is None:
            raise ToolNotFoundError(self.command)

        logger.info("Amalgamating source file %s ...", source_path)
        argv = [exe, *args, str(source_path), str(output_path)]
        try:
            result = run_tool(argv, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise MergeError(f"{self.command} timed out after {e.timeout} seconds")
        except OSError as e:
            raise MergeError(f"Could not run {self.command}: {e}")

        if result.stdout.strip():
            logger.debug("%s output:\n%s", self.command, result.stdout.rstrip())
        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise MergeError(
                f"{self.command} exited with status {result.returncode}"
                + (f": {stderr}" if stderr else ""),
                returncode=result.returncode,
                stderr=stderr,
            )
