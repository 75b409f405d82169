"""
Exception hierarchy for bundle-cxx.

All errors raised by the rename/merge workflow derive from BundleCxxError so
callers (the API facade and the CLI) can report them uniformly.
"""

from pathlib import Path
from typing import List, Optional


class BundleCxxError(Exception):
    """Base class for all bundle-cxx errors."""

    pass


class SourceFileError(BundleCxxError):
    """Raised when the source file is missing or not given."""

    pass


class ToolNotFoundError(BundleCxxError):
    """Raised when a required external tool cannot be located."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f'Required tool, "{tool_name}", is not present.')


class SymbolListingError(BundleCxxError):
    """Raised when the symbol source cannot parse a translation unit."""

    pass


class SymbolTableError(BundleCxxError):
    """Raised when a symbols CSV file cannot be read or has a bad header."""

    pass


class BackupError(BundleCxxError):
    """Raised when backing up or restoring original files fails."""

    def __init__(self, message: str, paths: Optional[List[Path]] = None):
        self.paths = list(paths or [])
        super().__init__(message)


class MergeError(BundleCxxError):
    """Raised when the file merger (amalgamate) fails."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
