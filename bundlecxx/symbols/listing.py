"""
Symbol sources: enumerate top-level declarations of a C/C++ source file.

Two implementations are provided:

- LibclangSymbolSource parses in-process through the clang.cindex bindings.
- ExecutableSymbolSource runs a standalone list-symbols executable and reads
  the CSV it prints on stdout.

Both only look at the direct children of the translation unit (top-level
declarations) and skip anything that lives in a system header.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..exceptions import SourceFileError, SymbolListingError, ToolNotFoundError
from ..process import find_tool, run_tool
from .table import SymbolEntry, parse_symbols_csv

logger = logging.getLogger(__name__)


def _require_source(source_path: Union[str, Path]) -> Path:
    path = Path(source_path)
    if not path.is_file():
        raise SourceFileError(f"Source file not found: {path}")
    return path


class LibclangSymbolSource:
    """List top-level declarations using libclang's cursor API."""

    def __init__(self, library_file: Optional[str] = None):
        self.library_file = library_file
        self._index = None

    def _get_index(self):
        # Imported lazily: loading the bindings locates the native library.
        import clang.cindex as cindex

        if self._index is None:
            if self.library_file and not cindex.Config.loaded:
                cindex.Config.set_library_file(self.library_file)
            try:
                self._index = cindex.Index.create()
            except cindex.LibclangError as e:
                raise SymbolListingError(f"Unable to load libclang: {e}")
        return self._index

    def is_available(self) -> bool:
        try:
            self._get_index()
        except SymbolListingError as e:
            logger.debug("libclang unavailable: %s", e)
            return False
        return True

    def list_symbols(
        self, source_path: Union[str, Path], args: Sequence[str] = ()
    ) -> List[SymbolEntry]:
        path = _require_source(source_path)
        index = self._get_index()

        import clang.cindex as cindex

        try:
            unit = index.parse(str(path), args=list(args))
        except cindex.TranslationUnitLoadError as e:
            raise SymbolListingError(f"Unable to parse translation unit {path}: {e}")

        entries: List[SymbolEntry] = []
        for cursor in unit.cursor.get_children():
            location = cursor.location
            if location.file is None or location.is_in_system_header:
                continue
            name = cursor.displayname
            if not name:
                continue
            entries.append(
                SymbolEntry(
                    filename_line=f"{location.file.name}:{location.line}",
                    kind_display_name=f"{cursor.kind.name}:{name}",
                )
            )

        logger.debug("libclang listed %d declarations in %s", len(entries), path)
        return entries


class ExecutableSymbolSource:
    """List top-level declarations by running a list-symbols executable.

    The executable is called as ``<exe> <source> [args...]`` and prints the
    symbols table on stdout.
    """

    def __init__(self, executable: str = "list-symbols", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def is_available(self) -> bool:
        return find_tool(self.executable) is not None

    def list_symbols(
        self,
        source_path: Union[str, Path],
        args: Sequence[str] = (),
    ) -> List[SymbolEntry]:
        path = _require_source(source_path)
        exe = find_tool(self.executable)
        if exe is None:
            raise ToolNotFoundError(self.executable)

        try:
            result = run_tool([exe, str(path), *args], timeout=self.timeout)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise SymbolListingError(f"{self.executable} failed: {e}")

        if result.returncode != 0:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise SymbolListingError(f"{self.executable} failed: {message}")

        return parse_symbols_csv(result.stdout.replace("\r\n", "\n"))
