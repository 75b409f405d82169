"""
Symbols CSV table: entries, reading, writing and grouping by source file.

The table has one header row and three columns:

    filename_line      "<file>:<line>" where the symbol is declared
    kind_display_name  original kind and name, e.g. "FUNCTION_DECL:foo(int)"
    new_display_name   name to substitute; blank means "leave as is"
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..exceptions import SymbolTableError

logger = logging.getLogger(__name__)

FIELDNAMES = ["filename_line", "kind_display_name", "new_display_name"]

# Header written by the standalone list-symbols executable.
HEADER_ALIASES = {"display_name": "kind_display_name"}


def parse_location(filename_line: str) -> Tuple[str, Optional[int]]:
    """Split "<file>:<line>" on its last colon when the suffix is a line number."""
    head, sep, tail = filename_line.strip().rpartition(":")
    if sep and head and tail.isdigit():
        return head, int(tail)
    return filename_line.strip(), None


@dataclass
class SymbolEntry:
    """One row of the symbols table."""

    filename_line: str
    kind_display_name: str
    new_display_name: str = ""

    @property
    def filename(self) -> str:
        return parse_location(self.filename_line)[0]

    @property
    def line(self) -> Optional[int]:
        return parse_location(self.filename_line)[1]

    @property
    def new_name(self) -> str:
        return (self.new_display_name or "").strip()

    @property
    def has_rename(self) -> bool:
        return bool(self.new_name)

    def to_row(self) -> Dict[str, str]:
        return {
            "filename_line": self.filename_line,
            "kind_display_name": self.kind_display_name,
            "new_display_name": self.new_display_name or "",
        }


def _normalize_header(fieldnames: Optional[List[str]]) -> List[str]:
    if not fieldnames:
        raise SymbolTableError("Symbols table is empty or has no header row")
    header = [HEADER_ALIASES.get(name.strip(), name.strip()) for name in fieldnames]
    missing = [name for name in FIELDNAMES[:2] if name not in header]
    if missing:
        raise SymbolTableError(f"Symbols table is missing column(s): {', '.join(missing)}")
    return header


def parse_symbols_csv(text: str) -> List[SymbolEntry]:
    """Parse symbols table text into entries."""
    reader = csv.reader(io.StringIO(text))
    try:
        header = _normalize_header(next(reader, None))
    except csv.Error as e:
        raise SymbolTableError(f"Malformed symbols table: {e}")

    entries: List[SymbolEntry] = []
    try:
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            values = dict(zip(header, row))
            entries.append(
                SymbolEntry(
                    filename_line=values.get("filename_line", ""),
                    kind_display_name=values.get("kind_display_name", ""),
                    new_display_name=values.get("new_display_name", "") or "",
                )
            )
    except csv.Error as e:
        raise SymbolTableError(f"Malformed symbols table at line {reader.line_num}: {e}")
    return entries


def read_symbols_csv(path: Union[str, Path], encoding: str = "utf-8") -> List[SymbolEntry]:
    """Read the symbols CSV file, which contains symbol renaming information."""
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except OSError as e:
        raise SymbolTableError(f"Cannot read symbols table {path}: {e}")
    # Tables edited in spreadsheet tools often carry a BOM.
    entries = parse_symbols_csv(text.lstrip("\ufeff"))
    logger.debug("Read %d symbol entries from %s", len(entries), path)
    return entries


def format_symbols_csv(entries: Iterable[SymbolEntry]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=FIELDNAMES, quoting=csv.QUOTE_ALL, lineterminator="\n"
    )
    writer.writeheader()
    for entry in entries:
        writer.writerow(entry.to_row())
    return buffer.getvalue()


def write_symbols_csv(
    path: Union[str, Path],
    entries: Iterable[SymbolEntry],
    encoding: str = "utf-8",
    newline: str = "\n",
) -> Path:
    """Write entries as a symbols CSV file using the given line ending."""
    path = Path(path)
    text = format_symbols_csv(entries).replace("\n", newline)
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(text)
    return path


def group_symbols_by_file(entries: Iterable[SymbolEntry]) -> Dict[str, List[SymbolEntry]]:
    """Group symbols by their source file, so each file is processed once.

    Keys keep first-seen order; every entry lands in exactly one group.
    """
    groups: Dict[str, List[SymbolEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.filename, []).append(entry)
    return groups


def default_symbols_path(source_path: Union[str, Path], suffix: str = "_symbols.csv") -> Path:
    """Default table path for a source file: "<stem>_symbols.csv" in the working directory."""
    return Path(Path(source_path).stem + suffix)
