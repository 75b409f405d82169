"""
Symbol enumeration and the editable symbols table.
"""

from .table import (
    SymbolEntry,
    default_symbols_path,
    group_symbols_by_file,
    parse_location,
    read_symbols_csv,
    write_symbols_csv,
)
from .listing import ExecutableSymbolSource, LibclangSymbolSource

__all__ = [
    "SymbolEntry",
    "default_symbols_path",
    "group_symbols_by_file",
    "parse_location",
    "read_symbols_csv",
    "write_symbols_csv",
    "ExecutableSymbolSource",
    "LibclangSymbolSource",
]
