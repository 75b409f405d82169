"""
Symbol renaming for bundle-cxx.
"""

from .renamer import (
    RenameReport,
    SymbolRenamer,
    build_word_pattern,
    extract_display_name,
)

__all__ = [
    "RenameReport",
    "SymbolRenamer",
    "build_word_pattern",
    "extract_display_name",
]
