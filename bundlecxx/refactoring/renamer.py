"""
Whole-word symbol renaming in source files.

The substitution is purely textual: it does not know about scopes, comments or
string literals, so an unrelated token with the same spelling is renamed too.
Only whole identifier tokens are replaced; ``foo`` never touches ``foobar``
or ``my_foo``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Union

from ..config import RenameConfig
from ..symbols.table import SymbolEntry

logger = logging.getLogger(__name__)

# Signature/template/array syntax that follows the bare name in a display name.
_SIGNATURE_START = re.compile(r"[(<\[\s]")
_IDENTIFIER = re.compile(r"[A-Za-z_]\w*$")
# libclang spells unnamed records as e.g. "struct (unnamed at a.c:1:1)".
_UNNAMED = re.compile(r"\((?:unnamed|anonymous|lambda)\b")

C_KEYWORDS = frozenset(
    """
    alignas alignof auto bool break case catch char class const constexpr
    const_cast continue decltype default delete do double dynamic_cast else
    enum explicit export extern false float for friend goto if inline int long
    mutable namespace new noexcept nullptr operator private protected public
    register reinterpret_cast restrict return short signed sizeof static
    static_assert static_cast struct switch template this throw true try
    typedef typeid typename union unsigned using virtual void volatile wchar_t
    while _Bool _Complex _Static_assert
    """.split()
)


def extract_display_name(kind_display_name: str) -> Optional[str]:
    """Extract the bare identifier from a "KIND:qualified::name(signature)" string.

    >>> extract_display_name("FUNCTION_DECL:foo(int, char)")
    'foo'
    >>> extract_display_name("ns::Widget")
    'Widget'
    >>> extract_display_name("STRUCT_DECL:struct (unnamed at a.c:1:1)") is None
    True
    """
    text = kind_display_name.strip()
    if _UNNAMED.search(text):
        return None
    head = _SIGNATURE_START.split(text, maxsplit=1)[0]
    name = head.rsplit(":", 1)[-1]
    match = _IDENTIFIER.match(name)
    if not match or match.group(0) in C_KEYWORDS:
        return None
    return match.group(0)


def build_word_pattern(name: str) -> Pattern[str]:
    """Pattern matching ``name`` as a complete identifier token."""
    return re.compile(rf"(?<!\w){re.escape(name)}(?!\w)")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


@dataclass
class RenameReport:
    """What happened to one file during the rename phase."""

    file_path: str
    replacements: Dict[str, int] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    written: bool = False

    @property
    def total_replacements(self) -> int:
        return sum(self.replacements.values())


class SymbolRenamer:
    """Applies the new names from symbol table entries to source text."""

    def __init__(self, config: Optional[RenameConfig] = None):
        self.config = config or RenameConfig()

    def rename_text(
        self, content: str, symbols: Iterable[SymbolEntry], report: Optional[RenameReport] = None
    ) -> str:
        """Return content with every entry that has a new name substituted."""
        for symbol in symbols:
            new_name = symbol.new_name
            if not new_name:
                continue
            old_name = extract_display_name(symbol.kind_display_name)
            if not old_name:
                logger.warning(
                    "Skipping %s: no identifier in %r", symbol.filename_line, symbol.kind_display_name
                )
                if report is not None:
                    report.skipped.append(symbol.kind_display_name)
                continue
            content, count = build_word_pattern(old_name).subn(lambda _m: new_name, content)
            if report is not None:
                report.replacements[old_name] = report.replacements.get(old_name, 0) + count
            logger.debug("Renamed %s -> %s (%d occurrences)", old_name, new_name, count)
        return content

    def read_text(self, path: Path) -> str:
        """Read a text file and normalize line endings to LF.

        Bytes that do not decode are carried through as surrogates and written
        back unchanged.
        """
        with open(
            path, "r", encoding=self.config.encoding, errors="surrogateescape", newline=""
        ) as f:
            return normalize_newlines(f.read())

    def write_text(self, path: Path, content: str) -> None:
        """Write a text file, converting line endings to the configured EOL."""
        content = content.replace("\n", self.config.newline)
        with open(
            path, "w", encoding=self.config.encoding, errors="surrogateescape", newline=""
        ) as f:
            f.write(content)

    def rename_in_file(
        self, file_path: Union[str, Path], symbols: Iterable[SymbolEntry]
    ) -> RenameReport:
        """Rename symbols in a source file based on the provided symbol entries.

        A file with no pending renames is left untouched on disk.
        """
        path = Path(file_path)
        symbols = list(symbols)
        report = RenameReport(file_path=str(path))
        if not any(s.has_rename for s in symbols):
            return report

        content = self.read_text(path)
        renamed = self.rename_text(content, symbols, report)
        self.write_text(path, renamed)
        report.written = True
        return report
