"""
Collaborator interfaces for bundle-cxx components.

The rename/backup workflow only talks to these Protocols, so the libclang
parser, the list-symbols executable and the amalgamate tool can be swapped
for other implementations (or test fakes) without touching it.
"""

from pathlib import Path
from typing import List, Protocol, Sequence, Union, runtime_checkable

from .symbols.table import SymbolEntry


@runtime_checkable
class SymbolSource(Protocol):
    """Enumerates top-level declarations of a translation unit."""

    def list_symbols(
        self, source_path: Union[str, Path], args: Sequence[str] = ()
    ) -> List[SymbolEntry]:
        """Return one entry per top-level declaration, new names left blank."""
        ...


@runtime_checkable
class FileMerger(Protocol):
    """Merges a source file and the files it includes into a single output file."""

    def merge(
        self,
        source_path: Union[str, Path],
        output_path: Union[str, Path],
        args: Sequence[str] = (),
    ) -> None:
        """Write the amalgamated source to output_path; raise MergeError on failure."""
        ...

    def is_available(self) -> bool:
        """Check whether the merger can run in this environment."""
        ...
