"""
Shared fixtures for bundle-cxx tests.

The external collaborators (libclang, amalgamate) are replaced by in-process
fakes implementing the SymbolSource and FileMerger protocols.
"""

from pathlib import Path
from typing import List, Sequence

import pytest

from bundlecxx.api import BundleCxx
from bundlecxx.config import BundleConfig
from bundlecxx.exceptions import MergeError
from bundlecxx.symbols import SymbolEntry


class RecordingMerger:
    """FileMerger fake: copies the (renamed) source file to the output path."""

    command = "fake-amalgamate"

    def __init__(self, fail: bool = False, available: bool = True):
        self.fail = fail
        self.available = available
        self.calls: List[tuple] = []

    def is_available(self) -> bool:
        return self.available

    def merge(self, source_path, output_path, args: Sequence[str] = ()) -> None:
        self.calls.append((str(source_path), str(output_path), list(args)))
        if self.fail:
            raise MergeError("fake-amalgamate exited with status 2", returncode=2)
        Path(output_path).write_text(Path(source_path).read_text())


class StaticSymbolSource:
    """SymbolSource fake returning a fixed list of entries."""

    def __init__(self, entries: List[SymbolEntry]):
        self.entries = entries
        self.calls: List[tuple] = []

    def is_available(self) -> bool:
        return True

    def list_symbols(self, source_path, args: Sequence[str] = ()) -> List[SymbolEntry]:
        self.calls.append((str(source_path), list(args)))
        return list(self.entries)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test inside an empty working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config():
    """Default configuration with deterministic LF line endings."""
    cfg = BundleConfig.default()
    cfg.rename_settings.line_ending = "lf"
    return cfg


@pytest.fixture
def merger():
    return RecordingMerger()


@pytest.fixture
def symbol_source():
    return StaticSymbolSource([])


@pytest.fixture
def bundler(config, symbol_source, merger):
    return BundleCxx(config, symbol_source=symbol_source, merger=merger)


@pytest.fixture
def write_table():
    """Return a helper that writes a symbols table with the standard header."""

    def _write(path: Path, rows: List[tuple]) -> Path:
        lines = ["filename_line,kind_display_name,new_display_name"]
        for row in rows:
            lines.append(",".join(f'"{cell}"' for cell in row))
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write
