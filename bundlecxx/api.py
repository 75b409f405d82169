"""
Main API interface for bundle-cxx

Provides a unified facade over the two workflows:

- list_symbols: enumerate top-level declarations of a source file into an
  editable symbols table
- bundle: apply the renames from that table to the referenced files, run the
  file merger, and restore the original files

The collaborators (symbol source, file merger) are built from configuration
unless they are passed in explicitly.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import BundleConfig, RestorePolicy, SymbolSourceKind
from .exceptions import BundleCxxError, SourceFileError, ToolNotFoundError
from .interfaces import FileMerger, SymbolSource
from .merge import AmalgamateMerger
from .refactoring import SymbolRenamer
from .safety import BackupManager
from .symbols import (
    ExecutableSymbolSource,
    LibclangSymbolSource,
    SymbolEntry,
    default_symbols_path,
    group_symbols_by_file,
    read_symbols_csv,
    write_symbols_csv,
)

logger = logging.getLogger(__name__)


@dataclass
class SymbolListingResult:
    """Standardized result of the list-symbols workflow."""

    success: bool
    symbols_path: Optional[str] = None
    symbols: List[SymbolEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BundleResult:
    """Standardized result of the bundle workflow."""

    success: bool
    output_path: Optional[str] = None
    renames: Dict[str, Dict[str, int]] = field(default_factory=dict)
    restored_files: List[str] = field(default_factory=list)
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def files_renamed(self) -> int:
        return len(self.renames)


def default_output_path(source_path: Union[str, Path]) -> Path:
    """Default bundle path: "<stem>_bundled<ext>" next to the source file."""
    source = Path(source_path)
    return source.with_name(f"{source.stem}_bundled{source.suffix}")


class BundleCxx:
    """
    Main API class for bundle-cxx.

    Example:
        >>> tool = BundleCxx(BundleConfig.default())
        >>> tool.list_symbols("mysource.cxx", "mysource_symbols.csv")
        >>> # edit the new_display_name column, then:
        >>> tool.bundle("mysource.cxx", "mysource_symbols.csv", "mysource_bundled.cxx")
    """

    def __init__(
        self,
        config: Optional[BundleConfig] = None,
        symbol_source: Optional[SymbolSource] = None,
        merger: Optional[FileMerger] = None,
    ):
        self.config = config or BundleConfig.default()
        self.symbol_source = symbol_source or self._create_symbol_source()
        self.merger = merger or AmalgamateMerger(
            self.config.tools_settings.amalgamate_command,
            timeout=self.config.bundle_settings.merge_timeout,
        )
        self.renamer = SymbolRenamer(self.config.rename_settings)
        self.backup_manager = BackupManager(self.config.rename_settings.backup_suffix)

    def _create_symbol_source(self) -> SymbolSource:
        tools = self.config.tools_settings
        if tools.symbol_source == SymbolSourceKind.EXECUTABLE:
            return ExecutableSymbolSource(tools.list_symbols_path)
        return LibclangSymbolSource(tools.libclang_path)

    def _symbol_source_name(self) -> str:
        if isinstance(self.symbol_source, ExecutableSymbolSource):
            return self.symbol_source.executable
        if isinstance(self.symbol_source, LibclangSymbolSource):
            return "libclang"
        return type(self.symbol_source).__name__

    @staticmethod
    def _require_source(source_path: Union[str, Path, None]) -> Path:
        if not source_path:
            raise SourceFileError("Source file path is required.")
        path = Path(source_path)
        if not path.is_file():
            raise SourceFileError(f"Source file not found: {path}")
        return path

    def check_tools(self, command: str) -> List[str]:
        """Return the names of required tools that are missing for a command."""
        missing = []
        if command == "list-symbols":
            checker = getattr(self.symbol_source, "is_available", None)
            if checker is not None and not checker():
                missing.append(self._symbol_source_name())
        elif command == "bundle":
            if not self.merger.is_available():
                missing.append(getattr(self.merger, "command", type(self.merger).__name__))
        return missing

    def _ensure_tools(self, command: str) -> None:
        missing = self.check_tools(command)
        if missing:
            raise ToolNotFoundError(missing[0])

    # Symbol listing

    def list_symbols(
        self,
        source_path: Union[str, Path],
        symbols_path: Union[str, Path, None] = None,
        args: Sequence[str] = (),
    ) -> SymbolListingResult:
        """Generate a symbols CSV file from a source file."""
        try:
            source = self._require_source(source_path)
            self._ensure_tools("list-symbols")
            csv_path = Path(symbols_path) if symbols_path else default_symbols_path(
                source, self.config.bundle_settings.symbols_suffix
            )

            logger.info("Reading symbols from %s ...", source)
            symbols = self.symbol_source.list_symbols(source, list(args))
            write_symbols_csv(
                csv_path,
                symbols,
                encoding=self.config.rename_settings.encoding,
                newline=self.config.rename_settings.newline,
            )
            logger.info("Symbols written to %s", csv_path)

            files = group_symbols_by_file(symbols)
            return SymbolListingResult(
                success=True,
                symbols_path=str(csv_path),
                symbols=symbols,
                metadata={"source": str(source), "files": list(files.keys())},
            )
        except (BundleCxxError, OSError) as e:
            logger.error("list-symbols failed: %s", e)
            return SymbolListingResult(success=False, errors=[str(e)])

    # Bundling

    def plan_renames(self, symbols_path: Union[str, Path]) -> Dict[str, List[SymbolEntry]]:
        """Read a symbols table and group the entries that carry a new name by file."""
        symbols = read_symbols_csv(symbols_path, encoding=self.config.rename_settings.encoding)
        logger.info("Grouping %d symbols by file ...", len(symbols))
        grouped = group_symbols_by_file(symbols)
        return {
            filename: entries
            for filename, entries in grouped.items()
            if any(entry.has_rename for entry in entries)
        }

    def _resolve_symbols_path(
        self, source: Path, symbols_path: Union[str, Path, None]
    ) -> Optional[Path]:
        if symbols_path:
            return Path(symbols_path)
        fallback = default_symbols_path(source, self.config.bundle_settings.symbols_suffix)
        return fallback if fallback.exists() else None

    def bundle(
        self,
        source_path: Union[str, Path],
        symbols_path: Union[str, Path, None] = None,
        output_path: Union[str, Path, None] = None,
        args: Sequence[str] = (),
        dry_run: bool = False,
    ) -> BundleResult:
        """
        Bundle a source file by renaming symbols and invoking the file merger.

        Without a symbols table (none given and no "<stem>_symbols.csv" in the
        working directory) the source is merged as is.
        """
        result = BundleResult(success=False, dry_run=dry_run)
        try:
            source = self._require_source(source_path)
            output = Path(output_path) if output_path else default_output_path(source)
            result.output_path = str(output)
            if not dry_run:
                self._ensure_tools("bundle")

            csv_path = self._resolve_symbols_path(source, symbols_path)
            if csv_path is None:
                if dry_run:
                    result.warnings.append("No symbols table found; nothing to rename")
                else:
                    self.merger.merge(source, output, list(args))
                    logger.info("Bundled source written to %s", output)
                result.success = True
                return result

            logger.info("Reading symbols from %s ...", csv_path)
            plan = self.plan_renames(csv_path)
            result.metadata["symbols_path"] = str(csv_path)

            missing = [name for name in plan if not Path(name).is_file()]
            if missing:
                raise SourceFileError(
                    f"Files referenced by {csv_path} not found: {', '.join(missing)}"
                )

            if dry_run:
                result.metadata["planned"] = {
                    filename: [
                        {"symbol": e.kind_display_name, "new_name": e.new_name}
                        for e in entries
                        if e.has_rename
                    ]
                    for filename, entries in plan.items()
                }
                result.success = True
                return result

            self._rename_and_merge(source, output, plan, list(args), result)
            result.success = True
            logger.info("Bundled source written to %s", output)
        except (BundleCxxError, OSError, UnicodeDecodeError) as e:
            logger.error("bundle failed: %s", e)
            result.errors.append(str(e))
        return result

    def _rename_and_merge(
        self,
        source: Path,
        output: Path,
        plan: Dict[str, List[SymbolEntry]],
        args: List[str],
        result: BundleResult,
    ) -> None:
        file_paths = list(plan.keys())
        restore_on_error = (
            self.config.bundle_settings.restore_policy == RestorePolicy.ALWAYS
        )

        logger.info("Backing up %d original files ...", len(file_paths))
        try:
            with self.backup_manager.session(file_paths, restore_on_error=restore_on_error):
                for file_path, symbols in plan.items():
                    logger.info("Renaming symbols in file %s ...", file_path)
                    report = self.renamer.rename_in_file(file_path, symbols)
                    result.renames[file_path] = report.replacements
                    for skipped in report.skipped:
                        result.warnings.append(f"{file_path}: no identifier in {skipped!r}")
                self.merger.merge(source, output, args)
        except (BundleCxxError, OSError, UnicodeDecodeError):
            if not restore_on_error:
                result.warnings.append(
                    f"Modified files left in place with backups: {', '.join(file_paths)}"
                )
            raise

        result.restored_files = file_paths
