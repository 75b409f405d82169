"""
Backup and restore of original source files around the rename phase.

Each file is copied to a sibling ``<path><suffix>`` (``foo.c.bak``) before it is
modified. Restoring copies the backup over the original and removes the
backup. The backup/restore pair is a best-effort undo, not a transaction.

Example:
    >>> manager = BackupManager(suffix=".bak")
    >>> with manager.session(paths):
    ...     rename_everything(paths)
    ...     merge()
"""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from ..exceptions import BackupError

logger = logging.getLogger(__name__)


@dataclass
class BackupResult:
    """Files touched by a backup or restore pass."""

    processed: List[Path] = field(default_factory=list)
    missing: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class BackupManager:
    """Creates sibling backups of files and restores them."""

    def __init__(self, suffix: str = ".bak"):
        self.suffix = suffix

    def backup_path(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path.with_name(path.name + self.suffix)

    def backup_files(self, file_paths: Iterable[Union[str, Path]]) -> BackupResult:
        """Create backup copies of the original files before modifying them.

        If any copy fails, the backups already written by this call are removed
        and BackupError is raised.
        """
        result = BackupResult()
        for path in map(Path, file_paths):
            try:
                shutil.copy2(path, self.backup_path(path))
            except OSError as e:
                result.failed.append(path)
                self._discard(result.processed)
                raise BackupError(f"Failed to back up {path}: {e}", [path]) from e
            result.processed.append(path)
            logger.debug("Backup created: %s", self.backup_path(path))
        return result

    def restore_files(self, file_paths: Iterable[Union[str, Path]]) -> BackupResult:
        """Restore original files from their backup copies and delete the backups.

        Every file is attempted even if an earlier one fails; failures are
        logged and reported in the result.
        """
        result = BackupResult()
        for path in map(Path, file_paths):
            backup = self.backup_path(path)
            if not backup.exists():
                logger.warning("No backup found for %s", path)
                result.missing.append(path)
                continue
            try:
                shutil.copy2(backup, path)
                backup.unlink()
            except OSError as e:
                logger.error("Failed to restore %s: %s", path, e)
                result.failed.append(path)
                continue
            result.processed.append(path)
            logger.debug("Restored from backup: %s", path)
        return result

    def _discard(self, file_paths: Iterable[Path]) -> None:
        for path in file_paths:
            backup = self.backup_path(path)
            try:
                backup.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error("Failed to remove backup %s: %s", backup, e)

    @contextmanager
    def session(
        self, file_paths: Iterable[Union[str, Path]], restore_on_error: bool = True
    ) -> Iterator[BackupResult]:
        """
        Back up files on entry and restore them on exit.

        On a clean exit the originals are always restored. When the body raises
        and restore_on_error is False, the modified files and their backups are
        left in place for inspection and the exception propagates.
        """
        paths = [Path(p) for p in file_paths]
        backup = self.backup_files(paths)
        try:
            yield backup
        except BaseException:
            if restore_on_error:
                self._restore_or_raise(paths)
            else:
                logger.warning(
                    "Leaving %d modified file(s) and their %s backups in place",
                    len(paths),
                    self.suffix,
                )
            raise
        else:
            self._restore_or_raise(paths)

    def _restore_or_raise(self, paths: List[Path]) -> None:
        logger.info("Restoring %d original files ...", len(paths))
        restored = self.restore_files(paths)
        if not restored.success:
            raise BackupError(
                f"Failed to restore {len(restored.failed)} file(s); backups kept with "
                f"suffix {self.suffix}",
                restored.failed,
            )
