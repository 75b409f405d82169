"""
Safety mechanisms for bundle-cxx

Backups of original source files so they can be restored after the rename
and merge steps.
"""

from .backup_manager import BackupManager, BackupResult

__all__ = [
    "BackupManager",
    "BackupResult",
]
