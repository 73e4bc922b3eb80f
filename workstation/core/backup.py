#!/usr/bin/env python3
"""
Workstation Dotfile Backup

Moves a file aside before it is overwritten: <path>.bak.<YYYY-mm-dd_HH-MM-SS>.
No manifest is kept; restoring is a manual rename.
"""

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from workstation.config import RunMode
from workstation.console import Reporter

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d_%H-%M-%S'


def file_checksum(path: Path) -> str:
    """SHA-256 hex digest of a file's content"""
    digest = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(65536), b''):
            digest.update(chunk)
    return digest.hexdigest()


class BackupManager:
    """Non-destructive, timestamped backups of user dotfiles"""

    def __init__(self, mode: RunMode, reporter: Reporter,
                 clock: Callable[[], datetime] = datetime.now):
        self.mode = mode
        self.reporter = reporter
        self.clock = clock

    def _get_timestamp(self) -> str:
        """Generate timestamp suffix, second granularity"""
        return self.clock().strftime(TIMESTAMP_FORMAT)

    def backup_path_for(self, path: Path) -> Path:
        return path.with_name(f"{path.name}.bak.{self._get_timestamp()}")

    def backup(self, path: Path) -> Optional[Path]:
        """
        Rename an existing file to a timestamped backup.

        Under dry-run the rename is only reported.

        Args:
            path: File about to be replaced

        Returns:
            The backup path (planned, under dry-run), or None if path does not exist
        """
        if not path.is_file():
            return None

        backup_path = self.backup_path_for(path)
        self.reporter.info(f"Existing file '{path}' found.")
        self.reporter.info(f"SHA-256 of original file: {file_checksum(path)}")
        self.reporter.info(f"Backing it up to '{backup_path}'.")

        if self.mode.dry_run:
            self.reporter.dry(f"Would move '{path}' to '{backup_path}'")
        else:
            path.rename(backup_path)
            logger.info("Moved %s to %s", path, backup_path)

        return backup_path
