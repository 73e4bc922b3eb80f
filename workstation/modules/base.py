#!/usr/bin/env python3
"""
Workstation Base Module Class
Abstract base class for all provisioning modules
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional
import os

from workstation.config import GitIdentity, RunMode, WorkstationConfig
from workstation.console import Reporter
from workstation.core.backup import BackupManager
from workstation.core.network import ExternalInstaller
from workstation.core.packages import PackageHelper
from workstation.core.shell import Shell
from workstation.platform.detector import PlatformInfo, PackageManager
from workstation.platform.installers.base import BaseInstaller
from workstation.platform.version_manager import VersionManager


@dataclass
class ModuleContext:
    """Everything a module needs to do its work for one run"""
    mode: RunMode
    platform: PlatformInfo
    reporter: Reporter
    shell: Shell
    installer: BaseInstaller
    packages: PackageHelper
    backups: BackupManager
    external: ExternalInstaller
    versions: VersionManager
    config: WorkstationConfig
    home: Path
    identity: Optional[GitIdentity] = None
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    @property
    def dry_run(self) -> bool:
        return self.mode.dry_run

    @property
    def package_manager(self) -> PackageManager:
        return self.platform.package_manager


class BaseModule(ABC):
    """
    Abstract base class for all workstation modules

    Each module implements:
    - A display id and label for the selection menu
    - An execution order (defaults to the id)
    - The provisioning procedure itself, dry-run aware
    """

    module_id: int = -1
    label: str = ''
    order: Optional[int] = None

    def __init__(self):
        if self.order is None:
            self.order = self.module_id

    def get_label(self, is_wsl: bool = False) -> str:
        """Menu label, optionally annotated for the current platform"""
        return self.label

    @abstractmethod
    def run(self, ctx: ModuleContext):
        """
        Provision this module

        Args:
            ctx: Run context

        Raises:
            WorkstationError: Any failure aborts the run
        """
        pass

    def finish_hints(self) -> List[str]:
        """Informational lines printed once the whole run has finished"""
        return []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.module_id} order={self.order}>"
