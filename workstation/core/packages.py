#!/usr/bin/env python3
"""
Workstation Package Helper
Installs only the missing subset of a package group, in one batch
"""

import logging
from typing import Iterable, List

from workstation.config import RunMode
from workstation.console import Reporter
from workstation.platform.installers.base import BaseInstaller, PackageMapper

logger = logging.getLogger(__name__)


class PackageHelper:
    """Checked-then-act package installation for one package manager"""

    def __init__(self, installer: BaseInstaller, mode: RunMode, reporter: Reporter):
        self.installer = installer
        self.mode = mode
        self.reporter = reporter

    def resolve(self, package: str) -> str:
        """Manager-specific name for a logical package"""
        return PackageMapper.get_package_name(package, self.installer.package_manager)

    def missing(self, packages: Iterable[str]) -> List[str]:
        """
        Partition a package group, reporting the ones already present

        Args:
            packages: Logical package names

        Returns:
            Manager-specific names of the packages that must be installed
        """
        to_install = []
        for package in packages:
            query_name = self.resolve(package)
            if self.installer.is_installed(query_name):
                self.reporter.info(f"Package '{package}' is already installed. Skipping.")
            elif query_name not in to_install:
                to_install.append(query_name)
        return to_install

    def ensure(self, packages: Iterable[str]):
        """
        Make sure every package in the group is installed

        Under dry-run nothing is queried or installed; a preview is printed.

        Args:
            packages: Logical package names

        Raises:
            CommandError: If the batched install fails
        """
        packages = list(dict.fromkeys(packages))

        if self.mode.dry_run:
            self.reporter.dry(f"Would check and install packages: {' '.join(packages)}")
            return

        to_install = self.missing(packages)
        if to_install:
            self.reporter.info(f"Installing missing packages: {' '.join(to_install)}")
            logger.info("Batch install via %s: %s", self.installer.package_manager, to_install)
            self.installer.install_batch(to_install)
        else:
            self.reporter.info("All packages in this group are already installed.")
