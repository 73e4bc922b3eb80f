#!/usr/bin/env python3
"""
Workstation Base Installer Class
Base class for package-manager specific installers
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional
import logging
import time

from workstation.core.shell import Shell
from workstation.errors import CommandError

logger = logging.getLogger(__name__)


class BaseInstaller(ABC):
    """
    Abstract base class for package-manager installers

    One capability per family: query a single package and install a batch.
    """

    package_manager = ''

    def __init__(self, shell: Shell, sudo: bool = True, no_color: bool = False,
                 retry_on_failure: int = 1):
        self.shell = shell
        self.sudo = sudo
        self.no_color = no_color
        self.retry_on_failure = max(1, retry_on_failure)

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """
        Check if a package is already installed

        Args:
            package: Manager-specific package name

        Returns:
            True if package is installed
        """
        pass

    @abstractmethod
    def get_install_commands(self, packages: List[str]) -> List[List[str]]:
        """
        Build the command(s) that install packages in one batch

        Args:
            packages: Manager-specific package names

        Returns:
            Commands to run in order
        """
        pass

    def install_batch(self, packages: List[str]):
        """
        Install all packages with a single batched invocation

        Args:
            packages: Manager-specific package names

        Raises:
            CommandError: If the package manager fails
        """
        if not packages:
            return
        for cmd in self.get_install_commands(packages):
            self.run_install_with_retries(cmd)

    def privileged(self, cmd: List[str]) -> List[str]:
        """Prefix a command with sudo unless running as root"""
        return (['sudo'] + cmd) if self.sudo else list(cmd)

    def run_install_with_retries(self, cmd: List[str]):
        """
        Run installer command with configured retry count.

        Args:
            cmd: Command and arguments

        Raises:
            CommandError: The last failure once attempts are exhausted
        """
        for attempt in range(self.retry_on_failure):
            try:
                self.shell.run(cmd)
                return
            except CommandError:
                if attempt == self.retry_on_failure - 1:
                    raise
                logger.warning("Attempt %d/%d failed: %s",
                               attempt + 1, self.retry_on_failure, ' '.join(cmd))
                time.sleep(1)


class PackageMapper:
    """
    Maps logical package names to package-manager specific names

    Anything without an entry keeps its logical name.
    """

    PACKAGE_ALIASES: Dict[str, Dict[str, str]] = {
        'fd': {
            'apt': 'fd-find',
            'dnf': 'fd-find',
        },
    }

    @classmethod
    def get_package_name(cls, package: str, package_manager: str) -> str:
        """
        Get the package name for a logical package on a specific package manager

        Args:
            package: Logical package name (e.g., 'fd')
            package_manager: Package manager (e.g., 'apt', 'brew')

        Returns:
            Manager-specific package name
        """
        aliases: Optional[Dict[str, str]] = cls.PACKAGE_ALIASES.get(package)
        if aliases and package_manager in aliases:
            return aliases[package_manager]
        return package
