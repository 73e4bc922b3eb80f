#!/usr/bin/env python3
"""
Workstation Linux Installers
Package installers for the supported Linux distributions
"""

from typing import List

from workstation.platform.installers.base import BaseInstaller


class AptInstaller(BaseInstaller):
    """Debian/Ubuntu package installer using apt"""

    package_manager = 'apt'

    def is_installed(self, package: str) -> bool:
        """Check if package is installed via dpkg"""
        return self.shell.succeeds(['dpkg', '-s', package])

    def get_install_commands(self, packages: List[str]) -> List[List[str]]:
        # Refresh the index once per batch, then install without prompting
        return [
            self.privileged(['apt-get', 'update', '-qq']),
            self.privileged([
                'apt-get', 'install', '-y',
                '-o', 'Dpkg::Options::=--force-confdef',
                '-o', 'Dpkg::Options::=--force-confold',
            ] + list(packages)),
        ]


class DnfInstaller(BaseInstaller):
    """Fedora/RHEL 8+ package installer using dnf"""

    package_manager = 'dnf'

    def is_installed(self, package: str) -> bool:
        return self.shell.succeeds(['rpm', '-q', package])

    def get_install_commands(self, packages: List[str]) -> List[List[str]]:
        return [self.privileged(['dnf', '-y', 'install'] + list(packages))]

    def group_install_command(self, group: str) -> List[str]:
        return self.privileged(['dnf', '-y', 'groupinstall', group])


class PacmanInstaller(BaseInstaller):
    """Arch Linux package installer using pacman"""

    package_manager = 'pacman'

    def is_installed(self, package: str) -> bool:
        return self.shell.succeeds(['pacman', '-Q', package])

    def get_install_commands(self, packages: List[str]) -> List[List[str]]:
        cmd = ['pacman', '-Sy', '--noconfirm', '--needed']
        if not self.no_color:
            cmd.extend(['--color', 'auto'])
        return [self.privileged(cmd + list(packages))]
