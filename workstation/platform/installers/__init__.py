"""
Workstation Package-Manager Installers
Presence queries and batched installs for apt, dnf, pacman and Homebrew
"""

from typing import Dict, Type

from workstation.core.shell import Shell
from workstation.platform.detector import PlatformInfo, PackageManager
from workstation.platform.installers.base import BaseInstaller, PackageMapper
from workstation.platform.installers.linux import (
    AptInstaller,
    DnfInstaller,
    PacmanInstaller,
)
from workstation.platform.installers.macos import HomebrewInstaller

INSTALLERS: Dict[PackageManager, Type[BaseInstaller]] = {
    PackageManager.APT: AptInstaller,
    PackageManager.DNF: DnfInstaller,
    PackageManager.PACMAN: PacmanInstaller,
    PackageManager.BREW: HomebrewInstaller,
}


def get_installer(info: PlatformInfo, shell: Shell, no_color: bool = False,
                  retry_on_failure: int = 1) -> BaseInstaller:
    """Create the installer for the detected package manager"""
    installer_cls = INSTALLERS[info.package_manager]
    return installer_cls(
        shell,
        sudo=info.needs_sudo,
        no_color=no_color,
        retry_on_failure=retry_on_failure,
    )


__all__ = [
    'BaseInstaller',
    'PackageMapper',
    'AptInstaller',
    'DnfInstaller',
    'PacmanInstaller',
    'HomebrewInstaller',
    'INSTALLERS',
    'get_installer',
]
