#!/usr/bin/env python3
"""
Workstation Platform Detection
Detects operating system, package manager family, WSL and privilege level
"""

import platform
import shutil
import os
from pathlib import Path
from typing import Optional
from enum import Enum
from dataclasses import dataclass

from workstation.errors import UnsupportedPlatformError

WSL_MARKER = Path('/proc/sys/kernel/osrelease')


class OSType(Enum):
    """Operating system types"""
    LINUX = "linux"
    MACOS = "macos"
    UNKNOWN = "unknown"


class PackageManager(Enum):
    """Supported package manager families"""
    APT = "apt"              # Debian/Ubuntu
    DNF = "dnf"              # Fedora/RHEL 8+
    PACMAN = "pacman"        # Arch Linux
    BREW = "brew"            # macOS Homebrew


# Linux package managers in detection order, keyed by the executable probed
LINUX_PACKAGE_MANAGERS = (
    ('apt-get', PackageManager.APT),
    ('dnf', PackageManager.DNF),
    ('pacman', PackageManager.PACMAN),
)


@dataclass(frozen=True)
class PlatformInfo:
    """Complete platform information"""
    os_type: OSType
    os_name: str
    os_version: str
    architecture: str
    package_manager: PackageManager
    is_wsl: bool
    has_root: bool
    shell: str

    @property
    def needs_sudo(self) -> bool:
        """Privileged commands must be prefixed with sudo"""
        return not self.has_root


class PlatformDetector:
    """
    Detect platform details: OS, package manager, environment

    Detection is a point-in-time query with no side effects.
    """

    def __init__(self, wsl_marker: Optional[Path] = None):
        self.wsl_marker = wsl_marker or WSL_MARKER
        self.info: Optional[PlatformInfo] = None

    def detect(self) -> PlatformInfo:
        """
        Perform full platform detection

        Returns:
            PlatformInfo with all detected details

        Raises:
            UnsupportedPlatformError: Unknown OS or no supported package manager
        """
        os_type = self._detect_os()
        if os_type == OSType.UNKNOWN:
            raise UnsupportedPlatformError(f"Unsupported OS {platform.system()}")

        self.info = PlatformInfo(
            os_type=os_type,
            os_name=platform.system(),
            os_version=platform.release(),
            architecture=platform.machine(),
            package_manager=self._detect_package_manager(os_type),
            is_wsl=self._is_wsl(),
            has_root=self._has_root(),
            shell=self._detect_shell(),
        )

        return self.info

    def _detect_os(self) -> OSType:
        """Detect operating system type"""
        system = platform.system().lower()

        if system == 'linux':
            return OSType.LINUX
        elif system == 'darwin':
            return OSType.MACOS
        else:
            return OSType.UNKNOWN

    def _detect_package_manager(self, os_type: OSType) -> PackageManager:
        """Pick the package manager family for the OS"""
        # Homebrew is the only choice on macOS; the core module installs it if missing
        if os_type == OSType.MACOS:
            return PackageManager.BREW

        for command, manager in LINUX_PACKAGE_MANAGERS:
            if shutil.which(command):
                return manager

        raise UnsupportedPlatformError("Unsupported Linux distribution")

    def _is_wsl(self) -> bool:
        """Check if running in Windows Subsystem for Linux"""
        # WSL kernels carry "microsoft" in their release string
        try:
            return 'microsoft' in self.wsl_marker.read_text().lower()
        except (IOError, OSError):
            return False

    def _has_root(self) -> bool:
        """Check if running with effective uid 0"""
        geteuid = getattr(os, 'geteuid', None)
        return geteuid is not None and geteuid() == 0

    def _detect_shell(self) -> str:
        """Detect current shell"""
        shell = os.environ.get('SHELL', '')
        if shell:
            return Path(shell).name
        return 'unknown'
