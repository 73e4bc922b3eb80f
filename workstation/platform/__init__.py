"""
Workstation Platform Detection & Installation
OS detection, package-manager installers and pinned installer versions
"""

from workstation.platform.detector import (
    PlatformDetector,
    PlatformInfo,
    OSType,
    PackageManager,
)

__all__ = [
    'PlatformDetector',
    'PlatformInfo',
    'OSType',
    'PackageManager',
]
