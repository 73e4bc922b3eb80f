"""
Workstation - Developer Workstation Provisioning
Detects the platform and installs a fixed menu of tool modules, idempotently.
"""

__version__ = "1.2.0"
__author__ = "Workstation Maintainers"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__"]
