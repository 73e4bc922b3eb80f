"""
Workstation Core Module
Shell runner, package and backup helpers, module selection and execution
"""

from workstation.core.backup import BackupManager
from workstation.core.packages import PackageHelper
from workstation.core.registry import ModuleRegistry, ModuleSelector
from workstation.core.runner import ModuleRunner
from workstation.core.shell import Shell

__all__ = ["BackupManager", "PackageHelper", "ModuleRegistry", "ModuleSelector", "ModuleRunner", "Shell"]
