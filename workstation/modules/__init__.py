"""
Workstation Provisioning Modules
One independently selectable unit of provisioning work per module id
"""

from workstation.core.registry import ModuleRegistry
from workstation.modules.base import BaseModule, ModuleContext
from workstation.modules.core import CoreModule
from workstation.modules.zsh import ZshModule
from workstation.modules.cli_tools import CliToolsModule
from workstation.modules.fonts import FontsModule
from workstation.modules.services import ServicesModule
from workstation.modules.php import PhpModule
from workstation.modules.gitconfig import GitConfigModule
from workstation.modules.node import NodeModule

GIT_MODULE_ID = GitConfigModule.module_id


def build_registry() -> ModuleRegistry:
    """Create a registry holding every module"""
    registry = ModuleRegistry()
    registry.register(CoreModule())
    registry.register(ZshModule())
    registry.register(CliToolsModule())
    registry.register(FontsModule())
    registry.register(ServicesModule())
    registry.register(PhpModule())
    registry.register(GitConfigModule())
    registry.register(NodeModule())
    return registry


__all__ = [
    'BaseModule',
    'ModuleContext',
    'CoreModule',
    'ZshModule',
    'CliToolsModule',
    'FontsModule',
    'ServicesModule',
    'PhpModule',
    'GitConfigModule',
    'NodeModule',
    'GIT_MODULE_ID',
    'build_registry',
]
