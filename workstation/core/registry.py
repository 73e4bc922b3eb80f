#!/usr/bin/env python3
"""
Workstation Module Registry & Selector
Ordered module menu and resolution of the run's selection set
"""

import re
from typing import FrozenSet, Iterable, List, Optional, Tuple, TYPE_CHECKING

from workstation.config import RunMode
from workstation.console import Reporter

if TYPE_CHECKING:
    from workstation.modules.base import BaseModule

MODULE_ID_PATTERN = re.compile(r'^[0-9]+$')
ALL_TOKEN = 'all'


class ModuleRegistry:
    """
    Registry of all provisioning modules

    Display order follows module ids; execution order follows each
    module's declared `order`.
    """

    def __init__(self):
        self.modules: List['BaseModule'] = []

    def register(self, module: 'BaseModule'):
        """Register a module instance"""
        if self.get(module.module_id) is not None:
            raise ValueError(f"Module id {module.module_id} registered twice")
        self.modules.append(module)
        self.modules.sort(key=lambda m: m.module_id)

    def get(self, module_id: int) -> Optional['BaseModule']:
        for module in self.modules:
            if module.module_id == module_id:
                return module
        return None

    def ids(self) -> FrozenSet[int]:
        return frozenset(m.module_id for m in self.modules)

    def in_execution_order(self) -> List['BaseModule']:
        return sorted(self.modules, key=lambda m: (m.order, m.module_id))

    def menu(self, is_wsl: bool = False) -> List[Tuple[int, str]]:
        """(id, label) pairs for display"""
        return [(m.module_id, m.get_label(is_wsl)) for m in self.modules]


def parse_module_ids(tokens: Iterable[str], valid_ids: FrozenSet[int]) -> FrozenSet[int]:
    """
    Keep the tokens that are non-negative integers naming a known module

    Anything else is dropped without an error.

    Args:
        tokens: Raw tokens from argv or the interactive answer
        valid_ids: Ids present in the registry

    Returns:
        Selection set
    """
    selected = set()
    for token in tokens:
        token = token.strip()
        if MODULE_ID_PATTERN.match(token) and int(token) in valid_ids:
            selected.add(int(token))
    return frozenset(selected)


class ModuleSelector:
    """Turns flags, arguments or an interactive answer into a selection set"""

    def __init__(self, registry: ModuleRegistry, reporter: Reporter, input_source):
        self.registry = registry
        self.reporter = reporter
        self.input_source = input_source

    def select(self, mode: RunMode, tokens: Iterable[str] = (), is_wsl: bool = False) -> FrozenSet[int]:
        """
        Resolve the selection set, in precedence order:
        all-mode (flag or CI), explicit module ids, interactive prompt.

        Args:
            mode: Run mode
            tokens: Positional module-id arguments
            is_wsl: Annotates the font module label in the menu

        Returns:
            Immutable set of module ids to execute
        """
        tokens = list(tokens)
        if mode.install_all:
            return self.registry.ids()
        if tokens:
            return parse_module_ids(tokens, self.registry.ids())
        return self.prompt(is_wsl)

    def prompt(self, is_wsl: bool = False) -> FrozenSet[int]:
        """Show the menu and parse a free-form answer"""
        self.reporter.raw("\nSelect modules to install (e.g., '1 3 5' or 'all'):")
        for module_id, label in self.registry.menu(is_wsl):
            self.reporter.raw(f"{module_id:2d}) {label}")

        answer = self.input_source.ask('Choice')
        if answer.lstrip().startswith(ALL_TOKEN):
            return self.registry.ids()
        return parse_module_ids(answer.split(), self.registry.ids())
