#!/usr/bin/env python3
"""
Workstation Module Runner
Executes the selected modules one after another in execution order
"""

import logging
from typing import FrozenSet, List, TYPE_CHECKING

from workstation.core.registry import ModuleRegistry

if TYPE_CHECKING:
    from workstation.modules.base import ModuleContext

logger = logging.getLogger(__name__)


class ModuleRunner:
    """
    Sequential module execution

    Each selected module runs exactly once. The first failure propagates
    and stops the run; earlier side effects stay in place.
    """

    def __init__(self, registry: ModuleRegistry):
        self.registry = registry
        self.executed: List[int] = []

    def run(self, selection: FrozenSet[int], ctx: 'ModuleContext') -> List[int]:
        """
        Run every module in the selection set

        Args:
            selection: Module ids to execute
            ctx: Run context handed to each module

        Returns:
            Ids of the executed modules, in execution order
        """
        for module in self.registry.in_execution_order():
            if module.module_id not in selection or module.module_id in self.executed:
                continue
            logger.info("Running module %d (%s)", module.module_id, module.label)
            module.run(ctx)
            self.executed.append(module.module_id)
        return list(self.executed)

    def finish_hints(self) -> List[str]:
        """Closing hints of the modules that ran"""
        hints = []
        for module_id in self.executed:
            hints.extend(self.registry.get(module_id).finish_hints())
        return hints
