#!/usr/bin/env python3
"""
Workstation Core Module
Package manager bootstrap and base utilities
"""

from pathlib import Path
import logging

from workstation.modules.base import BaseModule, ModuleContext
from workstation.platform.detector import PackageManager
from workstation.platform.installers.macos import find_brew

logger = logging.getLogger(__name__)

DNF_CONF = Path('/etc/dnf/dnf.conf')
DNF_PARALLEL_SETTING = 'max_parallel_downloads=10'

BASE_PACKAGES = {
    PackageManager.APT: ['git', 'curl', 'build-essential', 'software-properties-common'],
    PackageManager.DNF: ['git', 'curl'],
    PackageManager.PACMAN: ['git', 'curl'],
}


class CoreModule(BaseModule):
    """Bootstraps Homebrew on macOS, base build tools on Linux"""

    module_id = 0
    label = 'Core package manager & base utils'

    def __init__(self, dnf_conf: Path = DNF_CONF):
        super().__init__()
        self.dnf_conf = dnf_conf

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Installing core packages…")

        if ctx.package_manager == PackageManager.BREW:
            self._bootstrap_homebrew(ctx)
            return

        if ctx.package_manager == PackageManager.DNF:
            self._enable_dnf_parallel_downloads(ctx)

        ctx.packages.ensure(BASE_PACKAGES[ctx.package_manager])

    def _bootstrap_homebrew(self, ctx: ModuleContext):
        if find_brew() is None:
            ctx.reporter.info("Homebrew not found. Installing...")
            if ctx.dry_run:
                ctx.reporter.dry("Would run Homebrew install script.")
            else:
                ctx.external.run(
                    ctx.versions.get_url('homebrew'),
                    interpreter=('/bin/bash',),
                    env={'NONINTERACTIVE': '1'},
                )

        if ctx.dry_run:
            return

        exported = ctx.installer.load_shellenv()
        logger.debug("brew shellenv exported %s", sorted(exported))
        # Opt out of telemetry; failure is not fatal
        ctx.installer.analytics_off()

    def _enable_dnf_parallel_downloads(self, ctx: ModuleContext):
        try:
            configured = 'max_parallel_downloads' in self.dnf_conf.read_text()
        except OSError:
            configured = False
        if configured:
            return

        ctx.reporter.info("Enabling parallel downloads for DNF...")
        if ctx.dry_run:
            ctx.reporter.dry(f"Would add '{DNF_PARALLEL_SETTING}' to {self.dnf_conf}")
            return

        ctx.shell.run(ctx.installer.privileged(
            ['sh', '-c', f"echo '{DNF_PARALLEL_SETTING}' >> {self.dnf_conf}"]
        ))
