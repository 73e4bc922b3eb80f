#!/usr/bin/env python3
"""
Workstation CLI Toolchain Module
Modern replacements for the classic command-line tools
"""

import os
import shutil
from pathlib import Path

from workstation.modules.base import BaseModule, ModuleContext
from workstation.platform.detector import PackageManager

CLI_PACKAGES = [
    'git-delta', 'fzf', 'ripgrep', 'bat', 'eza', 'fd',
    'bottom', 'dust', 'zoxide', 'thefuck',
]

# Debian and Fedora install fd as fdfind
FDFIND_MANAGERS = {PackageManager.APT, PackageManager.DNF}


class CliToolsModule(BaseModule):
    """fzf, delta, eza, bat, ripgrep, fd and friends"""

    module_id = 2
    label = 'CLI toolchain (fzf, delta, eza, bat, rg, fd, etc.)'

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Installing CLI toolkit…")
        ctx.packages.ensure(CLI_PACKAGES)

        if ctx.dry_run:
            ctx.reporter.dry("Would run post-install steps for fzf and fd if needed.")
            return

        if ctx.package_manager in FDFIND_MANAGERS:
            self._link_fd(ctx)
        elif ctx.package_manager == PackageManager.BREW:
            self._install_fzf_integration(ctx)

    def _link_fd(self, ctx: ModuleContext):
        fdfind = shutil.which('fdfind')
        if fdfind is None or shutil.which('fd') is not None:
            return

        ctx.reporter.info("Creating symlink for fd -> fdfind...")
        bin_dir = ctx.home / '.local' / 'bin'
        bin_dir.mkdir(parents=True, exist_ok=True)
        link = bin_dir / 'fd'
        if link.is_symlink() or link.exists():
            link.unlink()
        os.symlink(fdfind, link)

    def _install_fzf_integration(self, ctx: ModuleContext):
        if shutil.which('fzf') is None:
            return

        ctx.reporter.info("Running fzf install script...")
        script = Path(ctx.installer.prefix()) / 'opt' / 'fzf' / 'install'
        ctx.shell.run([str(script), '--all', '--no-bash', '--no-fish', '--no-update-rc'])
