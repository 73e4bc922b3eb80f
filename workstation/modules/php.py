#!/usr/bin/env python3
"""
Workstation PHP Module
PHP, Composer and direnv; Laravel Valet on macOS
"""

from pathlib import Path

from workstation.modules.base import BaseModule, ModuleContext
from workstation.platform.detector import PackageManager

PHP_PACKAGES = ['php', 'composer', 'direnv']


class PhpModule(BaseModule):
    module_id = 5
    label = 'PHP, Composer & Laravel Valet/Herd'

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Installing PHP & Composer…")
        ctx.packages.ensure(PHP_PACKAGES)

        if ctx.package_manager != PackageManager.BREW:
            return

        ctx.reporter.info("Installing Laravel Valet for macOS...")
        if ctx.dry_run:
            ctx.reporter.dry("Would install Laravel Valet via Composer.")
            return

        ctx.shell.run(['composer', 'global', 'require', 'laravel/valet'])
        valet = self.composer_bin_dir(ctx.home) / 'valet'
        ctx.shell.run([str(valet), 'install', '--quiet'])

    @staticmethod
    def composer_bin_dir(home: Path) -> Path:
        """Composer's global bin directory on macOS"""
        app_support = home / 'Library' / 'Application Support' / 'composer' / 'vendor' / 'bin'
        if app_support.is_dir():
            return app_support
        return home / '.composer' / 'vendor' / 'bin'
