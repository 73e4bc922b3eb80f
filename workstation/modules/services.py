#!/usr/bin/env python3
"""
Workstation Services Module
Database and web services: MySQL, Redis, Nginx, dnsmasq
"""

from workstation.errors import CommandError
from workstation.modules.base import BaseModule, ModuleContext
from workstation.platform.detector import PackageManager

MYSQL_GROUP = 'MySQL Database'

SERVICE_PACKAGES = {
    PackageManager.BREW: ['mysql', 'redis', 'nginx', 'dnsmasq'],
    PackageManager.APT: ['mysql-server', 'redis-server', 'nginx', 'dnsmasq'],
    PackageManager.DNF: ['redis', 'nginx', 'dnsmasq'],
    PackageManager.PACMAN: ['mariadb', 'redis', 'nginx', 'dnsmasq'],
}


class ServicesModule(BaseModule):
    module_id = 4
    label = 'Database & web services (MySQL, Redis, Nginx, dnsmasq)'

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Installing MySQL, Redis, Nginx, dnsmasq…")
        if ctx.package_manager == PackageManager.DNF:
            self._install_mysql_group(ctx)
        ctx.packages.ensure(SERVICE_PACKAGES[ctx.package_manager])

    def _install_mysql_group(self, ctx: ModuleContext):
        ctx.reporter.info("Attempting to install MySQL group via DNF...")
        if ctx.dry_run:
            ctx.reporter.dry(f"Would run dnf groupinstall '{MYSQL_GROUP}'")
            return

        try:
            ctx.shell.run(ctx.installer.group_install_command(MYSQL_GROUP))
        except CommandError:
            # The group is missing from some Fedora releases
            ctx.reporter.info(
                f"Could not install '{MYSQL_GROUP}' group. It may not be available. Continuing..."
            )
