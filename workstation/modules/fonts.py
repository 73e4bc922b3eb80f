#!/usr/bin/env python3
"""
Workstation Nerd Font Module
Meslo Nerd Font on macOS, Noto with emoji on Linux
"""

from workstation.modules.base import BaseModule, ModuleContext
from workstation.platform.detector import PackageManager

FONTS_TAP = 'homebrew/cask-fonts'

FONT_PACKAGES = {
    PackageManager.BREW: ['font-meslo-lg-nerd-font'],
    PackageManager.APT: ['fonts-noto', 'fonts-noto-color-emoji'],
    PackageManager.DNF: ['google-noto-emoji-color-fonts'],
    PackageManager.PACMAN: ['noto-fonts-emoji'],
}


class FontsModule(BaseModule):
    """Patched terminal font; never installed inside WSL"""

    module_id = 3
    label = 'Nerd Font (Meslo)'

    def get_label(self, is_wsl: bool = False) -> str:
        if is_wsl:
            return f"{self.label} (skipped in WSL)"
        return self.label

    def run(self, ctx: ModuleContext):
        # Fonts belong to the Windows host terminal under WSL
        if ctx.platform.is_wsl:
            ctx.reporter.info("Skipping Nerd Font installation in WSL.")
            return

        ctx.reporter.step("Installing Nerd Font (Meslo)...")
        if ctx.package_manager == PackageManager.BREW:
            if ctx.dry_run:
                ctx.reporter.dry(f"Would tap {FONTS_TAP}")
            elif not ctx.installer.tap(FONTS_TAP):
                ctx.reporter.info(f"Could not tap {FONTS_TAP}. Continuing...")

        ctx.packages.ensure(FONT_PACKAGES[ctx.package_manager])
