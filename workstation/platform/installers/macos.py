#!/usr/bin/env python3
"""
Workstation macOS Installer
Package installer for macOS using Homebrew
"""

import os
import re
import shutil
from typing import Dict, List, Optional

from workstation.platform.installers.base import BaseInstaller

# Default prefixes of Apple Silicon, Intel and Linuxbrew installs
BREW_LOCATIONS = (
    "/opt/homebrew/bin/brew",
    "/usr/local/bin/brew",
    "/home/linuxbrew/.linuxbrew/bin/brew",
)

# export NAME="value"; lines printed by `brew shellenv`
SHELLENV_PATTERN = re.compile(r'^export\s+([A-Z_][A-Z0-9_]*)="(.*)";?\s*$')


def find_brew() -> Optional[str]:
    """Locate the brew executable, including a fresh install not yet on PATH"""
    found = shutil.which('brew')
    if found:
        return found
    for location in BREW_LOCATIONS:
        if os.access(location, os.X_OK):
            return location
    return None


def _expand_suffix(name: str) -> str:
    """Shell ${NAME+:$NAME}: a colon and the value, only when NAME is set"""
    return ':' + os.environ[name] if name in os.environ else ''


class HomebrewInstaller(BaseInstaller):
    """macOS package installer using Homebrew"""

    package_manager = 'brew'

    # Packages that only exist as casks
    CASKS = {'font-meslo-lg-nerd-font'}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Homebrew refuses to run as root; never prefix with sudo
        self.sudo = False

    def is_installed(self, package: str) -> bool:
        """Check formulae first, then casks"""
        return (self.shell.succeeds(['brew', 'list', package])
                or self.shell.succeeds(['brew', 'list', '--cask', package]))

    def get_install_commands(self, packages: List[str]) -> List[List[str]]:
        formulae = [p for p in packages if p not in self.CASKS]
        casks = [p for p in packages if p in self.CASKS]

        commands = []
        if formulae:
            commands.append(['brew', 'install'] + formulae)
        if casks:
            commands.append(['brew', 'install', '--cask'] + casks)
        return commands

    def tap(self, tap: str) -> bool:
        """Add a homebrew tap; a failed tap is not fatal"""
        return self.shell.run(['brew', 'tap', tap], check=False) == 0

    def prefix(self) -> str:
        return self.shell.capture(['brew', '--prefix']).strip()

    def load_shellenv(self) -> Dict[str, str]:
        """
        Apply `brew shellenv` to this process so later brew calls resolve

        Returns:
            The variables that were exported
        """
        exported = {}
        for line in self.shell.capture([find_brew() or 'brew', 'shellenv']).splitlines():
            match = SHELLENV_PATTERN.match(line.strip())
            if not match:
                continue
            name, value = match.groups()
            # shellenv lines reference the current value, e.g. "...:${PATH+:$PATH}"
            value = re.sub(r'\$\{(\w+)\+:\$\1\}', lambda m: _expand_suffix(m.group(1)), value)
            value = re.sub(r'\$\{(\w+)(?::?-[^}]*)?\}', lambda m: os.environ.get(m.group(1), ''), value)
            value = re.sub(r'\$(\w+)', lambda m: os.environ.get(m.group(1), ''), value)
            exported[name] = value
        os.environ.update(exported)
        return exported

    def analytics_off(self):
        self.shell.run(['brew', 'analytics', 'off'], check=False)
