#!/usr/bin/env python3
"""
Workstation Version Manager

Resolves pinned third-party installer scripts from installer-versions.lock.
"""

import toml
from pathlib import Path
from typing import Dict, Optional
from rich.console import Console

console = Console(stderr=True)

DEFAULT_INSTALLERS: Dict[str, Dict[str, str]] = {
    'homebrew': {
        'url': 'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh',
    },
    'oh-my-zsh': {
        'url': 'https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh',
    },
    'nvm': {
        'version': 'v0.39.7',
        'url': 'https://raw.githubusercontent.com/nvm-sh/nvm/{version}/install.sh',
    },
}


class VersionManager:
    """Manages pinned versions of external installer scripts"""

    def __init__(self, lock_file: Optional[Path] = None):
        """
        Initialize version manager.

        Args:
            lock_file: Path to installer-versions.lock (default: shipped with the package)
        """
        if lock_file is None:
            lock_file = Path(__file__).parent.parent / "installer-versions.lock"

        self.lock_file = lock_file
        self.installers = self._load_installers()

    def _load_installers(self) -> Dict:
        """Load pinned installers from lock file"""
        if not self.lock_file.exists():
            console.print(
                f"[yellow]Warning: installer-versions.lock not found at {self.lock_file}, using built-in pins[/yellow]"
            )
            return {}

        try:
            with open(self.lock_file) as f:
                data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            console.print(f"[red]Error loading installer-versions.lock: {e}[/red]")
            return {}

        return data.get('installers', {})

    def get_version(self, name: str) -> Optional[str]:
        """
        Get pinned version for an installer.

        Args:
            name: Installer name (e.g., 'nvm')

        Returns:
            Version string or None if not pinned
        """
        entry = self.installers.get(name) or DEFAULT_INSTALLERS.get(name, {})
        return entry.get('version')

    def get_url(self, name: str) -> str:
        """
        Get the download URL for an installer script, with its version filled in.

        Args:
            name: Installer name (e.g., 'homebrew', 'oh-my-zsh', 'nvm')

        Returns:
            URL string

        Raises:
            KeyError: If the installer is neither locked nor built in
        """
        entry = self.installers.get(name)
        if entry is None or 'url' not in entry:
            console.print(f"[yellow]⚠ No locked entry for '{name}', using built-in pin[/yellow]")
            entry = DEFAULT_INSTALLERS[name]

        version = entry.get('version') or DEFAULT_INSTALLERS.get(name, {}).get('version', '')
        return entry['url'].format(version=version)
