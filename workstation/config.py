#!/usr/bin/env python3
"""
Workstation Configuration Management
Run mode flags and the optional ~/.workstation.yml configuration file
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Optional, Any, Mapping
from dataclasses import dataclass

from rich.console import Console

console = Console(stderr=True)

DEFAULT_UPDATE_URL = "https://github.com/itismowgli/workstation.sh/releases/latest/download/workstation.pyz"


@dataclass(frozen=True)
class RunMode:
    """
    Flags that govern the whole run.

    Built once before any module runs and passed explicitly to every
    component that needs it; never mutated afterwards.
    """
    dry_run: bool = False
    install_all: bool = False
    no_color: bool = False
    ci: bool = False

    @classmethod
    def from_environment(cls, dry_run: bool = False, install_all: bool = False,
                         environ: Optional[Mapping[str, str]] = None) -> 'RunMode':
        """
        Combine command-line flags with the environment

        A non-empty CI variable forces all-mode and plain output.

        Args:
            dry_run: --dry-run was given
            install_all: --all was given
            environ: Environment mapping (default: os.environ)

        Returns:
            RunMode for this run
        """
        environ = os.environ if environ is None else environ
        ci = bool(environ.get('CI', ''))
        return cls(
            dry_run=dry_run,
            install_all=install_all or ci,
            no_color=ci,
            ci=ci,
        )


@dataclass(frozen=True)
class GitIdentity:
    """Values written to the [user] section of ~/.gitconfig"""
    name: str
    email: str
    signingkey: Optional[str] = None


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return a mapping section of the config file, warning when it has another shape"""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        console.print(f"[yellow]Warning: Ignoring config section '{key}': expected a mapping[/yellow]")
        return {}
    return value


@dataclass
class WorkstationConfig:
    """Workstation configuration structure"""

    # Git identity defaults (CLI flags take precedence)
    git_name: Optional[str] = None
    git_email: Optional[str] = None
    git_signingkey: Optional[str] = None
    git_editor: str = "nvim"

    # Network policy for installer scripts and self-update
    network_connect_timeout: float = 15.0
    network_read_timeout: float = 60.0
    network_retries: int = 3

    # Package manager calls
    install_retry_on_failure: int = 1

    update_url: str = DEFAULT_UPDATE_URL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkstationConfig':
        """Create config from dictionary"""
        config = cls()

        git = _section(data, 'git')
        config.git_name = git.get('name', config.git_name)
        config.git_email = git.get('email', config.git_email)
        config.git_signingkey = git.get('signingkey', config.git_signingkey)
        config.git_editor = git.get('editor', config.git_editor)

        network = _section(data, 'network')
        try:
            config.network_connect_timeout = float(
                network.get('connect_timeout', config.network_connect_timeout)
            )
            config.network_read_timeout = float(
                network.get('read_timeout', config.network_read_timeout)
            )
        except (TypeError, ValueError):
            config.network_connect_timeout = 15.0
            config.network_read_timeout = 60.0
        try:
            config.network_retries = max(0, int(network.get('retries', config.network_retries)))
        except (TypeError, ValueError):
            config.network_retries = 3

        install = _section(data, 'install')
        try:
            config.install_retry_on_failure = max(
                1, int(install.get('retry_on_failure', config.install_retry_on_failure))
            )
        except (TypeError, ValueError):
            config.install_retry_on_failure = 1

        update_url = data.get('update_url')
        if isinstance(update_url, str) and update_url:
            config.update_url = update_url

        return config


class ConfigManager:
    """Manage workstation configuration files"""

    DEFAULT_CONFIG_NAME = ".workstation.yml"

    @staticmethod
    def find_config(home: Optional[Path] = None,
                    environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        """
        Find the user configuration file

        Args:
            home: Home directory (default: Path.home())
            environ: Environment mapping (default: os.environ)

        Returns:
            Path to the config file or None if not found
        """
        home = home or Path.home()
        environ = os.environ if environ is None else environ

        candidates = []
        xdg = environ.get('XDG_CONFIG_HOME')
        if xdg:
            candidates.append(Path(xdg) / 'workstation' / 'config.yml')
        candidates.append(home / ConfigManager.DEFAULT_CONFIG_NAME)

        for candidate in candidates:
            if candidate.is_file():
                return candidate

        return None

    @staticmethod
    def load_config(config_path: Optional[Path] = None) -> WorkstationConfig:
        """
        Load configuration from YAML

        Args:
            config_path: Path to config file (default: search user locations)

        Returns:
            WorkstationConfig object
        """
        if config_path is None:
            config_path = ConfigManager.find_config()

        # Return default config if no file found
        if config_path is None or not config_path.exists():
            return WorkstationConfig()

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            console.print(f"[yellow]Warning: Failed to load config from {config_path}: {e}[/yellow]")
            return WorkstationConfig()

        if data is None:
            return WorkstationConfig()
        if not isinstance(data, dict):
            console.print(f"[yellow]Warning: Ignoring {config_path}: expected a mapping at the top level[/yellow]")
            return WorkstationConfig()

        return WorkstationConfig.from_dict(data)
