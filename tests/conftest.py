"""
Shared fixtures for workstation tests

Nothing here touches a real package manager, the network or the real
home directory.
"""
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import pytest
from rich.console import Console

from workstation.config import RunMode
from workstation.console import Reporter
from workstation.errors import CommandError
from workstation.platform.detector import OSType, PackageManager, PlatformInfo
from workstation.platform.installers.base import BaseInstaller


class FakeShell:
    """Records commands instead of running them"""

    def __init__(self, installed=(), failing=(), outputs=None):
        self.installed = set(installed)
        self.failing = list(failing)
        self.outputs: Dict[tuple, str] = dict(outputs or {})
        self.calls: List[List[str]] = []
        self.queries: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []

    def run(self, cmd, check=True, env=None):
        self.calls.append(list(cmd))
        self.envs.append(dict(env or {}))
        if any(word in cmd for word in self.failing):
            if check:
                raise CommandError(cmd, 1)
            return 1
        return 0

    def run_command(self, cmd, check=False, env=None):
        self.queries.append(list(cmd))
        returncode = 0 if cmd[-1] in self.installed else 1
        return subprocess.CompletedProcess(cmd, returncode, '', '')

    def succeeds(self, cmd):
        return self.run_command(cmd).returncode == 0

    def capture(self, cmd):
        self.queries.append(list(cmd))
        return self.outputs.get(tuple(cmd), '')

    def interactive(self, cmd):
        self.calls.append(list(cmd))
        return 0


class FakeInstaller(BaseInstaller):
    """In-memory package manager"""

    package_manager = 'apt'

    def __init__(self, installed=()):
        super().__init__(FakeShell(), sudo=False)
        self.installed = set(installed)
        self.batches: List[List[str]] = []

    def is_installed(self, package):
        return package in self.installed

    def get_install_commands(self, packages):
        return [['fake-install'] + list(packages)]

    def install_batch(self, packages):
        if not packages:
            return
        self.batches.append(list(packages))
        self.installed.update(packages)


class ScriptedInput:
    """Answers prompts from a fixed list"""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def ask(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else ''


class FakeKeepAlive:
    instances: List['FakeKeepAlive'] = []

    def __init__(self, shell):
        self.shell = shell
        self.started = False
        self.stopped = False
        FakeKeepAlive.instances.append(self)

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True


class FakeDetector:
    def __init__(self, info: PlatformInfo):
        self.info = info

    def detect(self):
        return self.info


class FakeFetcher:
    """Serves canned scripts by URL"""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.urls: List[str] = []

    def fetch(self, url):
        self.urls.append(url)
        return self.responses.get(url, b'echo installer')

    def fetch_text(self, url):
        return self.fetch(url).decode('utf-8')


def make_platform(package_manager=PackageManager.APT, is_wsl=False, has_root=True) -> PlatformInfo:
    os_type = OSType.MACOS if package_manager == PackageManager.BREW else OSType.LINUX
    return PlatformInfo(
        os_type=os_type,
        os_name='Darwin' if os_type == OSType.MACOS else 'Linux',
        os_version='1.0',
        architecture='x86_64',
        package_manager=package_manager,
        is_wsl=is_wsl,
        has_root=has_root,
        shell='zsh',
    )


@pytest.fixture
def console():
    """Wide, uncolored console capturing output in memory"""
    return Console(record=True, width=200, no_color=True, highlight=False, force_terminal=False)


@pytest.fixture
def reporter(console):
    return Reporter(no_color=True, console=console)


@pytest.fixture
def live_mode():
    return RunMode()


@pytest.fixture
def dry_mode():
    return RunMode(dry_run=True)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture
def home(tmp_path, monkeypatch) -> Path:
    """Isolated home directory"""
    path = tmp_path / 'home'
    path.mkdir()
    monkeypatch.setenv('HOME', str(path))
    monkeypatch.delenv('CI', raising=False)
    monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)
    monkeypatch.delenv('ZSH_CUSTOM', raising=False)
    return path
