"""
End-to-end tests for the workstation command
"""
import os
import signal
import time
import zipfile

import pytest
from click.testing import CliRunner

from workstation import __version__
from workstation.cli import cli, is_standalone_launcher, main, update_command
from workstation.config import WorkstationConfig
from workstation.errors import NetworkError, UnsupportedPlatformError
from workstation.platform.detector import PackageManager

from conftest import (
    FakeDetector,
    FakeFetcher,
    FakeKeepAlive,
    FakeShell,
    ScriptedInput,
    make_platform,
)


@pytest.fixture
def controller_kwargs(home, console):
    """RunController collaborators that keep a run inside the sandbox"""
    FakeKeepAlive.instances = []
    return {
        'detector': FakeDetector(make_platform(PackageManager.APT, has_root=False)),
        'shell': FakeShell(),
        'fetcher': FakeFetcher(),
        'keepalive_factory': FakeKeepAlive,
        'input_source': ScriptedInput(),
        'home': home,
        'environ': {},
        'console': console,
    }


class TestBasics:
    def test_version(self, capsys):
        assert main(['--version']) == 0
        assert __version__ in capsys.readouterr().out

    def test_unknown_flag_exits_one(self, controller_kwargs):
        assert main(['--bogus'], **controller_kwargs) == 1
        assert controller_kwargs['shell'].calls == []
        assert FakeKeepAlive.instances == []

    def test_missing_config_file(self, controller_kwargs, tmp_path):
        assert main(['--config', str(tmp_path / 'nope.yml'), '0'], **controller_kwargs) == 1

    def test_help_with_cli_runner(self):
        result = CliRunner().invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert '--dry-run' in result.output


class TestDryRun:
    def test_all_modules_preview(self, controller_kwargs, console, home):
        code = main(['--all', '--dry-run', '--name', 'Ada Lovelace', '--email', 'ada@example.com'],
                    **controller_kwargs)

        assert code == 0
        output = console.export_text()
        assert 'Modules selected: 0 1 2 3 4 5 6 7' in output
        assert output.count('[DRY RUN] Would check and install packages:') == 6
        assert 'already installed' not in output
        assert 'Installing missing packages' not in output
        assert 'Remember, this was a DRY RUN' in output
        assert controller_kwargs['shell'].calls == []
        assert controller_kwargs['shell'].queries == []
        assert list(home.iterdir()) == []
        assert FakeKeepAlive.instances == []

    def test_ci_runs_everything_without_prompting(self, controller_kwargs, console):
        controller_kwargs['environ'] = {'CI': 'true'}
        answers = controller_kwargs['input_source']

        assert main(['--dry-run'], **controller_kwargs) == 0

        output = console.export_text()
        assert 'CI environment detected' in output
        assert 'Modules selected: 0 1 2 3 4 5 6 7' in output
        assert answers.prompts == []


class TestGitConfigRun:
    def test_module_six_backs_up_and_writes(self, controller_kwargs, home):
        (home / '.gitconfig').write_text('[user]\n    name = Someone Else\n')

        code = main(['6', '--name', 'Ada Lovelace', '--email', 'ada@example.com'], **controller_kwargs)

        assert code == 0
        backups = list(home.glob('.gitconfig.bak.*'))
        assert len(backups) == 1
        assert backups[0].read_text() == '[user]\n    name = Someone Else\n'
        content = (home / '.gitconfig').read_text()
        assert 'name  = Ada Lovelace' in content
        assert 'email = ada@example.com' in content
        keepalive = FakeKeepAlive.instances[-1]
        assert keepalive.started and keepalive.stopped

    def test_interactive_selection_and_identity(self, controller_kwargs, home):
        controller_kwargs['input_source'] = ScriptedInput('6', 'Grace Hopper', 'grace@example.com')

        assert main([], **controller_kwargs) == 0

        assert controller_kwargs['input_source'].prompts[0] == 'Choice'
        assert 'Grace Hopper' in (home / '.gitconfig').read_text()

    def test_config_file_supplies_identity(self, controller_kwargs, home):
        (home / '.workstation.yml').write_text('git:\n  name: Config User\n  email: cfg@example.com\n')

        assert main(['6'], **controller_kwargs) == 0

        assert controller_kwargs['input_source'].prompts == []
        assert 'Config User' in (home / '.gitconfig').read_text()


class TestFailures:
    def test_failed_install_persists_log(self, controller_kwargs, console, home):
        controller_kwargs['shell'] = FakeShell(failing=['install'])

        assert main(['0'], **controller_kwargs) == 1

        logs = list(home.glob('workstation.error.*.log'))
        assert len(logs) == 1
        assert 'Installing core packages' in logs[0].read_text()
        assert f'Aborted with error. Log file is at {logs[0]}' in console.export_text()
        assert FakeKeepAlive.instances[-1].stopped

    def test_unsupported_platform(self, controller_kwargs, home):
        class BrokenDetector:
            def detect(self):
                raise UnsupportedPlatformError('Unsupported OS SunOS')

        controller_kwargs['detector'] = BrokenDetector()

        assert main(['--all'], **controller_kwargs) == 1
        assert len(list(home.glob('workstation.error.*.log'))) == 1

    def test_keyboard_interrupt(self, controller_kwargs, home):
        class InterruptedDetector:
            def detect(self):
                raise KeyboardInterrupt

        controller_kwargs['detector'] = InterruptedDetector()

        assert main(['--all'], **controller_kwargs) == 130
        assert len(list(home.glob('workstation.error.*.log'))) == 1

    def test_sigterm_during_install(self, controller_kwargs, console, home):
        class TerminatedShell(FakeShell):
            def run(self, cmd, check=True, env=None):
                super().run(cmd, check=check, env=env)
                os.kill(os.getpid(), signal.SIGTERM)
                time.sleep(5)
                return 0

        controller_kwargs['shell'] = TerminatedShell()
        previous = signal.getsignal(signal.SIGTERM)

        assert main(['0'], **controller_kwargs) == 143

        keepalive = FakeKeepAlive.instances[-1]
        assert keepalive.started and keepalive.stopped
        assert len(list(home.glob('workstation.error.*.log'))) == 1
        assert 'Terminated by signal 15' in console.export_text()
        assert signal.getsignal(signal.SIGTERM) is previous

    def test_filesystem_error_is_reported(self, controller_kwargs, console, home):
        (home / '.gitconfig').mkdir()

        code = main(['6', '--name', 'Ada Lovelace', '--email', 'ada@example.com'], **controller_kwargs)

        assert code == 1
        output = console.export_text()
        assert 'Error:' in output
        assert 'Aborted with error. Log file is at' in output
        assert len(list(home.glob('workstation.error.*.log'))) == 1


class TestUpdate:
    def test_update_flag_short_circuits(self, monkeypatch, controller_kwargs):
        monkeypatch.setattr('workstation.cli.update_command', lambda: 0)
        assert main(['--update', '--bogus'], **controller_kwargs) == 0
        assert controller_kwargs['shell'].calls == []

    def test_update_replaces_launcher(self, tmp_path):
        target = tmp_path / 'workstation.pyz'
        with zipfile.ZipFile(target, 'w') as archive:
            archive.writestr('__main__.py', 'old')
        config = WorkstationConfig(update_url='https://example.com/ws.pyz')

        code = update_command(target=target, fetcher=FakeFetcher({'https://example.com/ws.pyz': b'new'}),
                              config=config)

        assert code == 0
        assert target.read_bytes() == b'new'

    def test_update_failure(self, tmp_path):
        class FailingFetcher:
            def fetch(self, url):
                raise NetworkError('unreachable')

        target = tmp_path / 'workstation.pyz'
        with zipfile.ZipFile(target, 'w') as archive:
            archive.writestr('__main__.py', 'old')
        before = target.read_bytes()

        code = update_command(target=target, fetcher=FailingFetcher(), config=WorkstationConfig())

        assert code == 1
        assert target.read_bytes() == before

    def test_refuses_package_main(self, tmp_path, capsys):
        target = tmp_path / 'workstation' / '__main__.py'
        target.parent.mkdir()
        target.write_text('from workstation.cli import entrypoint\n')
        fetcher = FakeFetcher()

        assert update_command(target=target, fetcher=fetcher, config=WorkstationConfig()) == 1
        assert fetcher.urls == []
        assert target.read_text() == 'from workstation.cli import entrypoint\n'
        assert 'Update refused' in capsys.readouterr().out

    def test_refuses_console_script_wrapper(self, tmp_path):
        target = tmp_path / 'bin' / 'workstation'
        target.parent.mkdir()
        wrapper = (
            '#!/usr/bin/python3\n'
            'import sys\n'
            'from workstation.cli import entrypoint\n'
            'if __name__ == "__main__":\n'
            '    sys.exit(entrypoint())\n'
        )
        target.write_text(wrapper)

        assert update_command(target=target, fetcher=FakeFetcher(), config=WorkstationConfig()) == 1
        assert target.read_text() == wrapper

    def test_refuses_windows_shim(self, tmp_path):
        target = tmp_path / 'workstation.exe'
        with zipfile.ZipFile(target, 'w') as archive:
            archive.writestr('__main__.py', 'shim')

        assert not is_standalone_launcher(target)
