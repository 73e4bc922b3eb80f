"""
Tests for the subprocess wrapper
"""
import pytest

from workstation.core.shell import Shell
from workstation.errors import CommandError


class TestShell:
    def test_streams_output(self, reporter, console):
        assert Shell(reporter).run(['sh', '-c', 'echo hello']) == 0
        assert 'hello' in console.export_text()

    def test_undecodable_output_is_tolerated(self, reporter, console):
        """Latin-1 bytes from a child process must not abort the run"""
        assert Shell(reporter).run(['sh', '-c', "printf 'caf\\351\\n'"]) == 0
        assert 'caf�' in console.export_text()

    def test_undecodable_captured_output(self):
        result = Shell().run_command(['sh', '-c', "printf 'caf\\351'"])
        assert result.returncode == 0
        assert result.stdout == 'caf�'

    def test_failure_raises(self, reporter):
        with pytest.raises(CommandError):
            Shell(reporter).run(['sh', '-c', 'exit 3'])

    def test_missing_program(self):
        assert Shell().run(['workstation-no-such-program'], check=False) == 127
        assert not Shell().succeeds(['workstation-no-such-program'])
