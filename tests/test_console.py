"""
Tests for console output, the transient run log and the sudo keep-alive
"""
import logging
import time

from workstation.console import Reporter, RunLog
from workstation.core.sudo import SudoKeepAlive

from conftest import FakeShell


class TestReporter:
    def test_message_prefixes(self, reporter, console):
        reporter.step('Installing')
        reporter.info('checking')
        reporter.dry('would do')
        output = console.export_text()
        assert '\n==> Installing' in output
        assert ' -> checking' in output
        assert ' [DRY RUN] would do' in output

    def test_markup_is_not_interpreted(self, reporter, console):
        reporter.info('[bold]literal[/bold]')
        assert '[bold]literal[/bold]' in console.export_text()

    def test_mirrors_into_log(self, tmp_path, console):
        log_path = tmp_path / 'run.log'
        with open(log_path, 'w') as log_file:
            reporter = Reporter(no_color=False, console=console, log_file=log_file)
            reporter.info('mirrored line')
            reporter.detach_log()
            reporter.info('terminal only')
        content = log_path.read_text()
        assert ' -> mirrored line' in content
        assert 'terminal only' not in content


class TestRunLog:
    def test_discarded_on_success(self, tmp_path, fixed_clock):
        run_log = RunLog(home=tmp_path, clock=fixed_clock)
        assert run_log.path.exists()
        assert run_log.finalize(failed=False) is None
        assert not run_log.path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_promoted_on_failure(self, tmp_path, fixed_clock):
        run_log = RunLog(home=tmp_path, clock=fixed_clock)
        run_log.stream.write('boom\n')

        saved = run_log.finalize(failed=True)

        assert saved == tmp_path / 'workstation.error.20240517-093000.log'
        assert saved.read_text() == 'boom\n'
        assert not run_log.path.exists()

    def test_logging_goes_to_file(self, tmp_path):
        run_log = RunLog(home=tmp_path)
        run_log.attach_logging()
        logging.getLogger('workstation.tests').info('diagnostic detail')

        saved = run_log.finalize(failed=True)

        assert 'INFO | workstation.tests | diagnostic detail' in saved.read_text()
        assert not logging.getLogger('workstation').handlers


class TestSudoKeepAlive:
    def test_validates_then_refreshes(self):
        shell = FakeShell(installed={'true'})
        keepalive = SudoKeepAlive(shell, interval=0.01)

        keepalive.start()
        deadline = time.time() + 5
        while not shell.queries and time.time() < deadline:
            time.sleep(0.01)
        keepalive.stop()

        assert shell.calls == [['sudo', '-v']]
        assert shell.queries[0] == ['sudo', '-n', 'true']
        assert not keepalive.running

    def test_stop_without_start(self):
        keepalive = SudoKeepAlive(FakeShell())
        keepalive.stop()
        assert not keepalive.running
