#!/usr/bin/env python3
"""
Workstation CLI - Command-line interface
Click-based entry point that provisions a developer workstation
"""

import os
import signal
import sys
import threading
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from workstation import __version__
from workstation.config import ConfigManager, RunMode, WorkstationConfig
from workstation.console import Reporter, RunLog
from workstation.core.backup import BackupManager
from workstation.core.network import ExternalInstaller, Fetcher, self_update
from workstation.core.packages import PackageHelper
from workstation.core.prompts import TerminalInput
from workstation.core.registry import ModuleRegistry, ModuleSelector
from workstation.core.runner import ModuleRunner
from workstation.core.shell import Shell
from workstation.core.sudo import SudoKeepAlive
from workstation.errors import NetworkError, RunInterrupted, WorkstationError
from workstation.modules import GIT_MODULE_ID, ModuleContext, build_registry
from workstation.modules.gitconfig import resolve_git_identity
from workstation.platform.detector import PlatformDetector
from workstation.platform.installers import get_installer
from workstation.platform.version_manager import VersionManager

UPDATE_FLAG = '--update'


class RunController:
    """
    Drives one run: detect, select, execute, finish

    Collaborators with side effects can be swapped out through the
    constructor; anything left as None gets the real implementation.
    """

    def __init__(self, detector: Optional[PlatformDetector] = None,
                 input_source=None,
                 shell: Optional[Shell] = None,
                 fetcher: Optional[Fetcher] = None,
                 keepalive_factory: Optional[Callable[[Shell], SudoKeepAlive]] = None,
                 registry: Optional[ModuleRegistry] = None,
                 versions: Optional[VersionManager] = None,
                 home: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 console: Optional[Console] = None):
        self.detector = detector or PlatformDetector()
        self.input_source = input_source
        self.shell = shell
        self.fetcher = fetcher
        self.keepalive_factory = keepalive_factory or SudoKeepAlive
        self.registry = registry or build_registry()
        self.versions = versions
        self.home = home or Path.home()
        self.environ = os.environ if environ is None else environ
        self.console = console
        self.keepalive = None

    def load_config(self, config_path: Optional[Path]) -> WorkstationConfig:
        if config_path is None:
            config_path = ConfigManager.find_config(self.home, self.environ)
        if config_path is None:
            return WorkstationConfig()
        return ConfigManager.load_config(config_path)

    def run(self, module_tokens: Sequence[str] = (), install_all: bool = False,
            dry_run: bool = False, name: Optional[str] = None,
            email: Optional[str] = None, signingkey: Optional[str] = None,
            config_path: Optional[Path] = None) -> int:
        """
        Execute a full run

        Returns:
            Process exit status
        """
        mode = RunMode.from_environment(dry_run=dry_run, install_all=install_all,
                                        environ=self.environ)
        reporter = Reporter(no_color=mode.no_color, console=self.console)
        run_log = RunLog(home=self.home)
        reporter.attach_log(run_log.stream)
        run_log.attach_logging()
        if mode.ci:
            reporter.raw("CI environment detected. Running in non-interactive, no-color mode.")
        previous_handler = self._install_sigterm_handler()

        exit_code = 1
        try:
            self._execute(mode, reporter, module_tokens, name, email, signingkey,
                          self.load_config(config_path))
            exit_code = 0
        except RunInterrupted as e:
            reporter.error(f"\nTerminated by signal {e.signum}.")
            exit_code = e.exit_code
        except (WorkstationError, OSError) as e:
            reporter.error(f"\nError: {e}")
            exit_code = 1
        except KeyboardInterrupt:
            reporter.error("\nInterrupted.")
            exit_code = 130
        finally:
            if self.keepalive is not None:
                self.keepalive.stop()
                self.keepalive = None
            self._restore_sigterm_handler(previous_handler)
            reporter.detach_log()
            saved = run_log.finalize(failed=exit_code != 0)
            if saved is not None:
                reporter.error(f"\nAborted with error. Log file is at {saved}")

        return exit_code

    def _execute(self, mode: RunMode, reporter: Reporter, module_tokens: Sequence[str],
                 name: Optional[str], email: Optional[str], signingkey: Optional[str],
                 config: WorkstationConfig):
        reporter.step("Starting setup. A log file will be created at "
                      "~/workstation.error.*.log if an error occurs.")
        if mode.dry_run:
            reporter.step("Running in DRY RUN mode. No changes will be made.")

        info = self.detector.detect()
        if info.is_wsl:
            reporter.info("WSL detected. Some features (like font installation) will be skipped.")

        input_source = self.input_source or TerminalInput(reporter.console)
        selector = ModuleSelector(self.registry, reporter, input_source)
        selection = selector.select(mode, module_tokens, is_wsl=info.is_wsl)
        reporter.info(f"Modules selected: {' '.join(str(i) for i in sorted(selection))}")

        shell = self.shell or Shell(reporter)
        if info.needs_sudo and not mode.dry_run and selection:
            self.keepalive = self.keepalive_factory(shell)
            self.keepalive.start()

        identity = None
        if GIT_MODULE_ID in selection:
            identity = resolve_git_identity(mode, config, input_source,
                                            name=name, email=email, signingkey=signingkey)

        installer = get_installer(info, shell, no_color=mode.no_color,
                                  retry_on_failure=config.install_retry_on_failure)
        fetcher = self.fetcher or Fetcher.from_config(config)
        ctx = ModuleContext(
            mode=mode,
            platform=info,
            reporter=reporter,
            shell=shell,
            installer=installer,
            packages=PackageHelper(installer, mode, reporter),
            backups=BackupManager(mode, reporter),
            external=ExternalInstaller(fetcher, shell),
            versions=self.versions or VersionManager(),
            config=config,
            home=self.home,
            identity=identity,
            environ=self.environ,
        )

        runner = ModuleRunner(self.registry)
        runner.run(selection, ctx)

        for hint in runner.finish_hints():
            reporter.info(hint)
        reporter.success("Finished! Restart your shell or run 'exec zsh' to apply changes.")
        if mode.dry_run:
            reporter.warning("Remember, this was a DRY RUN. No actual changes were made.")
        else:
            reporter.info("Each run is complete on its own. Run workstation again to re-apply any module.")

    def _install_sigterm_handler(self):
        if threading.current_thread() is not threading.main_thread():
            return None

        def _on_sigterm(signum, frame):
            raise RunInterrupted(signum)

        return signal.signal(signal.SIGTERM, _on_sigterm)

    def _restore_sigterm_handler(self, previous):
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('modules', nargs=-1)
@click.option('--all', 'install_all', is_flag=True, help='Select every module')
@click.option('--dry-run', is_flag=True, help='Preview every action without changing anything')
@click.option('--name', default=None, help='git user.name')
@click.option('--email', default=None, help='git user.email')
@click.option('--signingkey', default=None, help='git user.signingkey')
@click.option('--config', 'config_path', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='YAML configuration file')
@click.option('--version', is_flag=True, help='Show version and exit')
@click.pass_context
def cli(ctx, modules, install_all, dry_run, name, email, signingkey, config_path, version):
    """
    Provision a developer workstation.

    MODULES are module ids to install; without them (and without --all)
    a menu is shown. Pass --update as the only argument to update the
    launcher script.
    """
    if version:
        click.echo(f"workstation {__version__}")
        ctx.exit(0)

    controller = RunController(**(ctx.obj or {}))
    ctx.exit(controller.run(
        module_tokens=modules,
        install_all=install_all,
        dry_run=dry_run,
        name=name,
        email=email,
        signingkey=signingkey,
        config_path=config_path,
    ))


UPDATE_REFUSED = (
    "{target} is not the standalone workstation.pyz launcher. "
    "Upgrade an installed package with pip instead."
)


def is_standalone_launcher(target: Path) -> bool:
    """
    True if target is a self-contained zipapp launcher that may be replaced

    The package's own __main__.py and console-script wrappers (including
    the Windows .exe shims, which carry an appended zip) are never replaced.
    """
    if target.name == '__main__.py' or target.suffix.lower() == '.exe':
        return False
    return target.is_file() and zipfile.is_zipfile(target)


def update_command(target: Optional[Path] = None, fetcher: Optional[Fetcher] = None,
                   config: Optional[WorkstationConfig] = None) -> int:
    """
    Replace the standalone launcher with the published version

    Returns:
        0 on success, 1 on failure or when the launcher is not replaceable
    """
    console = Console(highlight=False)
    config = config or ConfigManager.load_config()
    target = target or Path(sys.argv[0]).resolve()
    if not is_standalone_launcher(target):
        console.print(f"[red]Update refused.[/red] {escape(UPDATE_REFUSED.format(target=target))}")
        return 1
    fetcher = fetcher or Fetcher.from_config(config)

    console.print(f"Updating launcher from {config.update_url}...", markup=False)
    try:
        self_update(target, config.update_url, fetcher)
    except (NetworkError, OSError) as e:
        console.print(f"[red]Update failed.[/red] {escape(str(e))}")
        return 1

    console.print("Update complete. Run the launcher again.")
    return 0


def main(argv: Optional[List[str]] = None, **overrides) -> int:
    """
    Run the CLI and return the exit status

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        overrides: RunController keyword arguments, used by tests

    Returns:
        Process exit status
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == UPDATE_FLAG:
        return update_command()

    obj: Dict = dict(overrides)
    try:
        result = cli.main(args=argv, prog_name='workstation', standalone_mode=False, obj=obj)
    except click.UsageError as e:
        e.show()
        return 1
    except click.Abort:
        return 130
    return result or 0


def entrypoint():
    raise SystemExit(main())


if __name__ == '__main__':
    entrypoint()
