#!/usr/bin/env python3
"""
Workstation Shell Runner
Runs external commands, streaming their output through the Reporter
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional

from workstation.console import Reporter
from workstation.errors import CommandError

logger = logging.getLogger(__name__)


class Shell:
    """
    Thin wrapper around subprocess used by every side-effecting step

    Failures raise CommandError unless the caller opts out with check=False,
    so a failing install aborts the run.
    """

    def __init__(self, reporter: Optional[Reporter] = None):
        self.reporter = reporter

    def _merge_env(self, env: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if not env:
            return None
        merged = dict(os.environ)
        merged.update(env)
        return merged

    def run(self, cmd: List[str], check: bool = True,
            env: Optional[Dict[str, str]] = None) -> int:
        """
        Run a command, mirroring its combined output line by line

        Args:
            cmd: Command and arguments
            check: Raise CommandError on a non-zero exit status
            env: Extra environment variables

        Returns:
            Exit status of the command
        """
        logger.debug("Executing: %s", ' '.join(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding='utf-8',
                errors='replace',
                env=self._merge_env(env),
            )
        except OSError as e:
            logger.error("Could not start %s: %s", cmd[0], e)
            if check:
                raise CommandError(cmd, 127, str(e)) from e
            return 127

        with process:
            for line in process.stdout:
                if self.reporter is not None:
                    self.reporter.raw(line)
            returncode = process.wait()

        logger.debug("Exit status %d: %s", returncode, ' '.join(cmd))
        if check and returncode != 0:
            raise CommandError(cmd, returncode)
        return returncode

    def run_command(self, cmd: List[str], check: bool = False,
                    env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
        """
        Run a command quietly and return the captured result

        Args:
            cmd: Command and arguments
            check: Raise CommandError on a non-zero exit status
            env: Extra environment variables

        Returns:
            CompletedProcess result
        """
        logger.debug("Querying: %s", ' '.join(cmd))
        try:
            result = subprocess.run(
                cmd, capture_output=True, check=False, shell=False,
                encoding='utf-8', errors='replace',
                env=self._merge_env(env),
            )
        except OSError as e:
            if check:
                raise CommandError(cmd, 127, str(e)) from e
            return subprocess.CompletedProcess(cmd, 127, '', str(e))

        if check and result.returncode != 0:
            raise CommandError(cmd, result.returncode, result.stderr)
        return result

    def succeeds(self, cmd: List[str]) -> bool:
        """True if the command exits with status 0"""
        return self.run_command(cmd).returncode == 0

    def capture(self, cmd: List[str]) -> str:
        """Return stdout of a command that must succeed"""
        return self.run_command(cmd, check=True).stdout

    def interactive(self, cmd: List[str]) -> int:
        """
        Run a command attached to the terminal (e.g. a password prompt)

        Raises:
            CommandError: If the command exits non-zero
        """
        logger.debug("Executing interactively: %s", ' '.join(cmd))
        try:
            returncode = subprocess.call(cmd)
        except OSError as e:
            raise CommandError(cmd, 127, str(e)) from e
        if returncode != 0:
            raise CommandError(cmd, returncode)
        return returncode
