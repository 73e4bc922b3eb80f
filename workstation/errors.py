#!/usr/bin/env python3
"""
Workstation Errors
Every fatal condition of a run is a WorkstationError subclass
"""

from typing import List, Optional


class WorkstationError(Exception):
    """Base class for errors that abort the run"""


class UnsupportedPlatformError(WorkstationError):
    """Operating system or package manager is not supported"""


class CommandError(WorkstationError):
    """An external command exited with a non-zero status"""

    def __init__(self, cmd: List[str], returncode: int, output: Optional[str] = None):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(self.cmd)}")


class NetworkError(WorkstationError):
    """A download failed after all retries"""


class TerminalUnavailableError(WorkstationError):
    """An interactive answer is required but there is no controlling terminal"""


class RunInterrupted(WorkstationError):
    """The run received a termination signal"""

    def __init__(self, signum: int):
        self.signum = signum
        self.exit_code = 128 + signum
        super().__init__(f"Received signal {signum}")
