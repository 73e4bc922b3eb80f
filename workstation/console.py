#!/usr/bin/env python3
"""
Workstation Console Output
Styled step/info/dry-run messages, mirrored into the run's transient log
"""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.text import Text

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Reporter:
    """
    Writes user-facing messages to the terminal and to the run log

    Messages are built as rich Text objects so that user-supplied
    strings are never parsed as console markup.
    """

    def __init__(self, no_color: bool = False, console: Optional[Console] = None,
                 log_file: Optional[TextIO] = None):
        self.no_color = no_color
        self.console = console or Console(no_color=no_color, highlight=False)
        self.log_console: Optional[Console] = None
        if log_file is not None:
            self.attach_log(log_file)

    def attach_log(self, log_file: TextIO):
        """Mirror everything printed from now on into log_file"""
        self.log_console = Console(
            file=log_file,
            no_color=True,
            highlight=False,
            width=120,
            soft_wrap=True,
            force_terminal=False,
        )

    def detach_log(self):
        self.log_console = None

    def _emit(self, text: str, style: Optional[str] = None):
        styled = Text(text, style=None if self.no_color else style)
        self.console.print(styled, soft_wrap=True)
        if self.log_console is not None:
            self.log_console.print(Text(text))

    def step(self, message: str):
        self._emit(f"\n==> {message}", "cyan")

    def info(self, message: str):
        self._emit(f" -> {message}", "blue")

    def dry(self, message: str):
        self._emit(f" [DRY RUN] {message}", "yellow")

    def success(self, message: str):
        self._emit(f"\n✔  {message}", "green")

    def warning(self, message: str):
        self._emit(message, "yellow")

    def error(self, message: str):
        self._emit(message, "red")

    def raw(self, line: str):
        """Pass through a line of external command output unstyled"""
        self._emit(line.rstrip('\n'))


class RunLog:
    """
    Transient log capturing all output of one run

    The file lives in the temp directory while the run is in progress.
    It is promoted to ~/workstation.error.<timestamp>.log when the run
    fails and removed when it succeeds.
    """

    def __init__(self, home: Optional[Path] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.home = home or Path.home()
        self.clock = clock
        fd, path = tempfile.mkstemp(prefix='workstation.', suffix='.log')
        os.close(fd)
        self.path = Path(path)
        self.stream: Optional[TextIO] = open(self.path, 'a', encoding='utf-8')
        self._handler: Optional[logging.Handler] = None

    def attach_logging(self, logger_name: str = 'workstation'):
        """Route diagnostic logging for the package into the transient log"""
        handler = logging.FileHandler(self.path, encoding='utf-8')
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        handler.setLevel(logging.DEBUG)
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.addHandler(handler)
        self._handler = handler

    def _detach_logging(self, logger_name: str = 'workstation'):
        if self._handler is not None:
            logging.getLogger(logger_name).removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    def error_log_path(self) -> Path:
        return self.home / f"workstation.error.{self.clock().strftime('%Y%m%d-%H%M%S')}.log"

    def finalize(self, failed: bool) -> Optional[Path]:
        """
        Close the log and keep it only if the run failed

        Args:
            failed: Whether the run ended with a non-zero status

        Returns:
            Path of the persisted error log, or None when it was discarded
        """
        self._detach_logging()
        if self.stream is not None:
            self.stream.close()
            self.stream = None

        if not self.path.exists():
            return None

        if failed:
            destination = self.error_log_path()
            # The temp directory may sit on another filesystem
            shutil.move(str(self.path), str(destination))
            return destination

        self.path.unlink()
        return None
