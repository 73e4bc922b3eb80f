#!/usr/bin/env python3
"""
Workstation Sudo Keep-Alive
Refreshes the sudo timestamp in the background for the length of a run
"""

import logging
import os
import threading
from typing import Optional

from workstation.core.shell import Shell

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = 60.0


class SudoKeepAlive:
    """
    Ask for the sudo password once, then keep the credential fresh

    The refresh thread is a daemon, stops when stop() is called, and
    also stops if it finds itself in a different process than the one
    that started it.
    """

    def __init__(self, shell: Shell, interval: float = REFRESH_INTERVAL):
        self.shell = shell
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._owner_pid = os.getpid()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """
        Validate sudo upfront and start the refresh loop

        Raises:
            CommandError: If sudo -v fails (wrong password, no sudo rights)
        """
        self.shell.interactive(['sudo', '-v'])
        self._owner_pid = os.getpid()
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name='sudo-keepalive', daemon=True)
        self._thread.start()

    def _loop(self):
        while not self._stop.wait(self.interval):
            if os.getpid() != self._owner_pid:
                break
            if not self.shell.succeeds(['sudo', '-n', 'true']):
                logger.warning("sudo credential refresh failed")

    def stop(self):
        """Stop the refresh loop; safe to call when it never started"""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval)
            self._thread = None
