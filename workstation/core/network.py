#!/usr/bin/env python3
"""
Workstation Network Access
Bounded-retry downloads for third-party installer scripts and self-update
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from workstation.config import WorkstationConfig
from workstation.core.shell import Shell
from workstation.errors import NetworkError

logger = logging.getLogger(__name__)


class Fetcher:
    """HTTP(S) downloads with a connect timeout and a bounded retry count"""

    def __init__(self, connect_timeout: float = 15.0, read_timeout: float = 60.0,
                 retries: int = 3, session: Optional[requests.Session] = None):
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        if session is None:
            # Retry transient connection failures and server errors
            retry = Retry(
                total=retries,
                connect=retries,
                read=retries,
                backoff_factor=0.5,
                status_forcelist=[429, 500, 502, 503, 504],
            )
            self.session.mount('https://', HTTPAdapter(max_retries=retry))
            self.session.mount('http://', HTTPAdapter(max_retries=retry))

    @classmethod
    def from_config(cls, config: WorkstationConfig) -> 'Fetcher':
        return cls(
            connect_timeout=config.network_connect_timeout,
            read_timeout=config.network_read_timeout,
            retries=config.network_retries,
        )

    def fetch(self, url: str) -> bytes:
        """
        Download a URL

        Raises:
            NetworkError: If the download fails after all retries
        """
        logger.info("Fetching %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"Download of {url} failed: {e}") from e
        return response.content

    def fetch_text(self, url: str) -> str:
        return self.fetch(url).decode('utf-8')


class ExternalInstaller:
    """Fetches a third-party install script and runs it with an interpreter"""

    def __init__(self, fetcher: Fetcher, shell: Shell):
        self.fetcher = fetcher
        self.shell = shell

    def run(self, url: str, interpreter: Sequence[str] = ('bash',),
            args: Sequence[str] = (), env: Optional[Dict[str, str]] = None):
        """
        Equivalent of `interpreter -c "$(curl url)" args...`

        Args:
            url: Script location
            interpreter: Shell to execute the script with
            args: Positional parameters for the script ($0 first)
            env: Extra environment variables

        Raises:
            NetworkError: Script could not be downloaded
            CommandError: Script exited non-zero
        """
        script = self.fetcher.fetch_text(url)
        cmd: List[str] = list(interpreter) + ['-c', script] + list(args)
        logger.info("Running installer from %s", url)
        self.shell.run(cmd, env=env)


def replace_file_atomically(target: Path, content: bytes, mode: int = 0o755):
    """
    Write content next to target, then rename it over target

    Args:
        target: File to replace
        content: New bytes
        mode: Permission bits of the result
    """
    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.")
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def self_update(target: Path, url: str, fetcher: Fetcher):
    """
    Replace the launcher script with the published version

    Raises:
        NetworkError: Download failed
        OSError: Target could not be written
    """
    content = fetcher.fetch(url)
    replace_file_atomically(target, content)
    logger.info("Replaced %s with %s", target, url)
