#!/usr/bin/env python3
"""
Workstation Terminal Prompts
Questions are read from the controlling terminal, even when stdin is a pipe
"""

from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from workstation.errors import TerminalUnavailableError

TTY_PATH = Path('/dev/tty')


class TerminalInput:
    """Reads free-text answers from the controlling terminal"""

    def __init__(self, console: Console, tty_path: Path = TTY_PATH):
        self.console = console
        self.tty_path = tty_path

    def ask(self, prompt: str) -> str:
        """
        Ask a question on the terminal

        Args:
            prompt: Question text

        Returns:
            The answer, stripped; empty if the user just pressed enter

        Raises:
            TerminalUnavailableError: No controlling terminal to read from
        """
        try:
            tty = open(self.tty_path, 'r')
        except OSError as e:
            raise TerminalUnavailableError(
                f"Cannot read from {self.tty_path} ({e.strerror}). "
                "Pass module ids or --all to run non-interactively."
            ) from e

        with tty:
            answer = Prompt.ask(prompt, console=self.console, stream=tty,
                                default='', show_default=False)
        return (answer or '').strip()
