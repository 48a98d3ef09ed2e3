from __future__ import annotations

import sys
from typing import TextIO


class TerminalIO:
    """Line-oriented reader/writer pair used for all user-facing output and prompts.

    Commands never touch `sys.stdin`/`sys.stdout` directly, so tests can drive
    interactive flows with `io.StringIO` objects.
    """

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self.reader = reader
        self.writer = writer

    @classmethod
    def standard(cls) -> TerminalIO:
        return cls(sys.stdin, sys.stdout)

    def say(self, text: str = "") -> None:
        self.writer.write(f"{text}\n")
        self.writer.flush()

    def read_line(self) -> str:
        # End of input reads as an empty answer.
        return self.reader.readline().strip()

    def ask(self, question: str) -> str:
        self.writer.write(question)
        self.writer.flush()
        return self.read_line()

    def confirm(self, question: str) -> bool:
        """Yes-default confirmation: only `n`/`N` declines."""

        answer = self.ask(f"{question} (Default Y/n): ")
        return answer.lower() != "n"
