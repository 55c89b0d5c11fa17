"""I/O collaborator for user-facing status lines.

The core writes human-readable messages through an ``IOInterface``; it never
reads from it.  Diagnostics meant for developers go to loguru instead.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class IOInterface(Protocol):
    """Line-oriented, write-only message sink."""

    def write(self, message: str) -> None:
        """Write a status line."""
        ...

    def write_error(self, message: str) -> None:
        """Write a warning or error line."""
        ...


class ConsoleIO:
    """Writes status lines to stdout and warnings to stderr via ``click.echo``."""

    def write(self, message: str) -> None:
        click.echo(message)

    def write_error(self, message: str) -> None:
        click.echo(click.style(message, fg="yellow"), err=True)


class BufferedIO:
    """Collects lines in memory.  Used by embedding hosts and tests."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.errors: list[str] = []

    def write(self, message: str) -> None:
        self.lines.append(message)

    def write_error(self, message: str) -> None:
        self.errors.append(message)
