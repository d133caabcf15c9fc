"""Operator prompts, kept apart from decision logic.

Components receive a ``Prompter`` instead of talking to the terminal, so the
credential check and the destructive-change gate can be exercised in tests
with a scripted prompter.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.prompt import Confirm, Prompt


@runtime_checkable
class Prompter(Protocol):
    """Protocol for interactive operator input."""

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; ``False`` means the operator declined."""
        ...

    def ask(self, message: str) -> str:
        """Ask for a line of visible input."""
        ...

    def ask_secret(self, message: str) -> str:
        """Ask for a line of hidden input."""
        ...

    def warn(self, message: str) -> None:
        """Show a prominent warning before a confirmation."""
        ...


class RichPrompter:
    """Terminal prompter backed by ``rich.prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def confirm(self, message: str) -> bool:
        return Confirm.ask(message, console=self.console, default=False)

    def ask(self, message: str) -> str:
        return Prompt.ask(message, console=self.console)

    def ask_secret(self, message: str) -> str:
        return Prompt.ask(message, console=self.console, password=True)

    def warn(self, message: str) -> None:
        self.console.print(f"[bold yellow]{message}[/bold yellow]")
