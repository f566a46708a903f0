# src/testely/lib/ui.py
"""Console implementations of the chooser and notifier.

Everything goes to stderr: stdout is reserved for the resolved path so
editors can consume it.
"""
import logging
from typing import IO, List, Optional

from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class ConsoleNotifier:
    """Fire-and-forget messages for the user"""

    def __init__(self, out: Optional[Console] = None) -> None:
        self.console = out or console

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]ℹ {message}[/cyan]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗ {message}[/red]")


class ConsoleChooser:
    """Ask the user to pick one of several labeled options.

    The answer may be the option number or the exact label. An empty answer
    or end of input means the user dismissed the prompt.
    """

    def __init__(self, out: Optional[Console] = None, stream: Optional[IO[str]] = None) -> None:
        self.console = out or console
        self.stream = stream

    def choose(self, title: str, options: List[str]) -> Optional[str]:
        table = Table(title=title, show_header=False, box=None)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Option", style="white")
        for number, option in enumerate(options, start=1):
            table.add_row(str(number), option)
        self.console.print(table)

        try:
            answer = self.console.input("[bold]Select an option:[/bold] ", stream=self.stream)
        except EOFError:
            answer = ""
        answer = answer.strip()

        if not answer:
            logger.debug(f"Prompt dismissed: {title}")
            return None
        if answer in options:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]

        self.console.print(f"[yellow]Not a valid option: {answer}[/yellow]")
        return None


class NonInteractiveChooser:
    """Chooser for unattended runs: every prompt is dismissed"""

    def choose(self, title: str, options: List[str]) -> Optional[str]:
        logger.debug(f"Not prompting (non-interactive): {title}")
        return None
