"""Rich-based rendering of pipeline results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..engine import Error, Result, ServerError, Success

EMPTY_FACT_PLACEHOLDER = "(empty fact)"


@dataclass
class DisplayState:
    success: int = 0
    empty: int = 0
    errors: int = 0
    last_message: str | None = None


class ResultPrinter:
    """Subscriber printing each result as one console line."""

    def __init__(self, console: Console | None = None, show_time: bool = True) -> None:
        self.console = console or Console()
        self.show_time = show_time
        self.state = DisplayState()

    def __call__(self, result: Result) -> None:
        self.render(result)

    def render(self, result: Result) -> None:
        prefix = f"[dim]{datetime.now().strftime('%H:%M:%S')}[/dim] " if self.show_time else ""
        if isinstance(result, Success):
            text = result.fact.text
            if text:
                self.state.success += 1
                self.console.print(f"{prefix}[green]✓[/green] {escape(text)}")
            else:
                self.state.empty += 1
                self.console.print(f"{prefix}[yellow]∅[/yellow] [dim]{EMPTY_FACT_PLACEHOLDER}[/dim]")
            self.state.last_message = text
        elif isinstance(result, Error):
            self.state.errors += 1
            self.state.last_message = result.message
            self.console.print(f"{prefix}[red]✗ {escape(result.message)}[/red]")
        elif isinstance(result, ServerError):
            self.state.errors += 1
            self.console.print(f"{prefix}[red]✗ server error[/red]")
        else:
            raise TypeError(f"Unsupported result type: {type(result).__name__}")

    def summary_table(self) -> Table:
        table = Table(title="Polling summary", box=box.SIMPLE_HEAD)
        table.add_column("Facts", justify="right", style="green")
        table.add_column("Empty", justify="right", style="yellow")
        table.add_column("Errors", justify="right", style="red")
        table.add_row(str(self.state.success), str(self.state.empty), str(self.state.errors))
        return table


__all__ = ["DisplayState", "EMPTY_FACT_PLACEHOLDER", "ResultPrinter"]
