"""Typer CLI entrypoint for the fact poller."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, PollerConfig
from .engine import (
    Error,
    FactService,
    FallbackProvider,
    HttpFactService,
    LocalFactGenerator,
    MessageCatalog,
    Result,
)
from .logging_conf import available_logs, configure_logging, default_log_dir, tail_log
from .orchestrator import PipelineController
from .scheduler import TICK_PERIOD_SECONDS, Ticker
from .ui import ResultPrinter

app = typer.Typer(
    help="Fact poller command line",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Configuration commands",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Log viewing commands",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False

    def load_config(self) -> PollerConfig:
        return self.repository.load_config()


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    configure_logging(verbose=verbose)
    return AppState(repository=repository, verbose=verbose)


def build_service(config: PollerConfig) -> HttpFactService:
    return HttpFactService(config.remote, logger=configure_logging().bind(component="fetcher"))


def build_controller(
    config: PollerConfig,
    service: FactService,
    ticker: Ticker | None = None,
) -> PipelineController:
    generator = LocalFactGenerator(config.fallback.facts, rng=random.Random(config.fallback.seed))
    return PipelineController(
        service=service,
        fallback=FallbackProvider(generator),
        messages=MessageCatalog(config.messages),
        ticker=ticker,
        logger=configure_logging().bind(component="controller"),
    )


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


async def _watch(state: AppState, printer: ResultPrinter, count: int | None) -> bool:
    """Run one pipeline activation; return True when it ended with an error."""

    config = state.load_config()
    finished = asyncio.Event()
    outcome = {"received": 0, "failed": False}

    def on_result(result: Result) -> None:
        printer.render(result)
        outcome["received"] += 1
        if isinstance(result, Error):
            outcome["failed"] = True
            finished.set()
        elif count is not None and outcome["received"] >= count:
            finished.set()

    service = build_service(config)
    controller = build_controller(config, service)
    controller.activate(on_result)
    try:
        await finished.wait()
    finally:
        controller.deactivate()
        await service.aclose()
    return outcome["failed"]


app.add_typer(config_app, name="config", help="Show or initialise the configuration file")
app.add_typer(log_app, name="log", help="Inspect log files")


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging", is_flag=True)
) -> None:
    ctx.obj = build_state(verbose)


@app.command("watch", help="Poll the remote service and print facts as they arrive.")
def watch(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Stop after N results (default: run until Ctrl-C)."
    ),
) -> None:
    state = _get_state(ctx)
    config = state.load_config()
    printer = ResultPrinter(console)
    console.print(
        f"Polling {config.remote.url} every {TICK_PERIOD_SECONDS:g}s, press Ctrl-C to stop.",
        style="cyan",
    )
    try:
        failed = asyncio.run(_watch(state, printer, count))
    except KeyboardInterrupt:
        failed = False
        console.print("Polling stopped.", style="dim")
    console.print(printer.summary_table())
    if failed:
        raise typer.Exit(code=1)


@config_app.command("show", help="Print the active configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.load_config()
    console.print(f"Configuration file: {state.repository.config_path()}", style="cyan")
    console.print(
        yaml.safe_dump(config.model_dump(mode="json"), allow_unicode=True, sort_keys=False),
        markup=False,
        highlight=False,
    )


@config_app.command("init", help="Write the default configuration file.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    path = state.repository.config_path()
    if state.repository.exists() and not force:
        console.print(f"Configuration already exists: {path} (use --force to overwrite)", style="yellow")
        raise typer.Exit(code=1)
    state.repository.save_config(PollerConfig())
    console.print(f"Configuration written to {path}", style="green")


@log_app.command("list", help="List available log files.")
def log_list() -> None:
    logs = list(available_logs())
    console.print("Log files:", style="cyan")
    if not logs:
        console.print("No log files yet.", style="dim")
        return
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("File", style="green")
    for path in logs:
        table.add_row(path.name)
    console.print(table)


@log_app.command("show", help="Show the most recent lines of a log file.")
def log_show(
    name: str = typer.Argument("poller", help="Log name without extension (poller, error)."),
    tail: int = typer.Option(100, "--tail", min=1, help="Number of lines to show."),
) -> None:
    path = default_log_dir() / f"{name}.log"
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(lines)} lines", style="cyan")
    console.print("".join(lines), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
