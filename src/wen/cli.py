"""Command-line entry point: ask one question, print the answer."""

import logging
import time
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from wen.config import DEFAULT_CONFIG_PATHS, load_first_config
from wen.errors import ConfigError, ExchangeError
from wen.exchange import Exchange
from wen.markup import render
from wen.models import NormalizedRequest
from wen.transport import RequestsTransport

app = typer.Typer(
    name="wen",
    help="Ask a hosted LLM a question and print the answer in the terminal.",
    add_completion=False,
)

err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _write(text: str) -> None:
    print(text, end="", flush=True)


@app.command()
def ask(
    question: Annotated[
        list[str] | None,
        typer.Argument(help="The question; all words are joined by spaces"),
    ] = None,
    config_path: Annotated[
        str | None,
        typer.Option(
            "-c",
            "--config",
            envvar="WEN_CONFIG",
            help=f"Config file (default: {', '.join(DEFAULT_CONFIG_PATHS)})",
        ),
    ] = None,
    stream: Annotated[
        bool | None,
        typer.Option("--stream/--no-stream", help="Override the config's stream setting"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Log request details to stderr"),
    ] = False,
) -> None:
    """Send QUESTION to the configured API and print the answer."""
    _setup_logging(verbose)
    if not question:
        print("使用方式: wen <问题>")
        raise typer.Exit(code=1)

    try:
        if config_path is not None:
            config = load_first_config([config_path])
        else:
            config = load_first_config()
    except ConfigError as e:
        err_console.print(f"无法加载配置文件: {e}", markup=False, highlight=False)
        raise typer.Exit(code=1)
    if stream is not None:
        config.stream = stream

    request = NormalizedRequest.from_config(config, " ".join(question))
    exchange = Exchange(
        RequestsTransport(timeout=config.timeout),
        url=config.api_url,
        api_key=config.api_key,
        emit=_write,
    )

    start = time.perf_counter()
    try:
        answer = exchange.execute(request)
    except ExchangeError as e:
        err_console.print(f"请求AI失败: {e}", markup=False, highlight=False)
        raise typer.Exit(code=1)

    if not request.streaming:
        print(render(answer))

    elapsed = time.perf_counter() - start
    print(render(f"\n<bold>耗时: {elapsed:.2f} 秒</bold>"))


def main() -> None:
    load_dotenv()
    app()
