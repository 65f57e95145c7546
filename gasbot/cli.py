"""Top-level CLI entry-point (`gasbot …`) based on Typer."""
from __future__ import annotations

import asyncio
import logging

import aiohttp
import typer
from rich import print as rprint
from rich.markup import escape

from .core.errors import ChatConnectionError, ConfigError, FetchError
from .core.worker import run_shards
from .monitoring.metrics import start_exporter
from .oracle.gas import GasOracle
from .settings import OracleSettings, Settings, load_settings

app = typer.Typer(help="Gas price status bot for Discord")

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


# ─────────────────────────── run cmd ────────────────────────────
@app.command()
def run():
    """Connect every shard and keep the status updated (Ctrl+C to stop)."""
    logging.basicConfig(level="INFO", format=LOG_FORMAT)
    rprint("Hello world! 👋🌍")

    try:
        settings = load_settings(Settings)
    except ConfigError as e:
        log.critical("%s", e)
        raise typer.Exit(code=1)

    logging.getLogger().setLevel(settings.log_level)
    if settings.metrics_port:
        start_exporter(settings.metrics_port)

    try:
        asyncio.run(run_shards(settings))
    except ChatConnectionError as e:
        log.critical("%s", e)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        rprint("[yellow]\nInterrupted by user[/]")


# ─────────────────────────── check cmd ──────────────────────────
async def _fetch_once(settings: OracleSettings) -> str:
    async with aiohttp.ClientSession() as session:
        return await GasOracle(settings.api_key, session, settings.oracle_url).fetch()


@app.command()
def check():
    """Query the gas oracle once and print the status line."""
    try:
        settings = load_settings(OracleSettings)
    except ConfigError as e:
        rprint(f"[red]✖ {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    try:
        text = asyncio.run(_fetch_once(settings))
    except FetchError as e:
        rprint(f"[red]✖ {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    rprint(text)


if __name__ == "__main__":  # pragma: no cover
    app()
