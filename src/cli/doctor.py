"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import HttpxTransport
from core.config import AppSettings, get_user_env_file
from core.domain.errors import ArchiveError
from core.services.capture_pipeline import ArchiveClient

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_landing(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with HttpxTransport(settings) as transport:
            response = await transport.execute("GET", settings.landing_url)
        return response.is_success, f"HTTP {response.status_code}"
    except ArchiveError as exc:
        return False, str(exc)


async def _check_token(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with ArchiveClient(settings) as client:
            token = await client.fetch_token()
        return True, f"{token[:12]}... ({len(token)} chars)"
    except ArchiveError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics: settings, connectivity and token extraction."""

    settings = AppSettings()

    table = Table(title="archiveis doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("User-Agent", "OK", settings.user_agent)
    table.add_row("Archive header", "OK", settings.archive_header)
    table.add_row("Concurrency", "OK", str(settings.max_concurrency))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_landing(settings))
    table.add_row("Landing page", "OK" if ok_http else "FAIL", detail_http)

    ok_token, detail_token = asyncio.run(_check_token(settings))
    table.add_row("Submit token", "OK" if ok_token else "FAIL", detail_token)

    _console.print(table)

    if not ok_token:
        _console.print(
            "\n[yellow]Note:[/yellow] If the landing page loads but no token is found, "
            "the service probably changed its layout (see ARCHIVEIS_TOKEN_MARKER)."
        )
        raise typer.Exit(code=1)


@app.command()
def token() -> None:
    """Fetch a fresh submit token and print it."""

    settings = AppSettings()
    try:
        value = asyncio.run(_fetch(settings))
    except ArchiveError as exc:
        Console(stderr=True).print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc
    typer.echo(value)


async def _fetch(settings: AppSettings) -> str:
    async with ArchiveClient(settings) as client:
        return await client.fetch_token()
