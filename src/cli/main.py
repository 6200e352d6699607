"""CLI principal (Typer).

Comandos:
- `archiveis links URL...`: archiva los links pasados como argumentos.
- `archiveis file PATH`: archiva los links de un fichero (uno por línea).
- `archiveis doctor ...`: diagnósticos del entorno.

La CLI solo traduce flags a llamadas al Core y decide el código de salida:
si quedan fallos tras los reintentos se sale con 1, salvo `--ignore-failures`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.link_reader import read_links
from adapters.output_writer import write_captures
from cli import doctor
from cli.log_setup import configure_logging
from cli.ui_components import build_captures_table, build_failures_table, print_banner
from core.config import AppSettings
from core.domain.errors import ArchiveError
from core.domain.models import BatchOutcome
from core.services.capture_pipeline import ArchiveClient
from core.services.retry import split_outcomes

app = typer.Typer(
    no_args_is_help=True,
    help="Archive urls using the archive.is capturing service.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class RunOptions:
    """Flags compartidos por `links` y `file`."""

    output: Path | None = None
    archives_only: bool = False
    text: bool = False
    append: bool = False
    silent: bool = False
    retries: int | None = None
    ignore_failures: bool = False
    user_agent: str | None = None
    concurrency: int | None = None
    verbose: bool = False


_OUTPUT = typer.Option(None, "-o", "--output", help="Save all archived elements to this file.")
_ARCHIVES_ONLY = typer.Option(False, "--archives-only", help="Save only the archive urls.")
_TEXT = typer.Option(False, "-t", "--text", help="Save output as line separated text instead of json.")
_APPEND = typer.Option(
    False,
    "-a",
    "--append",
    help="If the output file already exists, append instead of overwriting the file.",
)
_SILENT = typer.Option(False, "-s", "--silent", help="Do not print anything.")
_RETRIES = typer.Option(
    None,
    "-r",
    "--retries",
    min=0,
    help="How many times failed archive attempts should be tried again.",
)
_IGNORE_FAILURES = typer.Option(
    False,
    "--ignore-failures",
    help="Continue anyway if after all retries some links are not successfully archived.",
)
_USER_AGENT = typer.Option(None, "--user-agent", help="User-Agent (signature) sent to archive.is.")
_CONCURRENCY = typer.Option(None, "--concurrency", min=1, help="Maximum simultaneous captures.")
_VERBOSE = typer.Option(False, "-v", "--verbose", help="Enable debug logging.")


async def _run_batch(links: list[str], settings: AppSettings, opts: RunOptions) -> BatchOutcome:
    retries = settings.default_retries if opts.retries is None else opts.retries
    async with ArchiveClient(
        settings,
        user_agent=opts.user_agent,
        max_concurrency=opts.concurrency,
    ) as client:
        return await client.capture_all_with_retries(links, retries=retries)


def _archive(links: list[str], opts: RunOptions) -> None:
    configure_logging(verbose=opts.verbose, silent=opts.silent)

    if not links:
        if not opts.silent:
            _err_console.print("Nothing to archive.")
        raise typer.Exit(code=1)

    if not opts.silent and _console.is_terminal:
        print_banner(_console)

    settings = AppSettings()
    try:
        outcomes = asyncio.run(_run_batch(links, settings, opts))
    except ArchiveError as exc:
        if not opts.silent:
            _err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc

    successes, failures = split_outcomes(outcomes)

    if failures:
        if not opts.silent:
            _err_console.print(build_failures_table(failures))
        if not opts.ignore_failures:
            if not opts.silent:
                _err_console.print(
                    f"[red]Failed to archive {len(failures)} of {len(outcomes)} link(s).[/red]"
                )
            raise typer.Exit(code=1)

    if not opts.silent and successes:
        _console.print(build_captures_table(successes))

    if opts.output is not None:
        try:
            path = write_captures(
                results=successes,
                output_path=opts.output,
                text=opts.text,
                archives_only=opts.archives_only,
                append=opts.append,
            )
        except (ArchiveError, OSError) as exc:
            if not opts.silent:
                _err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
            raise typer.Exit(code=1) from exc
        if not opts.silent:
            _console.print(
                f"Wrote {len(successes)} archived links to: {escape(str(path))}",
                highlight=False,
                soft_wrap=True,
            )


@app.command()
def links(
    urls: List[str] = typer.Argument(..., help="All links that should be archived via archive.is."),
    output: Optional[Path] = _OUTPUT,
    archives_only: bool = _ARCHIVES_ONLY,
    text: bool = _TEXT,
    append: bool = _APPEND,
    silent: bool = _SILENT,
    retries: Optional[int] = _RETRIES,
    ignore_failures: bool = _IGNORE_FAILURES,
    user_agent: Optional[str] = _USER_AGENT,
    concurrency: Optional[int] = _CONCURRENCY,
    verbose: bool = _VERBOSE,
) -> None:
    """Archive all links provided as arguments."""

    _archive(
        [u.strip() for u in urls if u.strip()],
        RunOptions(
            output=output,
            archives_only=archives_only,
            text=text,
            append=append,
            silent=silent,
            retries=retries,
            ignore_failures=ignore_failures,
            user_agent=user_agent,
            concurrency=concurrency,
            verbose=verbose,
        ),
    )


@app.command(name="file")
def from_file(
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Archive all the links in the line separated text file.",
    ),
    output: Optional[Path] = _OUTPUT,
    archives_only: bool = _ARCHIVES_ONLY,
    text: bool = _TEXT,
    append: bool = _APPEND,
    silent: bool = _SILENT,
    retries: Optional[int] = _RETRIES,
    ignore_failures: bool = _IGNORE_FAILURES,
    user_agent: Optional[str] = _USER_AGENT,
    concurrency: Optional[int] = _CONCURRENCY,
    verbose: bool = _VERBOSE,
) -> None:
    """Archive all the links in the line separated text file."""

    _archive(
        read_links(input_path),
        RunOptions(
            output=output,
            archives_only=archives_only,
            text=text,
            append=append,
            silent=silent,
            retries=retries,
            ignore_failures=ignore_failures,
            user_agent=user_agent,
            concurrency=concurrency,
            verbose=verbose,
        ),
    )


def run() -> None:
    app()
