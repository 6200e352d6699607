"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CaptureError, CaptureResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("archiveis", style="bold cyan")
    subtitle = Text("archive.is capture client", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_captures_table(results: Sequence[CaptureResult]) -> Table:
    table = Table(title=f"Archived links ({len(results)})")
    table.add_column("Target", style="white", overflow="fold")
    table.add_column("Archive", style="magenta", overflow="fold")
    for result in results:
        table.add_row(Text(result.target_url), Text(result.archived_url))
    return table


def build_failures_table(failures: Sequence[CaptureError]) -> Table:
    table = Table(title=f"Failed links ({len(failures)})", title_style="bold red")
    table.add_column("Target", style="white", overflow="fold")
    table.add_column("Reason", style="red", no_wrap=True)
    table.add_column("Detail", style="dim", overflow="fold")
    for failure in failures:
        table.add_row(
            Text(failure.target_url),
            failure.kind.label(),
            Text(failure.detail or ""),
        )
    return table
