"""Exportación de capturas a fichero.

Formatos:
- JSON (por defecto): lista de registros `{target_url, archived_url,
  submit_token, captured_at}` o, con `archives_only`, lista de links.
- Texto: una línea por captura (`target<TAB>archive` o solo el archive).

Con `append`, el texto se añade al final y el JSON existente se carga y se
extiende para que el fichero siga siendo una única lista válida.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from core.domain.errors import OutputError
from core.domain.models import CaptureResult


def _json_entries(results: Sequence[CaptureResult], archives_only: bool) -> list[Any]:
    if archives_only:
        return [r.archived_url for r in results]
    return [r.model_dump(mode="json") for r in results]


def _text_lines(results: Sequence[CaptureResult], archives_only: bool) -> list[str]:
    if archives_only:
        return [r.archived_url for r in results]
    return [f"{r.target_url}\t{r.archived_url}" for r in results]


def _load_existing_json(path: Path) -> list[Any]:
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise OutputError(f"Cannot append to {path}: not valid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise OutputError(f"Cannot append to {path}: expected a JSON list")
    return data


def write_captures(
    *,
    results: Sequence[CaptureResult],
    output_path: Path,
    text: bool = False,
    archives_only: bool = False,
    append: bool = False,
) -> Path:
    """Write `results` to `output_path` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    exists = output_path.exists()

    if text:
        lines = _text_lines(results, archives_only)
        mode = "a" if append and exists else "w"
        with output_path.open(mode, encoding="utf-8") as fh:
            for line in lines:
                fh.write(line + "\n")
        return output_path

    entries = _json_entries(results, archives_only)
    if append and exists:
        entries = _load_existing_json(output_path) + entries
    output_path.write_text(
        json.dumps(entries, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return output_path
