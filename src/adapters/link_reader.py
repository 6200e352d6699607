"""Lectura de listas de links (un link por línea)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


def parse_links(lines: Iterable[str]) -> list[str]:
    """Strip lines, drop blanks and `#` comments, keep order and duplicates."""

    links: list[str] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        links.append(line)
    return links


def read_links(path: Path) -> list[str]:
    return parse_links(path.read_text(encoding="utf-8").splitlines())
