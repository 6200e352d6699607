"""Contratos de transporte y extracción de token.

Por qué Protocol:
- El Core solo depende de `execute(...)`: httpx, un stub de tests o cualquier
  otro cliente HTTP son intercambiables.
- El parseo del token está acoplado al HTML de archive.is; aislarlo permite
  cambiar la regla sin tocar la orquestación.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from core.domain.models import RawResponse, SubmitToken


@runtime_checkable
class Transport(Protocol):
    """Ejecuta una petición HTTP y devuelve una `RawResponse`.

    Reglas de diseño:
    - Es asíncrono: cada envío es I/O de red.
    - Los fallos de red se lanzan como `core.domain.errors.TransportError`;
      cualquier status HTTP (incluido 5xx) es una respuesta válida.
    """

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> RawResponse:
        ...


@runtime_checkable
class TokenExtractor(Protocol):
    """Extrae el token de envío del HTML de la página de inicio."""

    def extract(self, html: str) -> SubmitToken | None:
        """Devuelve el token o `None` si el formato no coincide."""

        ...
