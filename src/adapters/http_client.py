"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers para el token y los envíos.
- Implementa el contrato `core.interfaces.Transport`: el Core nunca ve httpx.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import RawResponse

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que token y envíos se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """`Transport` sobre un `httpx.AsyncClient`.

    Redirects: solo se siguen en GET (la página de inicio puede redirigir
    entre dominios espejo). En el POST de envío no, porque el link archivado
    viaja en los headers de la propia respuesta.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpxTransport":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> RawResponse:
        if self._client is None:
            self._client = build_async_client(self._settings)

        try:
            response = await self._client.request(
                method,
                url,
                headers=dict(headers or {}),
                content=body,
                follow_redirects=method.upper() == "GET",
            )
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %r", method, url, exc)
            raise TransportError(f"{exc.__class__.__name__}: {exc}") from exc

        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )
