"""Obtención del token de envío (`submitid`).

Un GET sin autenticar a la página de inicio y un extractor pluggable. Sin
reintentos: la política de reintentos pertenece a quien llama.
"""

from __future__ import annotations

import logging

from core.domain.errors import TokenFetchError, TransportError
from core.domain.models import SubmitToken
from core.interfaces.transport import TokenExtractor, Transport

logger = logging.getLogger(__name__)


class TokenProvider:
    def __init__(
        self,
        *,
        transport: Transport,
        extractor: TokenExtractor,
        landing_url: str = "https://archive.is/",
        user_agent: str | None = None,
    ) -> None:
        self._transport = transport
        self._extractor = extractor
        self._landing_url = landing_url
        self._user_agent = user_agent

    async def fetch_token(self) -> SubmitToken:
        """Fetch a fresh token or raise `TokenFetchError`."""

        headers = {"User-Agent": self._user_agent} if self._user_agent else {}
        logger.debug("Fetching submit token from %s", self._landing_url)
        try:
            response = await self._transport.execute("GET", self._landing_url, headers=headers)
        except TransportError as exc:
            raise TokenFetchError(f"Could not reach {self._landing_url}: {exc}") from exc

        if not response.is_success:
            raise TokenFetchError(
                f"Unexpected HTTP {response.status_code} while fetching {self._landing_url}"
            )

        token = self._extractor.extract(response.text)
        if not token:
            raise TokenFetchError(
                f"No submit token found in {self._landing_url} (page layout changed?)"
            )

        logger.debug("Got submit token (%d chars)", len(token))
        return token
