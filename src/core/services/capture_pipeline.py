"""Orquestación de capturas en archive.is.

`ArchiveClient` compone token -> petición -> transporte -> resolución para un
link (`capture`) y reparte un único token entre muchos links (`capture_all`).
Los fallos por link se devuelven como `CaptureError`; solo el token compartido
puede abortar un batch (`TokenFetchError`).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from adapters.http_client import HttpxTransport
from adapters.token_extractors import MarkerTokenExtractor
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import BatchOutcome, CaptureError, CaptureOutcome, SubmitToken
from core.interfaces.transport import TokenExtractor, Transport
from core.services.request_builder import build_capture_request
from core.services.response_resolver import resolve_capture_response, transport_failure
from core.services.retry import retry_failures
from core.services.token_provider import TokenProvider

logger = logging.getLogger(__name__)


class ArchiveClient:
    """Cliente de captura de archive.is.

    Uso típico:

        async with ArchiveClient() as client:
            outcomes = await client.capture_all(["https://example.com/"])
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: Transport | None = None,
        extractor: TokenExtractor | None = None,
        token_provider: TokenProvider | None = None,
        user_agent: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owned_transport: HttpxTransport | None = None
        if transport is None:
            self._owned_transport = HttpxTransport(self._settings)
            transport = self._owned_transport
        self._transport = transport
        self._user_agent = user_agent or self._settings.user_agent
        self._max_concurrency = max_concurrency or self._settings.max_concurrency
        self._token_provider = token_provider or TokenProvider(
            transport=transport,
            extractor=extractor or MarkerTokenExtractor(self._settings.token_marker),
            landing_url=self._settings.landing_url,
            user_agent=self._user_agent,
        )

    async def __aenter__(self) -> "ArchiveClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    @property
    def user_agent(self) -> str:
        return self._user_agent

    async def fetch_token(self) -> SubmitToken:
        return await self._token_provider.fetch_token()

    async def capture(self, target_url: str, token: SubmitToken | None = None) -> CaptureOutcome:
        """Capture one link; fetches a token first unless one is given.

        Raises `TokenFetchError` only when a fresh token was needed and could
        not be obtained. Every other failure is returned as `CaptureError`.
        """

        if token is None:
            token = await self.fetch_token()

        request = build_capture_request(
            target_url,
            token,
            submit_url=self._settings.submit_url,
            user_agent=self._user_agent,
        )
        try:
            response = await self._transport.execute(
                request.method,
                request.url,
                headers=request.headers,
                body=request.body,
            )
        except TransportError as exc:
            outcome: CaptureOutcome = transport_failure(target_url, exc)
        else:
            outcome = resolve_capture_response(
                response,
                target_url,
                token,
                archive_header=self._settings.archive_header,
            )

        if isinstance(outcome, CaptureError):
            logger.info("Capture failed: %s", outcome.describe())
        else:
            logger.info("Archived %s -> %s", outcome.target_url, outcome.archived_url)
        return outcome

    async def capture_all(
        self,
        target_urls: Sequence[str],
        token: SubmitToken | None = None,
    ) -> BatchOutcome:
        """Capture every link with one shared token.

        The returned list has one outcome per input link, in input order,
        whatever the completion order of the concurrent submissions.
        """

        urls = list(target_urls)
        if not urls:
            return []

        if token is None:
            token = await self.fetch_token()

        sem = asyncio.Semaphore(max(1, self._max_concurrency))

        async def capture_one(url: str) -> CaptureOutcome:
            async with sem:
                return await self.capture(url, token)

        logger.debug("Capturing %d link(s), concurrency=%d", len(urls), self._max_concurrency)
        return list(await asyncio.gather(*(capture_one(url) for url in urls)))

    async def capture_all_with_retries(
        self,
        target_urls: Sequence[str],
        retries: int = 0,
        token: SubmitToken | None = None,
    ) -> BatchOutcome:
        """`capture_all` followed by up to `retries` rounds over the failures.

        The token of the first round is reused for every retry round.
        """

        urls = list(target_urls)
        if not urls:
            return []

        if token is None:
            token = await self.fetch_token()
        shared_token = token

        async def rerun(failed: list[str]) -> BatchOutcome:
            return await self.capture_all(failed, shared_token)

        outcomes = await self.capture_all(urls, shared_token)
        return await retry_failures(outcomes, retries, rerun)
