"""Tests for submit token extraction and the token provider."""

from __future__ import annotations

import logging

import httpx
import pytest

from adapters.http_client import HttpxTransport, build_async_client
from adapters.token_extractors import MarkerTokenExtractor, SoupTokenExtractor
from core.domain.errors import TokenFetchError
from core.services.token_provider import TokenProvider

from conftest import BASE_URL, LANDING_HTML, TOKEN


@pytest.mark.unit
class TestMarkerTokenExtractor:
    def test_extracts_value_after_marker(self):
        html = (
            'type="hidden" name="submitid" '
            'value="1yPA39C6QcM84Dzspl+7s28rrAFOnliPMCiJtoP+OlTKmd5kJd21G4ucgTkx0mnZ"/>'
        )
        assert MarkerTokenExtractor().extract(html) == (
            "1yPA39C6QcM84Dzspl+7s28rrAFOnliPMCiJtoP+OlTKmd5kJd21G4ucgTkx0mnZ"
        )

    def test_extracts_from_full_landing_page(self):
        assert MarkerTokenExtractor().extract(LANDING_HTML) == TOKEN

    def test_uses_last_marker_occurrence(self):
        html = (
            '<input name="submitid" value="old"/>'
            '<input name="submitid" value="new"/>'
        )
        assert MarkerTokenExtractor().extract(html) == "new"

    def test_missing_marker_returns_none(self):
        assert MarkerTokenExtractor().extract("<html><body>maintenance</body></html>") is None

    def test_missing_value_returns_none(self):
        assert MarkerTokenExtractor().extract('<input name="submitid"/>') is None

    def test_unterminated_value_returns_none(self):
        assert MarkerTokenExtractor().extract('<input name="submitid" value="abc') is None

    def test_empty_value_returns_none(self):
        assert MarkerTokenExtractor().extract('<input name="submitid" value=""/>') is None

    def test_custom_marker(self):
        html = '<input name="csrf" value="tok-1"/>'
        assert MarkerTokenExtractor('name="csrf').extract(html) == "tok-1"


@pytest.mark.unit
class TestSoupTokenExtractor:
    def test_extracts_hidden_input(self):
        assert SoupTokenExtractor().extract(LANDING_HTML) == TOKEN

    def test_attribute_order_does_not_matter(self):
        html = "<input value='abc123' type='hidden' name='submitid'>"
        assert SoupTokenExtractor().extract(html) == "abc123"

    def test_no_input_returns_none(self):
        assert SoupTokenExtractor().extract("<form></form>") is None

    def test_empty_html_returns_none(self):
        assert SoupTokenExtractor().extract("") is None


@pytest.mark.asyncio
async def test_provider_fetches_token(make_transport, service):
    provider = TokenProvider(
        transport=make_transport(),
        extractor=MarkerTokenExtractor(),
        landing_url=f"{BASE_URL}/",
    )

    assert await provider.fetch_token() == TOKEN
    assert service.token_requests == 1


@pytest.mark.asyncio
async def test_provider_does_not_log_token(make_transport, caplog):
    caplog.set_level(logging.DEBUG, logger="core.services.token_provider")
    provider = TokenProvider(
        transport=make_transport(),
        extractor=MarkerTokenExtractor(),
        landing_url=f"{BASE_URL}/",
    )

    await provider.fetch_token()

    assert f"({len(TOKEN)} chars)" in caplog.text
    assert TOKEN not in caplog.text


@pytest.mark.asyncio
async def test_provider_raises_when_layout_changed(make_transport, service):
    service.landing_html = "<html><body>new layout</body></html>"
    provider = TokenProvider(
        transport=make_transport(),
        extractor=MarkerTokenExtractor(),
        landing_url=f"{BASE_URL}/",
    )

    with pytest.raises(TokenFetchError, match="No submit token"):
        await provider.fetch_token()


@pytest.mark.asyncio
async def test_provider_raises_on_http_error_status(make_transport, service):
    service.landing_status = 503
    provider = TokenProvider(
        transport=make_transport(),
        extractor=MarkerTokenExtractor(),
        landing_url=f"{BASE_URL}/",
    )

    with pytest.raises(TokenFetchError, match="HTTP 503"):
        await provider.fetch_token()


@pytest.mark.asyncio
async def test_provider_raises_on_transport_error(settings):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = build_async_client(settings, transport=httpx.MockTransport(refuse))
    provider = TokenProvider(
        transport=HttpxTransport(settings, client=client),
        extractor=MarkerTokenExtractor(),
        landing_url=f"{BASE_URL}/",
    )

    with pytest.raises(TokenFetchError, match="Could not reach"):
        await provider.fetch_token()


@pytest.mark.asyncio
async def test_provider_sends_user_agent(settings):
    seen: list[str] = []

    def landing(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["User-Agent"])
        return httpx.Response(200, text=LANDING_HTML)

    client = build_async_client(settings, transport=httpx.MockTransport(landing))
    provider = TokenProvider(
        transport=HttpxTransport(settings, client=client),
        extractor=SoupTokenExtractor(),
        landing_url=f"{BASE_URL}/",
        user_agent="custom-agent/2.0",
    )

    assert await provider.fetch_token() == TOKEN
    assert seen == ["custom-agent/2.0"]
