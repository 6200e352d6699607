"""Shared pytest fixtures: a fake archive.is behind `httpx.MockTransport`."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from urllib.parse import parse_qs

import httpx
import pytest

from adapters.http_client import HttpxTransport, build_async_client
from core.config import AppSettings
from core.services.capture_pipeline import ArchiveClient

BASE_URL = "https://archive.test"
TOKEN = "1yPA39C6QcM84Dzspl+7s28rrAFOnliPMCiJtoP+OlTKmd5kJd21G4ucgTkx0mnZ"

LANDING_HTML = f"""<!DOCTYPE html>
<html><body>
<form id="submiturl" action="/submit/" method="POST">
  <input type="hidden" name="anyway" value="1"/>
  <input type="hidden" name="submitid" value="{TOKEN}"/>
  <input id="url" type="text" name="url" value=""/>
</form>
</body></html>
"""


def archive_link_for(target_url: str) -> str:
    slug = hashlib.md5(target_url.encode("utf-8")).hexdigest()[:6]
    return f"{BASE_URL}/wip/{slug}"


@dataclass
class FakeArchiveService:
    """Minimal archive.is: landing page with a token and a submit endpoint.

    Per-URL behaviour:
    - `server_errors`: answer HTTP 500.
    - `missing`: answer 200 without any archive header.
    - `broken`: raise a connection error.
    - `flaky`: fail (HTTP 503) on the first submission only.
    - `malformed`: answer 200 with an unparseable archive link.
    """

    landing_html: str = LANDING_HTML
    landing_status: int = 200
    server_errors: set[str] = field(default_factory=set)
    missing: set[str] = field(default_factory=set)
    broken: set[str] = field(default_factory=set)
    flaky: set[str] = field(default_factory=set)
    malformed: set[str] = field(default_factory=set)
    token_requests: int = 0
    submissions: list[dict[str, str]] = field(default_factory=list)
    submit_headers: list[httpx.Headers] = field(default_factory=list)

    def attempts(self, target_url: str) -> int:
        return sum(1 for s in self.submissions if s["url"] == target_url)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/":
            self.token_requests += 1
            return httpx.Response(self.landing_status, text=self.landing_html)

        if request.method == "POST" and request.url.path == "/submit/":
            form = {k: v[0] for k, v in parse_qs(request.content.decode("ascii")).items()}
            self.submissions.append(form)
            self.submit_headers.append(request.headers)
            target = form["url"]

            if target in self.broken:
                raise httpx.ConnectError("connection refused", request=request)
            if target in self.server_errors:
                return httpx.Response(500, text="Internal Server Error")
            if target in self.flaky and self.attempts(target) == 1:
                return httpx.Response(503, text="Service Unavailable")
            if target in self.malformed:
                return httpx.Response(200, headers={"Refresh": "0;url=http://[x/"}, text="")
            if target in self.missing:
                return httpx.Response(200, text="<html>queued</html>")
            return httpx.Response(
                200,
                headers={
                    "Refresh": f"0;url={archive_link_for(target)}",
                    "Date": "Mon, 19 Oct 2026 10:00:00 GMT",
                },
                text="",
            )

        return httpx.Response(404)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        base_url=BASE_URL,
        user_agent="archiveis-tests/1.0",
        max_concurrency=3,
        http_timeout_seconds=5.0,
        default_retries=0,
    )


@pytest.fixture
def service() -> FakeArchiveService:
    return FakeArchiveService()


@pytest.fixture
def make_transport(settings: AppSettings, service: FakeArchiveService):
    def factory() -> HttpxTransport:
        client = build_async_client(settings, transport=httpx.MockTransport(service))
        return HttpxTransport(settings, client=client)

    return factory


@pytest.fixture
def make_client(settings: AppSettings, make_transport):
    def factory(**kwargs) -> ArchiveClient:
        return ArchiveClient(settings, transport=make_transport(), **kwargs)

    return factory
