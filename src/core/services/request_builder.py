"""Construcción de la petición de envío a archive.is."""

from __future__ import annotations

from urllib.parse import urlencode

from core.config import DEFAULT_USER_AGENT
from core.domain.models import CaptureRequest, SubmitToken

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_capture_request(
    target_url: str,
    token: SubmitToken,
    *,
    submit_url: str = "https://archive.is/submit/",
    user_agent: str | None = None,
) -> CaptureRequest:
    """Build the POST that asks the service to capture `target_url`.

    `anyway=1` forces a fresh snapshot even if the service already holds a
    recent one for the same URL.
    """

    body = urlencode({"url": target_url, "anyway": "1", "submitid": token})
    return CaptureRequest(
        method="POST",
        url=submit_url,
        headers={
            "User-Agent": user_agent or DEFAULT_USER_AGENT,
            "Content-Type": FORM_CONTENT_TYPE,
        },
        body=body.encode("ascii"),
        target_url=target_url,
        token=token,
    )
