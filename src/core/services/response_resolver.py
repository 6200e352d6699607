"""Clasificación de la respuesta de un envío.

archive.is no devuelve el link archivado en el cuerpo sino en un header:
- captura nueva: `Refresh: 0;url=https://archive.is/wip/AbCd`
- URL ya archivada: redirección con `Location: https://archive.is/AbCd`

Este módulo es puro: misma respuesta + mismo target => mismo resultado.
"""

from __future__ import annotations

from datetime import datetime
from email.utils import parsedate_to_datetime

from core.domain.models import (
    CaptureError,
    CaptureErrorKind,
    CaptureOutcome,
    CaptureResult,
    RawResponse,
    SubmitToken,
    is_absolute_http_url,
)

DEFAULT_ARCHIVE_HEADER = "Refresh"
FALLBACK_ARCHIVE_HEADER = "Location"


def parse_archive_header(value: str | None) -> str | None:
    """Return the link carried by an archive header value.

    `"0;url=https://archive.is/X"` yields the part after `url=`; a value with
    no `url=` part is returned as-is (stripped).
    """

    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    lowered = value.lower()
    marker = lowered.find("url=")
    if marker != -1 and ";" in value[:marker]:
        link = value[marker + len("url="):].strip().strip("'\"")
        return link or None
    return value


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


def resolve_capture_response(
    response: RawResponse,
    target_url: str,
    token: SubmitToken,
    *,
    archive_header: str = DEFAULT_ARCHIVE_HEADER,
) -> CaptureOutcome:
    """Turn a submission response into a `CaptureResult` or a `CaptureError`."""

    if response.is_server_error:
        return CaptureError(
            kind=CaptureErrorKind.SERVER_ERROR,
            target_url=target_url,
            detail=f"HTTP {response.status_code}",
        )

    raw_value = response.header(archive_header)
    if (raw_value is None or not raw_value.strip()) and response.is_redirect:
        raw_value = response.header(FALLBACK_ARCHIVE_HEADER)

    archived_url = parse_archive_header(raw_value)
    if not archived_url or not is_absolute_http_url(archived_url):
        return CaptureError(
            kind=CaptureErrorKind.MISSING_URL,
            target_url=target_url,
            detail=f"HTTP {response.status_code}, {archive_header}={raw_value!r}",
        )

    return CaptureResult(
        target_url=target_url,
        archived_url=archived_url,
        submit_token=token,
        captured_at=_parse_date(response.header("Date")),
    )


def transport_failure(target_url: str, exc: BaseException) -> CaptureError:
    """Classify a transport exception raised while submitting `target_url`."""

    return CaptureError(
        kind=CaptureErrorKind.TRANSPORT,
        target_url=target_url,
        detail=str(exc) or exc.__class__.__name__,
    )
