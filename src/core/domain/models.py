"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los resultados se serializan tal cual a JSON en la capa de salida.

Nota:
- Estos modelos describen *qué* es una captura, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Mapping, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

SubmitToken = str
"""Token opaco (`submitid`) emitido por la página de inicio del servicio."""


def is_absolute_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class CaptureRequest(BaseModel):
    """Petición de envío ya construida, lista para el transporte."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="POST", description="Método HTTP.")
    url: str = Field(..., description="Endpoint de envío (`<base>/submit/`).")
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"", description="Cuerpo form-urlencoded.")
    target_url: str = Field(..., description="URL que se quiere archivar.")
    token: SubmitToken = Field(..., description="Token usado en el envío.")


class RawResponse(BaseModel):
    """Respuesta neutral devuelta por cualquier transporte.

    Los headers se guardan en minúsculas; `header()` hace la búsqueda
    insensible a mayúsculas como en HTTP.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_header_names(cls, value: Mapping[str, str]) -> dict[str, str]:
        return {str(k).lower(): str(v) for k, v in dict(value).items()}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400


class CaptureResult(BaseModel):
    """Captura exitosa: el servicio devolvió un link permanente."""

    model_config = ConfigDict(frozen=True)

    target_url: str = Field(..., min_length=1, description="URL solicitada.")
    archived_url: str = Field(
        ...,
        min_length=1,
        description="Link permanente de archive.is que archiva `target_url`.",
    )
    submit_token: SubmitToken = Field(..., description="Token usado en el envío.")
    captured_at: datetime | None = Field(
        default=None,
        description="Momento de la captura según el header `Date` (si existe).",
    )

    @field_validator("archived_url")
    @classmethod
    def _archived_url_is_url(cls, value: str) -> str:
        if not is_absolute_http_url(value):
            raise ValueError(f"archived_url is not an absolute http(s) URL: {value!r}")
        return value


class CaptureErrorKind(str, Enum):
    """Clasificación de los fallos por item."""

    MISSING_URL = "missing_url"
    SERVER_ERROR = "server_error"
    TRANSPORT = "transport"

    def label(self) -> str:
        return {
            CaptureErrorKind.MISSING_URL: "no archive url returned",
            CaptureErrorKind.SERVER_ERROR: "server error",
            CaptureErrorKind.TRANSPORT: "transport failure",
        }[self]


class CaptureError(BaseModel):
    """Fallo de captura para un único link, devuelto como valor (no se lanza)."""

    model_config = ConfigDict(frozen=True)

    kind: CaptureErrorKind
    target_url: str = Field(..., description="URL cuya captura falló.")
    detail: str | None = Field(
        default=None,
        description="Causa subyacente (status code, excepción de red, etc.).",
    )

    def describe(self) -> str:
        text = f"{self.target_url}: {self.kind.label()}"
        if self.detail:
            text += f" ({self.detail})"
        return text


CaptureOutcome = Union[CaptureResult, CaptureError]
BatchOutcome = list[CaptureOutcome]
