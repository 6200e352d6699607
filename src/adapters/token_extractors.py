"""Extractores del token `submitid` de la página de inicio de archive.is.

Por qué dos implementaciones:
- `MarkerTokenExtractor` no depende de un parser HTML: busca un marcador
  literal y lee el valor que le sigue. Es la regla por defecto.
- `SoupTokenExtractor` usa BeautifulSoup sobre el `<input>` oculto; tolera
  cambios de orden de atributos o comillas.

Ambos son frágiles frente a cambios de layout del servicio: si devuelven
`None`, el proveedor de tokens lo reporta como `TokenFetchError`.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from core.domain.models import SubmitToken

DEFAULT_TOKEN_MARKER = 'name="submitid'


class MarkerTokenExtractor:
    """Reads the token after the last `marker` occurrence.

    The landing page contains `<input type="hidden" name="submitid" value="...">`;
    the value is whatever sits between `value="` and the next quote.
    """

    def __init__(self, marker: str = DEFAULT_TOKEN_MARKER) -> None:
        self._marker = marker

    def extract(self, html: str) -> SubmitToken | None:
        start = html.rfind(self._marker)
        if start == -1:
            return None
        rest = html[start + len(self._marker):]

        value_at = rest.find('value="')
        if value_at == -1:
            return None
        rest = rest[value_at + len('value="'):]

        end = rest.find('"')
        if end == -1:
            return None
        token = rest[:end]
        return token or None


class SoupTokenExtractor:
    """Looks up the hidden `<input name=...>` with BeautifulSoup."""

    def __init__(self, field_name: str = "submitid") -> None:
        self._field_name = field_name

    def extract(self, html: str) -> SubmitToken | None:
        if not html:
            return None

        soup = BeautifulSoup(html, "html.parser")
        tag = soup.find("input", attrs={"name": self._field_name})
        if tag is None:
            return None
        value = tag.get("value")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
