"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El cliente de archive.is, el transporte HTTP y la CLI leen la misma config.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__version__ = "0.1.0"

DEFAULT_USER_AGENT = f"archiveis-cli/{__version__}"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "archiveis"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "archiveis"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "archiveis"
    return Path.home() / ".config" / "archiveis"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVEIS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="https://archive.is",
        min_length=8,
        description="Base URL del servicio (archive.is / archive.ph / archive.today).",
    )
    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout por request (segundos). archive.is puede tardar en responder.",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent (firma) enviado en cada petición.",
    )
    max_concurrency: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Capturas simultáneas máximas dentro de un batch.",
    )
    archive_header: str = Field(
        default="Refresh",
        min_length=1,
        description="Header de respuesta que transporta la URL archivada.",
    )
    token_marker: str = Field(
        default='name="submitid',
        min_length=1,
        description="Marcador literal que precede al token en la página de inicio.",
    )
    default_retries: int = Field(
        default=0,
        ge=0,
        le=20,
        description="Reintentos por defecto para los links fallidos.",
    )

    @property
    def submit_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/submit/"

    @property
    def landing_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/"
