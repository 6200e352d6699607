"""Excepciones del dominio.

Solo se lanzan los fallos que abortan una operación completa (token,
transporte, salida). Los fallos por link viajan como `CaptureError`.
"""

from __future__ import annotations


class ArchiveError(Exception):
    """Base de todos los errores del cliente."""


class TokenFetchError(ArchiveError):
    """No se pudo obtener o extraer el token de envío."""


class TransportError(ArchiveError):
    """Fallo de red/conexión al ejecutar una petición."""


class OutputError(ArchiveError):
    """El fichero de salida existe pero no se puede extender."""
