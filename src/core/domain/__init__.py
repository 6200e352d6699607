"""Modelos y errores del dominio de captura.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce httpx ni la CLI: solo tokens, capturas y fallos.
"""
