"""Errores del dominio de búsqueda."""

from typing import Optional, Sequence


class VitrinaError(Exception):
    """Base de todos los errores del sistema."""


class ProviderError(VitrinaError):
    """Falló la llamada a un proveedor (timeout, transporte, respuesta inválida)."""

    def __init__(self, provider: str, cause: Optional[BaseException] = None, message: str = ""):
        self.provider = provider
        self.cause = cause
        detail = message or (f"{type(cause).__name__}: {cause}" if cause else "error desconocido")
        super().__init__(f"[{provider}] {detail}")


class NoResultsError(VitrinaError):
    """Modo estricto: ningún proveedor real devolvió resultados."""

    def __init__(self, criteria=None, providers: Sequence[str] = ()):
        self.criteria = criteria
        self.providers = tuple(providers)
        where = ", ".join(self.providers) or "ningún proveedor configurado"
        location = criteria.location if criteria is not None else "?"
        super().__init__(f"Sin resultados para {location} ({where})")


class AggregationError(VitrinaError):
    """Falla inesperada orquestando el fan-out (no atribuible a un proveedor)."""
