"""Motor de búsqueda."""

from vitrina.search.engine import SearchEngine

__all__ = ["SearchEngine"]
