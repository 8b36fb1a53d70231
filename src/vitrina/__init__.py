"""Vitrina: búsqueda agregada de propiedades."""

__version__ = "0.1.0"
