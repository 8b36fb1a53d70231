"""
Agregación de proveedores.

Fan-out concurrente + cache de resultados por criteria.
"""

from vitrina.aggregation.cache import CacheEntry, SearchCache
from vitrina.aggregation.aggregator import Aggregator

__all__ = [
    "Aggregator",
    "SearchCache",
    "CacheEntry",
]
