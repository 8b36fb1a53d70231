"""
Modelos de datos del sistema.

- Entrada: SearchCriteria (+ UserProfile opcional)
- Proveedores: Property
- Salida: ScoredProperty, SearchResult
"""

from vitrina.models.criteria import ListingType, PropertyType, SearchCriteria
from vitrina.models.property import (
    MarketComparison,
    PricePosition,
    Property,
    ScoredProperty,
)
from vitrina.models.search_result import PriceRange, SearchResult, SearchSummary
from vitrina.models.user import PriceRangePattern, UserProfile, apply_profile

__all__ = [
    # Entrada
    "SearchCriteria",
    "ListingType",
    "PropertyType",
    # Proveedores
    "Property",
    # Salida
    "ScoredProperty",
    "MarketComparison",
    "PricePosition",
    "SearchResult",
    "SearchSummary",
    "PriceRange",
    # Usuario
    "UserProfile",
    "PriceRangePattern",
    "apply_profile",
]
