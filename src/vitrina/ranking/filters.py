"""
Filtros hard.

Descartan propiedades que violan criterios explícitos. No filtran por
ubicación: a los proveedores ya se les consulta por ubicación.
"""

from collections import Counter
from typing import Optional

from vitrina.models import ListingType, Property, SearchCriteria


def rejection_reason(prop: Property, criteria: SearchCriteria) -> Optional[str]:
    """Motivo por el que la propiedad no cumple los criterios, o None."""
    if criteria.min_price is not None and prop.price < criteria.min_price:
        return "price_below_min"
    if criteria.max_price is not None and prop.price > criteria.max_price:
        return "price_above_max"
    if criteria.bedrooms and prop.bedrooms < criteria.bedrooms:
        return "bedrooms"
    if criteria.bathrooms and prop.bathrooms < criteria.bathrooms:
        return "bathrooms"
    if criteria.pins_property_type and prop.property_type != criteria.property_type:
        return "property_type"
    if criteria.listing_type != ListingType.ANY and prop.listing_type != criteria.listing_type:
        return "listing_type"
    return None


def filter_properties(
    properties: list[Property], criteria: SearchCriteria
) -> tuple[list[Property], Counter]:
    """
    Aplica los filtros hard.

    Returns:
        (propiedades que cumplen, conteo de descartes por motivo)
    """
    kept = []
    rejected: Counter = Counter()
    for prop in properties:
        reason = rejection_reason(prop, criteria)
        if reason is None:
            kept.append(prop)
        else:
            rejected[reason] += 1
    return kept, rejected
