"""Resumen de un set de resultados."""

from collections import Counter

from vitrina.models import PriceRange, ScoredProperty, SearchSummary


def summarize(properties: list[ScoredProperty]) -> SearchSummary:
    """Cantidad, precio promedio, rango de precios y conteo por tipo."""
    if not properties:
        return SearchSummary()

    prices = [p.listing.price for p in properties]
    unit_types = Counter(p.listing.property_type.value for p in properties)

    return SearchSummary(
        count=len(properties),
        average_price=float(round(sum(prices) / len(prices))),
        price_range=PriceRange(min=min(prices), max=max(prices)),
        unit_type_counts=dict(unit_types),
    )
