"""
Anotación de recomendaciones.

Agrega a cada propiedad final hasta 3 motivos cortos y, cuando hay al
menos 2 comparables, estadísticas de mercado contra propiedades similares
del set completo puntuado. Es puro: devuelve copias nuevas.
"""

import statistics
from datetime import datetime
from typing import Optional

from vitrina.models import (
    MarketComparison,
    PricePosition,
    ScoredProperty,
    SearchCriteria,
)
from vitrina.ranking.scorer import premium_features, reference_price_per_sqft

MAX_RECOMMENDATIONS = 3
MIN_COMPARABLES = 2

# Umbrales de las reglas
GOOD_VALUE_RATIO = 0.85
RECENT_DAYS = 7
UNDER_BUDGET_RATIO = 0.90
MARKET_BAND = 0.10


def annotate(
    diversified: list[ScoredProperty],
    all_scored: list[ScoredProperty],
    criteria: Optional[SearchCriteria] = None,
    now: Optional[datetime] = None,
) -> list[ScoredProperty]:
    """
    Anota las propiedades finales.

    Args:
        diversified: Propiedades a devolver
        all_scored: Set completo puntuado (fuente de comparables)
        criteria: Criterios (habilita reglas de dormitorio extra y presupuesto)
        now: Instante de referencia para la antigüedad
    """
    return [
        item.model_copy(
            update={
                "recommendations": tuple(build_recommendations(item, criteria, now)),
                "market_comparison": compare_to_market(item, all_scored),
            }
        )
        for item in diversified
    ]


def build_recommendations(
    item: ScoredProperty,
    criteria: Optional[SearchCriteria] = None,
    now: Optional[datetime] = None,
) -> list[str]:
    prop = item.listing
    reasons: list[str] = []

    price_per_sqft = prop.price_per_sqft
    if price_per_sqft is not None:
        if price_per_sqft <= reference_price_per_sqft(prop) * GOOD_VALUE_RATIO:
            reasons.append(f"Good value at ${price_per_sqft:,.2f}/sq ft")

    if criteria is not None and criteria.bedrooms is not None:
        extra = prop.bedrooms - criteria.bedrooms
        if extra >= 1:
            label = "bedroom" if extra == 1 else "bedrooms"
            reasons.append(f"{extra} extra {label} beyond your requirement")

    premium = premium_features(prop)
    if premium:
        reasons.append(f"Premium amenities: {', '.join(premium[:3])}")

    age = prop.age_days(now)
    if age <= RECENT_DAYS:
        days = int(age)
        reasons.append("New listing today" if days == 0 else f"Listed {days} days ago")

    if criteria is not None and criteria.max_price:
        if prop.price <= criteria.max_price * UNDER_BUDGET_RATIO:
            savings = criteria.max_price - prop.price
            reasons.append(f"${savings:,.0f} under your budget")

    return reasons[:MAX_RECOMMENDATIONS]


def compare_to_market(
    item: ScoredProperty, all_scored: list[ScoredProperty]
) -> Optional[MarketComparison]:
    """
    Estadísticas contra comparables: mismo tipo de unidad, misma operación,
    dormitorios a distancia <= 1. None si hay menos de 2 comparables.
    """
    prop = item.listing
    peers = [
        other.listing.price
        for other in all_scored
        if other.listing.id != prop.id
        and other.listing.property_type == prop.property_type
        and other.listing.listing_type == prop.listing_type
        and abs(other.listing.bedrooms - prop.bedrooms) <= 1
    ]
    if len(peers) < MIN_COMPARABLES:
        return None

    average = statistics.fmean(peers)
    cheaper = sum(1 for price in peers if price < prop.price)

    if prop.price < average * (1 - MARKET_BAND):
        position = PricePosition.BELOW_MARKET
    elif prop.price > average * (1 + MARKET_BAND):
        position = PricePosition.ABOVE_MARKET
    else:
        position = PricePosition.AT_MARKET

    return MarketComparison(
        comparable_count=len(peers),
        average_price=round(average, 2),
        median_price=round(statistics.median(peers), 2),
        percentile_rank=round(100 * cheaper / len(peers), 1),
        price_position=position,
    )
