"""
Score de match entre una propiedad y los criterios.

Suma de sub-scores independientes sobre una base de 50, redondeada y
recortada a [0, 100]. Es una función pura de (propiedad, criterios, now):
sin estado oculto ni aleatoriedad.
"""

from datetime import datetime
from typing import Optional

from vitrina.config import PREMIUM_FEATURES, REFERENCE_PRICE_PER_SQFT
from vitrina.models import ListingType, Property, SearchCriteria

BASE_SCORE = 50.0

# Precio
MAX_RANGE_FIT_POINTS = 25.0
BUDGET_TIERS = [(0.80, 15.0), (0.95, 10.0), (1.0, 5.0)]

# Features
MAX_FEATURE_POINTS = 15.0
PREMIUM_POINTS_EACH = 2.0
PREMIUM_POINTS_CAP = 6.0

# Tamaño
EXACT_BEDROOMS_POINTS = 10.0
ONE_EXTRA_BEDROOM_POINTS = 8.0
MORE_BEDROOMS_POINTS = 3.0
BATHROOM_BASE_POINTS = 3.0
BATHROOM_SURPLUS_POINTS = 2.0
MAX_BATHROOM_POINTS = 5.0

# Antigüedad: (días máximos, puntos). Más de 60 días no suma.
FRESHNESS_STEPS = [(3, 10.0), (7, 8.0), (14, 6.0), (30, 4.0), (60, 2.0)]

# Relación precio / superficie
MAX_VALUE_POINTS = 5.0


def score_property(
    prop: Property,
    criteria: SearchCriteria,
    now: Optional[datetime] = None,
) -> int:
    """
    Calcula el score de match.

    Args:
        prop: Propiedad a evaluar
        criteria: Criterios del usuario
        now: Instante de referencia para la antigüedad (default: ahora)

    Returns:
        Entero entre 0 y 100
    """
    total = (
        BASE_SCORE
        + price_fit(prop, criteria)
        + feature_fit(prop, criteria)
        + premium_bonus(prop)
        + size_fit(prop, criteria)
        + freshness(prop, now)
        + value_bonus(prop)
    )
    return max(0, min(100, int(round(total))))


def price_fit(prop: Property, criteria: SearchCriteria) -> float:
    low, high = criteria.min_price, criteria.max_price

    if low is not None and high is not None:
        # Premiar cercanía al punto medio del rango
        mid = (low + high) / 2
        half = (high - low) / 2
        if half <= 0:
            return MAX_RANGE_FIT_POINTS if prop.price == mid else 0.0
        closeness = max(0.0, 1 - abs(prop.price - mid) / half)
        return MAX_RANGE_FIT_POINTS * closeness

    if high is not None and high > 0:
        ratio = prop.price / high
        for limit, points in BUDGET_TIERS:
            if ratio <= limit:
                return points
    return 0.0


def feature_matches(requested: str, available: tuple[str, ...]) -> bool:
    """Match por substring sin distinguir mayúsculas ("laundry" ~ "In-unit laundry")."""
    wanted = requested.casefold()
    for feature in available:
        have = feature.casefold()
        if wanted in have or have in wanted:
            return True
    return False


def feature_fit(prop: Property, criteria: SearchCriteria) -> float:
    if not criteria.features:
        return 0.0
    matched = sum(1 for f in criteria.features if feature_matches(f, prop.features))
    return MAX_FEATURE_POINTS * matched / len(criteria.features)


def premium_features(prop: Property) -> list[str]:
    """Features de la propiedad que cuentan como premium."""
    return [
        feature
        for feature in prop.features
        if any(keyword in feature.casefold() for keyword in PREMIUM_FEATURES)
    ]


def premium_bonus(prop: Property) -> float:
    matched = {
        keyword
        for keyword in PREMIUM_FEATURES
        if any(keyword in feature.casefold() for feature in prop.features)
    }
    return min(PREMIUM_POINTS_CAP, PREMIUM_POINTS_EACH * len(matched))


def size_fit(prop: Property, criteria: SearchCriteria) -> float:
    points = 0.0

    if criteria.bedrooms is not None:
        extra = prop.bedrooms - criteria.bedrooms
        if extra == 0:
            points += EXACT_BEDROOMS_POINTS
        elif extra == 1:
            points += ONE_EXTRA_BEDROOM_POINTS
        elif extra > 1:
            points += MORE_BEDROOMS_POINTS

    if criteria.bathrooms is not None and prop.bathrooms >= criteria.bathrooms:
        surplus = prop.bathrooms - criteria.bathrooms
        points += min(
            MAX_BATHROOM_POINTS,
            BATHROOM_BASE_POINTS + BATHROOM_SURPLUS_POINTS * surplus,
        )

    return points


def freshness(prop: Property, now: Optional[datetime] = None) -> float:
    age = prop.age_days(now)
    for max_days, points in FRESHNESS_STEPS:
        if age <= max_days:
            return points
    return 0.0


def reference_price_per_sqft(prop: Property) -> float:
    key = "rent" if prop.listing_type == ListingType.RENT else "buy"
    return REFERENCE_PRICE_PER_SQFT[key]


def value_bonus(prop: Property) -> float:
    price_per_sqft = prop.price_per_sqft
    if price_per_sqft is None:
        return 0.0
    ratio = price_per_sqft / reference_price_per_sqft(prop)
    if ratio >= 1:
        return 0.0
    return min(MAX_VALUE_POINTS, (1 - ratio) * 10)
