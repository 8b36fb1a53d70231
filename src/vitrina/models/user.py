"""
Perfil de usuario.

Snapshot inmutable de las preferencias aprendidas. Se pasa explícitamente
al motor de búsqueda; el scoring nunca lo consulta.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vitrina.models.criteria import PropertyType, SearchCriteria


class PriceRangePattern(BaseModel):
    """Rango de precio que el usuario suele buscar."""

    model_config = ConfigDict(frozen=True)

    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    frequency: int = Field(default=1, ge=0)


class UserProfile(BaseModel):
    """Preferencias aprendidas de búsquedas anteriores."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    preferred_property_types: dict[PropertyType, int] = Field(
        default_factory=dict, description="Tipo -> cantidad de búsquedas"
    )
    feature_preferences: dict[str, float] = Field(
        default_factory=dict, description="Feature -> peso de importancia"
    )
    price_range_patterns: tuple[PriceRangePattern, ...] = Field(default_factory=tuple)


def apply_profile(criteria: SearchCriteria, profile: Optional[UserProfile]) -> SearchCriteria:
    """
    Devuelve criterios nuevos enriquecidos con el perfil.

    - Si el tipo de unidad es ANY, fija el tipo más buscado.
    - Agrega las 3 features de mayor peso (> 1) que no estén pedidas.
    - Si no hay límites de precio, adopta el rango más frecuente.
    """
    if profile is None:
        return criteria

    update: dict = {}

    if not criteria.pins_property_type:
        candidates = {
            t: n for t, n in profile.preferred_property_types.items() if t != PropertyType.ANY
        }
        if candidates:
            update["property_type"] = max(candidates, key=candidates.get)

    requested = {f.casefold() for f in criteria.features}
    top_features = sorted(
        profile.feature_preferences.items(), key=lambda item: item[1], reverse=True
    )[:3]
    extra = [f for f, weight in top_features if weight > 1 and f.casefold() not in requested]
    if extra:
        update["features"] = criteria.features | frozenset(extra)

    if criteria.min_price is None and criteria.max_price is None and profile.price_range_patterns:
        pattern = max(profile.price_range_patterns, key=lambda p: p.frequency)
        update["min_price"] = pattern.min_price
        update["max_price"] = pattern.max_price

    if not update:
        return criteria
    # model_copy no valida; reconstruimos para mantener los invariantes
    return SearchCriteria.model_validate({**criteria.model_dump(), **update})
